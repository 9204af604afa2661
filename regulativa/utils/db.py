"""Supabase access for Regulativa."""

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from supabase import Client, create_client

load_dotenv()


class MissingSupabaseConfig(RuntimeError):
    """Required Supabase settings are missing."""


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise MissingSupabaseConfig(
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in the environment to use the Supabase API."
        )
    return create_client(url, key)
