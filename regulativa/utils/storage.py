"""Reading statute source files from disk or Supabase Storage."""

from __future__ import annotations

import time
from pathlib import Path, PurePosixPath
from typing import Tuple

from .db import get_supabase_client

DOWNLOAD_ATTEMPTS = 3


def split_bucket_path(path: str) -> Tuple[str, str]:
    if "/" not in path:
        raise ValueError(f"Invalid storage path: {path}")
    bucket, key = path.split("/", 1)
    return bucket, key


def download_bytes(path: str) -> bytes:
    """Download ``bucket/key`` from Supabase Storage, retrying with backoff."""
    bucket, key = split_bucket_path(path)
    client = get_supabase_client()
    attempts = 0
    backoff = 0.5
    while True:
        try:
            return client.storage.from_(bucket).download(key)
        except Exception:  # noqa: BLE001
            attempts += 1
            if attempts >= DOWNLOAD_ATTEMPTS:
                raise
            time.sleep(backoff)
            backoff *= 2


def read_source(path: str) -> Tuple[bytes, str]:
    """Return the file content and its suffix, from the local disk when the path exists."""
    local = Path(path)
    if local.exists():
        return local.read_bytes(), local.suffix
    return download_bytes(path), PurePosixPath(path).suffix
