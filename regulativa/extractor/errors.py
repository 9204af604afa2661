"""Errors raised while turning source files into text."""


class ExtractionError(RuntimeError):
    """The source document could not be turned into text."""


class InvalidPdf(ExtractionError):
    pass


class ImageOnlyPdf(ExtractionError):
    """The PDF has no text layer; OCR would be required."""


class UnsupportedDocument(ExtractionError):
    """Format that needs conversion first (DOC, DOCX) or an unknown extension."""
