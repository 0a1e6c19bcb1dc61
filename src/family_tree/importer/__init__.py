"""
Import Sanitizer package.

Re-exports the decode/sanitize entry points used by the session and CLI.
"""

from __future__ import annotations

from .sanitizer import (
    Accepted,
    ImportReport,
    Rejected,
    decode_payload,
    normalize_import,
    parse_import_text,
    sanitize_import,
    sanitize_records,
)

__all__ = [
    "Accepted",
    "ImportReport",
    "Rejected",
    "decode_payload",
    "normalize_import",
    "parse_import_text",
    "sanitize_import",
    "sanitize_records",
]
