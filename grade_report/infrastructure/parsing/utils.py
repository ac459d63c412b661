"""Shared parsing utilities for Excel ingestion."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def clean_cell(value: object) -> str:
    if value is None:
        return ""
    s = str(value).strip()
    if s.upper() == "NAN":
        return ""
    return s


def parse_mark(value: object) -> float:
    """Blank cells count as zero; anything else must be a number."""
    s = clean_cell(value)
    if not s:
        return 0.0
    return float(s)


def is_numeric(value: object) -> bool:
    try:
        float(clean_cell(value))
    except ValueError:
        return False
    return True
