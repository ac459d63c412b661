"""Download gradesheets from plain URLs or shared Google Sheets."""
from __future__ import annotations

import logging

import requests

from grade_report.config import SETTINGS
from grade_report.errors import SourceFetchError

logger = logging.getLogger(__name__)

GOOGLE_SHEETS_MARKER = "docs.google.com/spreadsheets"
GOOGLE_SHEETS_EXPORT = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=xlsx"


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def normalize_sheet_url(url: str) -> str:
    """Rewrite a Google Sheets share link into its xlsx export link."""
    if GOOGLE_SHEETS_MARKER not in url:
        return url
    parts = url.split("/")
    sheet_id = ""
    for idx, part in enumerate(parts):
        if part == "d" and idx + 1 < len(parts):
            sheet_id = parts[idx + 1]
            break
    for sep in ("?", "#"):
        sheet_id = sheet_id.split(sep, 1)[0]
    return GOOGLE_SHEETS_EXPORT.format(sheet_id=sheet_id)


def fetch_workbook(url: str, timeout: float | None = None) -> bytes:
    target = normalize_sheet_url(url)
    logger.info("Fetching gradesheet from %s", target)
    try:
        response = requests.get(target, timeout=SETTINGS.fetch_timeout if timeout is None else timeout)
    except requests.RequestException as exc:
        raise SourceFetchError(f"failed to fetch URL: {exc}") from exc
    if response.status_code != requests.codes.ok:
        raise SourceFetchError(f"bad status: {response.status_code} {response.reason}")
    return response.content
