"""
Tabular data source.

Loads the conference sheet either from a URL (e.g. a published Google
Sheet) or from a local file, and turns it into raw rows: plain
dict[str, str] records keyed by the sheet's column headers.

Two text shapes are understood:
- CSV with a header row
- an HTML page containing a <table> (sheet "publish to web" export)

Only this module raises on load problems. Everything downstream of the
normalizer works with canonical Event objects.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Dict, List, Union

import requests
from bs4 import BeautifulSoup

from confswipe.model import Event
from confswipe.normalize import normalize

logger = logging.getLogger(__name__)

RawRow = Dict[str, str]

REQUEST_TIMEOUT = 30


class SourceError(Exception):
    """Base class for data load failures."""


class SourceUnavailable(SourceError):
    """The tabular data could not be fetched or read."""


class SourceParseError(SourceError):
    """The text could not be parsed as a table at all."""


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------


def _is_url(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


def fetch_text(location: Union[str, Path]) -> str:
    """
    Return the raw text of the data source.

    Raises SourceUnavailable if it cannot be fetched/read.
    """
    loc = str(location).strip()
    if not loc:
        raise SourceUnavailable("No data source configured")

    if _is_url(loc):
        try:
            resp = requests.get(loc, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise SourceUnavailable(f"Failed to fetch {loc}: {e}") from e
        return resp.text

    try:
        return Path(loc).expanduser().read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailable(f"Failed to read {loc}: {e}") from e


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def read_csv_rows(text: str) -> List[RawRow]:
    """
    Parse CSV text with a header row into raw rows.

    Surplus cells (unquoted commas in the last column) are glued back onto
    the last column so no data is lost.
    """
    reader = csv.reader(io.StringIO(text))
    try:
        header = next(reader, None)
        while header is not None and not any(h.strip() for h in header):
            header = next(reader, None)
        if header is None:
            raise SourceParseError("CSV has no header row")

        fields = [h.strip() for h in header]
        rows: List[RawRow] = []
        for cells in reader:
            if not any(c.strip() for c in cells):
                continue
            if len(cells) > len(fields):
                cells = cells[: len(fields) - 1] + [",".join(cells[len(fields) - 1 :])]
            row = {name: value for name, value in zip(fields, cells) if name}
            rows.append(row)
    except csv.Error as e:
        raise SourceParseError(f"Invalid CSV: {e}") from e

    return rows


def read_html_rows(html: str) -> List[RawRow]:
    """
    Parse the first <table> of an HTML page into raw rows.

    The first row that has any cells is the header.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        raise SourceParseError("HTML source contains no <table>")

    fields: List[str] = []
    rows: List[RawRow] = []
    for tr in table.find_all("tr"):
        cells = [c.get_text(" ", strip=True) for c in tr.find_all(["th", "td"])]
        if not cells:
            continue
        if not fields:
            fields = cells
            continue
        if not any(cells):
            continue
        rows.append({name: value for name, value in zip(fields, cells) if name})

    if not fields:
        raise SourceParseError("HTML table has no header row")

    return rows


def read_rows(text: str) -> List[RawRow]:
    """
    Parse source text into raw rows, detecting HTML vs CSV.
    """
    stripped = (text or "").lstrip()
    if not stripped:
        raise SourceParseError("Data source is empty")
    if stripped.startswith("<"):
        return read_html_rows(stripped)
    return read_csv_rows(text)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_events(location: Union[str, Path]) -> List[Event]:
    """
    Fetch, parse and normalize the data source in one go.

    Raises SourceUnavailable / SourceParseError on load failure.
    """
    text = fetch_text(location)
    rows = read_rows(text)
    logger.info("Read %d rows from %s", len(rows), location)
    return normalize(rows)
