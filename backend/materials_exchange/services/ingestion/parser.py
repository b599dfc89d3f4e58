"""
Inventory document parser

Turns an uploaded delimited-text export into rows for one tenant's slice.
"""
import csv
import io
import logging
from typing import Any, Dict, List, Mapping, Optional

from materials_exchange.core.exceptions import ParseError
from materials_exchange.services.catalog.values import parse_locale_int, parse_locale_number
from .header_map import FIELD_HEADERS, INTEGER_FIELDS, resolve_columns, unmatched_headers

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = ",;\t"
SNIFF_SAMPLE_SIZE = 8192
BOM = "\ufeff"


def decode_document(content: bytes) -> str:
    """Decode uploaded bytes as UTF-8, dropping a leading BOM"""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"Document is not valid UTF-8: {e}") from e


def detect_delimiter(text: str) -> str:
    """
    Delimiter of a document with a header row.

    The candidate that splits the header into the most recognised columns
    wins; headers may contain commas themselves, e.g. "Адрес склада (Город,
    район)". Ties are settled by sniffing a sample of several lines.
    """
    first_line = text.lstrip(BOM).split("\n", 1)[0]
    scores = {
        delimiter: len(resolve_columns(next(csv.reader([first_line], delimiter=delimiter), [])))
        for delimiter in CANDIDATE_DELIMITERS
    }
    best = max(scores.values())
    candidates = "".join(d for d in CANDIDATE_DELIMITERS if scores[d] == best)
    if len(candidates) == 1:
        return candidates
    try:
        return csv.Sniffer().sniff(text[:SNIFF_SAMPLE_SIZE], delimiters=candidates).delimiter
    except csv.Error:
        return candidates[0]


def _cell(raw: Mapping[Optional[str], Any], column: Optional[str]) -> str:
    if column is None:
        return ""
    value = raw.get(column)
    return value.strip() if isinstance(value, str) else ""


def _is_blank(raw: Mapping[Optional[str], Any]) -> bool:
    return not any(isinstance(v, str) and v.strip() for v in raw.values())


def build_row(raw: Mapping[Optional[str], Any], columns: Mapping[str, str], tenant_key: str) -> Dict[str, Any]:
    """One store row; tenant_key always comes from the upload target"""
    row: Dict[str, Any] = {}
    for field in FIELD_HEADERS:
        if field == "tenant_key":
            continue
        text = _cell(raw, columns.get(field))
        if field in INTEGER_FIELDS:
            row[field] = parse_locale_int(text) if text else None
        elif field == "profitability":
            row[field] = parse_locale_number(text) if text else None
        else:
            row[field] = text or None
    row["tenant_key"] = tenant_key
    return row


def parse_inventory_document(text: Optional[str], tenant_key: str) -> List[Dict[str, Any]]:
    """
    Parse a document with a header row into rows for ``tenant_key``.

    Raises:
        ParseError: empty document, no recognised columns, or no data rows
    """
    if text is None:
        raise ParseError("Document is empty")
    text = text.lstrip(BOM)
    if not text.strip():
        raise ParseError("Document is empty")

    reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=detect_delimiter(text))
    try:
        header = reader.fieldnames or []
        columns = resolve_columns(header)
        if not any(field != "tenant_key" for field in columns):
            raise ParseError("Document has no recognised inventory columns")

        rows = [
            build_row(raw, columns, tenant_key)
            for raw in reader
            if not _is_blank(raw)
        ]
    except csv.Error as e:
        raise ParseError(f"Malformed document: {e}") from e

    if not rows:
        raise ParseError("Document contains no data rows")

    ignored = unmatched_headers(header)
    if ignored:
        logger.info(f"Ignoring unrecognised columns: {', '.join(ignored)}")
    return rows
