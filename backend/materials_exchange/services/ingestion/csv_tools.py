"""
Offline preparation of inventory exports

A combined export holds every balance unit's stock in one file. These
helpers split it into one document per balance unit and rewrite the
historical header spellings so the documents upload cleanly.
"""
import csv
import io
import logging
import re
from typing import Dict, Iterable, List, Optional

from materials_exchange.core.exceptions import ParseError
from .header_map import CANONICAL_HEADERS, DROPPED_HEADERS, field_for_header, normalize_header
from .parser import BOM, detect_delimiter

logger = logging.getLogger(__name__)

FILLER = re.compile(r"[,\s\\]+")
TRAILING_SEPARATORS = re.compile(r"[,\s]+$")

MIN_MEANINGFUL_CELLS = 3


def _read(text: Optional[str]) -> List[List[str]]:
    if text is None:
        raise ParseError("Document is empty")
    text = text.lstrip(BOM)
    if not text.strip():
        raise ParseError("Document is empty")
    try:
        return list(csv.reader(io.StringIO(text, newline=""), delimiter=detect_delimiter(text)))
    except csv.Error as e:
        raise ParseError(f"Malformed document: {e}") from e


def _write(header: List[str], rows: List[List[str]]) -> str:
    out = io.StringIO(newline="")
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    # BOM so spreadsheet tools open the file as UTF-8
    return BOM + out.getvalue()


def _dropped_indexes(header: List[str]) -> List[int]:
    dropped = {normalize_header(h) for h in DROPPED_HEADERS}
    return [i for i, h in enumerate(header) if normalize_header(h) in dropped]


def _without(cells: List[str], indexes: List[int]) -> List[str]:
    return [c for i, c in enumerate(cells) if i not in indexes]


def clean_cell(value: str) -> str:
    """Trim whitespace and the trailing ", " left by the export"""
    return TRAILING_SEPARATORS.sub("", value.strip())


def is_meaningful(value: str) -> bool:
    """A cell holding more than separators and backslashes"""
    return bool(FILLER.sub("", value or ""))


def split_by_tenant(text: Optional[str]) -> Dict[str, str]:
    """
    Split a combined export into one document per balance unit.

    Rows without a balance unit are skipped. The warehouse-name column is
    dropped from every output document.
    """
    records = _read(text)
    header = records[0]
    tenant_column = next(
        (i for i, h in enumerate(header) if field_for_header(h) == "tenant_key"), None
    )
    if tenant_column is None:
        raise ParseError("Document has no balance unit column")

    dropped = _dropped_indexes(header)
    groups: Dict[str, List[List[str]]] = {}
    skipped = 0
    for cells in records[1:]:
        if not any(c.strip() for c in cells):
            continue
        tenant_key = cells[tenant_column].strip() if tenant_column < len(cells) else ""
        if not tenant_key:
            skipped += 1
            continue
        groups.setdefault(tenant_key, []).append(_without(cells, dropped))

    if skipped:
        logger.warning(f"Skipped {skipped} rows without a balance unit")
    logger.info(f"Split export into {len(groups)} balance unit documents")
    out_header = _without(header, dropped)
    return {tenant: _write(out_header, rows) for tenant, rows in groups.items()}


def normalize_document(text: Optional[str]) -> str:
    """
    Rewrite an export for upload.

    Recognised headers become their canonical spelling, dropped columns
    are removed, cells are trimmed, and rows with fewer than three
    meaningful cells are discarded.
    """
    records = _read(text)
    header = records[0]
    dropped = _dropped_indexes(header)

    out_header = []
    for h in _without(header, dropped):
        field = field_for_header(h)
        out_header.append(CANONICAL_HEADERS[field] if field else h.strip())

    rows = []
    discarded = 0
    for cells in records[1:]:
        cleaned = [clean_cell(c) for c in _without(cells, dropped)]
        if sum(1 for c in cleaned if is_meaningful(c)) < MIN_MEANINGFUL_CELLS:
            discarded += 1
            continue
        rows.append(cleaned)

    if discarded:
        logger.info(f"Discarded {discarded} rows with fewer than {MIN_MEANINGFUL_CELLS} meaningful cells")
    return _write(out_header, rows)


def merge_documents(texts: Iterable[Optional[str]]) -> str:
    """
    Merge per balance unit documents back into one export.

    The header comes from the first document with data rows. Rows of later
    documents are matched to it by column name; columns the first header
    lacks are left out and missing ones stay empty. Documents without data
    rows and blank lines are skipped.
    """
    header: Optional[List[str]] = None
    rows: List[List[str]] = []
    merged = 0
    for text in texts:
        if text is None or not text.lstrip(BOM).strip():
            continue
        records = _read(text)
        body = [cells for cells in records[1:] if any(c.strip() for c in cells)]
        if not body:
            continue
        merged += 1
        if header is None:
            header = records[0]
        positions = {normalize_header(h): i for i, h in enumerate(records[0])}
        picks = [positions.get(normalize_header(h)) for h in header]
        rows.extend(
            [cells[i] if i is not None and i < len(cells) else "" for i in picks]
            for cells in body
        )

    if header is None:
        raise ParseError("No document contains data rows")
    logger.info(f"Merged {merged} documents, {len(rows)} rows")
    return _write(header, rows)


def tenant_file_name(tenant_key: str) -> Optional[str]:
    """File name for a balance unit document, None when the key is not a plain name"""
    key = (tenant_key or "").strip()
    if not key or key in (".", "..") or "/" in key or "\\" in key or "\x00" in key:
        return None
    return f"{key}.csv"
