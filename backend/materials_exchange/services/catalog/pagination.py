"""
Fixed-size page windows over the filtered and sorted rows
"""
import math
from typing import List, Sequence, TypeVar

from materials_exchange.core.config import settings
from materials_exchange.core.exceptions import InvalidQueryError

T = TypeVar("T")


def validate_page_size(page_size: int) -> int:
    if page_size not in settings.PAGE_SIZE_OPTIONS:
        raise InvalidQueryError(
            f"Page size must be one of {', '.join(map(str, settings.PAGE_SIZE_OPTIONS))}"
        )
    return page_size


def paginate(rows: Sequence[T], page_index: int, page_size: int) -> List[T]:
    """Rows of page ``page_index`` (0-based); past the end is an empty page"""
    if page_index < 0:
        raise InvalidQueryError("Page index must be >= 0")
    validate_page_size(page_size)
    start = page_index * page_size
    return list(rows[start:start + page_size])


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0
