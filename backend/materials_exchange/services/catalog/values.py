"""
Value parsing and collation for catalog cells.

Amounts arrive formatted for Russian locale: spaces (often no-break
spaces) as thousands separators and a comma as the decimal separator,
e.g. "1 250,75".
"""
import math
import re
import unicodedata
from typing import Any, Optional, Tuple

_WHITESPACE = re.compile(r"\s+")
_INTEGER = re.compile(r"[+-]?\d+")


def strip_separators(value: Any) -> str:
    """Remove every whitespace character, including no-break spaces"""
    if value is None:
        return ""
    return _WHITESPACE.sub("", str(value))


def parse_locale_number(value: Any) -> Optional[float]:
    """
    Parse a locale formatted amount.

    Returns None for empty, unparseable, NaN or infinite input, never
    raises.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = strip_separators(value).replace(",", ".")
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_locale_int(value: Any) -> Optional[int]:
    """Parse an integer code such as a material class; None when not integral"""
    text = strip_separators(value)
    if _INTEGER.fullmatch(text):
        return int(text)
    number = parse_locale_number(text)
    if number is None or not number.is_integer():
        return None
    return int(number)


def collation_key(value: Any) -> Tuple[str, str]:
    """
    Case-insensitive ordering key for text cells.

    Primary level ignores accents (so "ё" sorts with "е"), the secondary
    level keeps them apart.
    """
    folded = unicodedata.normalize("NFKD", str(value or "").casefold())
    base = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return base, folded
