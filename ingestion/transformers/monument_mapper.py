"""
Map flat catalog records onto the monument schema
"""

import re
from typing import Any, Callable, Dict, Optional
from schemas.normalized import FlatRecord, MonumentCreate
import logging

logger = logging.getLogger(__name__)


def _as_text(value: str) -> Optional[str]:
    return value


# Integer columns are 32-bit
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def _as_int(value: str) -> Optional[int]:
    """
    Parse a 32-bit integer, None if the text is not one.

    Only an optional sign and ASCII digits are accepted: no surrounding
    whitespace, no "_" separators.
    """
    if not _INT_PATTERN.fullmatch(value):
        return None

    number = int(value)
    if number < INT_MIN or number > INT_MAX:
        return None
    return number


def _as_float(value: str) -> Optional[float]:
    """Parse a float, None if the text is not one (strict, like _as_int)"""
    if value != value.strip() or "_" in value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


# Catalog tag name -> coercion. Built once; order follows the catalog.
MONUMENT_FIELDS: Dict[str, Callable[[str], Any]] = {
    "category": _as_text,
    "criteria_txt": _as_text,
    "danger": _as_text,
    "date_inscribed": _as_text,
    "extension": _as_int,
    "historical_description": _as_text,
    "http_url": _as_text,
    "id_number": _as_int,
    "image_url": _as_text,
    "iso_code": _as_text,
    "justification": _as_text,
    "latitude": _as_float,
    "longitude": _as_float,
    "location": _as_text,
    "long_description": _as_text,
    "region": _as_text,
    "revision": _as_int,
    "secondary_dates": _as_text,
    "short_description": _as_text,
    "site": _as_text,
    "states": _as_text,
    "transboundary": _as_int,
    "unique_number": _as_int,
}


class RecordMapper:
    """
    Convert a FlatRecord into a MonumentCreate.

    Handles:
    - Known fields only (unknown tags are ignored)
    - Type conversion per field
    - Bad values: the field is left unset, the rest of the record is kept
    """

    def __init__(self, fields: Dict[str, Callable[[str], Any]] = MONUMENT_FIELDS):
        self.fields = fields

    def map(self, record: FlatRecord) -> MonumentCreate:
        values = {}

        for name, coerce in self.fields.items():
            raw = record.get(name)
            if raw is None:
                continue

            value = coerce(raw)
            if value is None:
                logger.debug(f"Dropping field {name}: cannot convert {raw!r}")
                continue
            values[name] = value

        return MonumentCreate(**values)
