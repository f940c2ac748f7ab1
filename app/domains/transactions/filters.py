"""Query predicates for the transactions collection.

A predicate renders itself as a MongoDB query document (``to_query``) and can
also be evaluated against a plain document (``matches``). Both forms must agree,
so in-memory evaluation is usable wherever the store is not.
"""

import datetime
import logging
import re
from typing import Any, Dict, Optional, Tuple

DATE_FIELD = "dateOfSale"
SEARCH_FIELDS = (("title", "string"), ("description", "string"), ("price", "number"))

# Same rendering as MongoDB's $dateToString default
DATE_TEXT_FORMAT = "%Y-%m-%dT%H:%M:%S.%LZ"

_ISO_MONTH = re.compile(r"^\s*(\d{4})-(\d{1,2})(?:-\d{1,2}(?:[T ].*)?)?\s*$")
_NAMED_MONTH_FORMATS = ("%B %Y", "%b %Y")
_EMPTY_RANGE_START = datetime.datetime(1970, 1, 1)


class Predicate:
    def to_query(self) -> Dict[str, Any]:
        raise NotImplementedError

    def matches(self, doc: Dict[str, Any]) -> bool:
        raise NotImplementedError


class MatchAll(Predicate):
    def to_query(self) -> Dict[str, Any]:
        return {}

    def matches(self, doc: Dict[str, Any]) -> bool:
        return True


class TextPattern(Predicate):
    """Case-insensitive regex match against the textual form of a field.

    ``kind`` tells how a non-string field is turned into text: ``"number"``
    goes through ``$toString`` and ``"date"`` through ``$dateToString``.
    """

    def __init__(self, field: str, pattern: str, kind: str = "string"):
        if kind not in ("string", "number", "date"):
            raise ValueError(f"Unknown field kind: {kind}")
        # Fail on invalid patterns before anything is sent to the store
        self.compiled = re.compile(pattern, re.IGNORECASE)
        self.field = field
        self.pattern = pattern
        self.kind = kind

    def to_query(self) -> Dict[str, Any]:
        if self.kind == "string":
            return {self.field: {"$regex": self.pattern, "$options": "i"}}

        if self.kind == "number":
            text_expr = {"$toString": f"${self.field}"}
        else:
            text_expr = {"$dateToString": {"format": DATE_TEXT_FORMAT, "date": f"${self.field}"}}
        return {
            "$expr": {
                "$regexMatch": {"input": text_expr, "regex": self.pattern, "options": "i"}
            }
        }

    def matches(self, doc: Dict[str, Any]) -> bool:
        value = doc.get(self.field)
        if value is None:
            return False
        return self.compiled.search(field_text(value, self.kind)) is not None


class DateRange(Predicate):
    """Half-open ``[start, end)`` range on a datetime field."""

    def __init__(self, field: str, start: datetime.datetime, end: datetime.datetime):
        self.field = field
        self.start = start
        self.end = end

    def to_query(self) -> Dict[str, Any]:
        return {self.field: {"$gte": self.start, "$lt": self.end}}

    def matches(self, doc: Dict[str, Any]) -> bool:
        value = doc.get(self.field)
        if not isinstance(value, datetime.datetime):
            return False
        return self.start <= value < self.end


class And(Predicate):
    def __init__(self, *parts: Predicate):
        self.parts = [p for p in parts if not isinstance(p, MatchAll)]

    def to_query(self) -> Dict[str, Any]:
        if not self.parts:
            return {}
        if len(self.parts) == 1:
            return self.parts[0].to_query()
        return {"$and": [p.to_query() for p in self.parts]}

    def matches(self, doc: Dict[str, Any]) -> bool:
        return all(p.matches(doc) for p in self.parts)


class Or(Predicate):
    def __init__(self, *parts: Predicate):
        self.parts = list(parts)

    def to_query(self) -> Dict[str, Any]:
        if not self.parts or any(isinstance(p, MatchAll) for p in self.parts):
            return {}
        if len(self.parts) == 1:
            return self.parts[0].to_query()
        return {"$or": [p.to_query() for p in self.parts]}

    def matches(self, doc: Dict[str, Any]) -> bool:
        # an empty group adds no constraint, same as And()
        if not self.parts:
            return True
        return any(p.matches(doc) for p in self.parts)


def field_text(value: Any, kind: str) -> str:
    if kind == "date":
        # %f gives microseconds, MongoDB renders milliseconds
        return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
    if kind == "number" and isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_month(month: Optional[str]) -> Optional[Tuple[int, int]]:
    """Return ``(year, month)`` for a month selector, or None when unreadable."""
    if not month:
        return None

    match = _ISO_MONTH.match(month)
    if match:
        parsed = int(match.group(1)), int(match.group(2))
    else:
        parsed = None
        for fmt in _NAMED_MONTH_FORMATS:
            try:
                named = datetime.datetime.strptime(month.strip(), fmt)
            except ValueError:
                continue
            parsed = named.year, named.month
            break

    if parsed is None:
        return None
    year, month_number = parsed
    if not 1 <= month_number <= 12:
        return None
    # both ends of the range must be representable datetimes
    if year < datetime.MINYEAR or (year, month_number) >= (datetime.MAXYEAR, 12):
        return None
    return year, month_number


def month_range(year: int, month: int) -> Tuple[datetime.datetime, datetime.datetime]:
    start_date = datetime.datetime(year, month, 1)
    if month == 12:
        end_date = datetime.datetime(year + 1, 1, 1)
    else:
        end_date = datetime.datetime(year, month + 1, 1)
    return start_date, end_date


def month_filter(month: Optional[str]) -> DateRange:
    """Calendar-month filter on the sale date.

    An unreadable month gives an empty range, so the month has no records.
    """
    parsed = parse_month(month)
    if parsed is None:
        logging.warning(f"Unreadable month selector {month!r}, using an empty date range")
        return DateRange(DATE_FIELD, _EMPTY_RANGE_START, _EMPTY_RANGE_START)

    start_date, end_date = month_range(*parsed)
    return DateRange(DATE_FIELD, start_date, end_date)


def listing_filter(month: Optional[str] = None, search_text: Optional[str] = None) -> Predicate:
    """Filter for the transaction listing.

    The month is a text pattern over the rendered sale date, not a calendar
    range. The search text matches title, description or price.
    """
    month_part: Predicate = MatchAll()
    if month:
        month_part = TextPattern(DATE_FIELD, month, kind="date")

    search_part: Predicate = MatchAll()
    if search_text:
        search_part = Or(*(TextPattern(field, search_text, kind=kind) for field, kind in SEARCH_FIELDS))

    return And(month_part, search_part)
