"""Comma-separated number and weekday list codec for RRULE attribute values."""

import re
from typing import Any, List, Union

from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE, weekday

from .exceptions import RRuleGrammarError

WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)
WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
DAYS = dict(zip(WEEKDAY_CODES, WEEKDAYS))

_NUMBER_RE = re.compile(r"^[+-]?\d+$")
_ORDINAL_WEEKDAY_RE = re.compile(r"^([+-]?\d{1,2})([A-Z]{2})$", re.IGNORECASE)

NumberValue = Union[int, str]


def make_weekday(index: int, n: Any = None) -> weekday:
    """Build a weekday, treating an ordinal of 0 as "every occurrence"."""
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 6:
        raise RRuleGrammarError(f"Invalid weekday index: {index!r}")
    if n is None or n == 0:
        return weekday(index)
    return weekday(index, int(n))


def weekday_from_code(code: str) -> weekday:
    """Resolve a two-letter day code (MO..SU).

    Raises:
        RRuleGrammarError: If the code is not a known day
    """
    try:
        return DAYS[code.upper()]
    except (KeyError, AttributeError) as e:
        raise RRuleGrammarError(f"Invalid weekday code: {code!r}", key=str(code)) from e


def to_weekday(value: Any) -> weekday:
    """Normalize a weekday given as a weekday, index, [index, ordinal] pair or code."""
    if isinstance(value, weekday):
        return make_weekday(value.weekday, value.n)
    if isinstance(value, str):
        return parse_weekday_list(value)[0] if len(value) > 2 else weekday_from_code(value)
    if isinstance(value, (list, tuple)):
        if not value or len(value) > 2:
            raise RRuleGrammarError(f"Invalid weekday: {value!r}")
        return make_weekday(value[0], value[1] if len(value) == 2 else None)
    return make_weekday(value)


def format_weekday(value: Any) -> str:
    """Render a weekday as ``[ordinal]CODE``; positive ordinals carry a ``+``."""
    wd = to_weekday(value)
    code = WEEKDAY_CODES[wd.weekday]
    if wd.n:
        return f"{'+' if wd.n > 0 else ''}{wd.n}{code}"
    return code


def parse_weekday_list(value: str) -> List[weekday]:
    """Parse a BYDAY value such as ``MO,-1FR,+2SU``.

    Raises:
        RRuleGrammarError: If a day token is malformed
    """
    days = []
    for day in value.split(","):
        if len(day) == 2:
            days.append(weekday_from_code(day))
            continue

        match = _ORDINAL_WEEKDAY_RE.match(day)
        if not match:
            raise RRuleGrammarError(f"Invalid weekday token: {day!r}", key="BYDAY")
        ordinal, code = match.groups()
        days.append(make_weekday(weekday_from_code(code).weekday, int(ordinal)))
    return days


def format_weekday_list(values: Any) -> str:
    """Render BYDAY entries in any accepted input shape, comma-joined."""
    if not isinstance(values, (list, tuple)):
        values = [values]
    return ",".join(format_weekday(value) for value in values)


def parse_individual_number(value: str, strict: bool = False) -> NumberValue:
    """Parse one integer literal, passing anything else through as text.

    Raises:
        RRuleGrammarError: If ``strict`` is set and the value is not an integer
    """
    if _NUMBER_RE.match(value):
        return int(value)
    if strict:
        raise RRuleGrammarError(f"Invalid integer value: {value!r}")
    return value


def parse_number_list(value: str, strict: bool = False) -> Union[NumberValue, List[NumberValue]]:
    """Parse a comma-separated integer list; a single value collapses to a scalar."""
    if "," in value:
        return [parse_individual_number(item, strict) for item in value.split(",")]
    return parse_individual_number(value, strict)


def format_value(value: Any) -> str:
    """Stringify a scalar, or comma-join the stringified items of a list."""
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)
