"""Conversion between RFC 5545 rule strings and structured recurrence options."""

from .datetime_field import format_date_time, parse_date_time
from .exceptions import (
    DuplicatePropertyError,
    InvalidRangeError,
    RRuleEncodingError,
    RRuleError,
    RRuleGrammarError,
    RRuleStructureError,
    RRuleUnknownFieldError,
    TimezoneMismatchError,
    UnknownAttributeError,
    UnknownFrequencyError,
    UnsupportedPropertyError,
    ValueTypeMismatchError,
)
from .models import DateTimeProperty, DateTimeValue, Frequency, Options
from .parser import RRuleStringParser, parse_string
from .serializer import options_to_string

__version__ = "1.0.0"

__all__ = [
    "DateTimeProperty",
    "DateTimeValue",
    "DuplicatePropertyError",
    "Frequency",
    "InvalidRangeError",
    "Options",
    "RRuleEncodingError",
    "RRuleError",
    "RRuleGrammarError",
    "RRuleStringParser",
    "RRuleStructureError",
    "RRuleUnknownFieldError",
    "TimezoneMismatchError",
    "UnknownAttributeError",
    "UnknownFrequencyError",
    "UnsupportedPropertyError",
    "ValueTypeMismatchError",
    "format_date_time",
    "options_to_string",
    "parse_date_time",
    "parse_string",
]
