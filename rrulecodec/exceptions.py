"""RRULE-specific exceptions for error handling."""

from typing import Optional


class RRuleError(ValueError):
    """Base exception for rule string parsing and formatting errors."""

    def __init__(self, message: str, line: Optional[str] = None, key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.key = key


class RRuleStructureError(RRuleError):
    """Exception raised when DTSTART/DTEND lines violate cross-line rules."""


class DuplicatePropertyError(RRuleStructureError):
    """Exception raised when DTSTART or DTEND occurs more than once."""


class InvalidRangeError(RRuleStructureError):
    """Exception raised when DTEND is not later than DTSTART."""


class ValueTypeMismatchError(RRuleStructureError):
    """Exception raised when DTSTART and DTEND have different value types."""


class TimezoneMismatchError(RRuleStructureError):
    """Exception raised when DTSTART and DTEND have different timezones."""


class RRuleEncodingError(RRuleError):
    """Exception raised when a date token conflicts with its qualifiers."""


class RRuleGrammarError(RRuleError):
    """Exception raised when a line or value cannot be parsed."""


class RRuleUnknownFieldError(RRuleError):
    """Exception raised for property, attribute or frequency names we do not know."""


class UnsupportedPropertyError(RRuleUnknownFieldError):
    """Exception raised for a top-level property other than RRULE, EXRULE, DTSTART, DTEND."""


class UnknownAttributeError(RRuleUnknownFieldError):
    """Exception raised for an unrecognized RRULE/EXRULE attribute key."""


class UnknownFrequencyError(RRuleUnknownFieldError):
    """Exception raised for an unrecognized FREQ name."""
