"""Exception taxonomy for the numeric engine.

Every failure is raised synchronously at the offending call with a fixed
message.  The concrete classes also derive from the matching builtin so
callers written against ``ZeroDivisionError`` / ``ValueError`` keep
working.
"""
from __future__ import annotations

DIVISION_BY_ZERO = "Division by zero is not allowed"
NEGATIVE_RADICAND = "Cannot calculate square root of negative number"
NEGATIVE_FACTORIAL = "Factorial is not defined for negative numbers"
NEGATIVE_FIBONACCI = "Fibonacci is not defined for negative numbers"
EMPTY_VALUES = "Values must not be None or empty"
NEGATIVE_PLACES = "Decimal places must not be negative"


class NumericError(Exception):
    """Base for all engine errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DivisionByZero(NumericError, ZeroDivisionError):
    """Raised when dividing by exactly zero."""

    def __init__(self, message: str = DIVISION_BY_ZERO) -> None:
        super().__init__(message)


class InvalidArgument(NumericError, ValueError):
    """Raised when an input violates an operation's precondition."""
