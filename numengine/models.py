"""Request and result models for the command-line boundary.

An OperationRequest is the parsed form of one line of user input: an
operation token plus its numeric operands.  An OperationResult pairs the
request with the engine's answer and knows how to render itself.  This
module defines the data models only -- no evaluation logic.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class OperationRequest(BaseModel):
    """One parsed operation: ``pow 2 10`` -> operation='pow', operands=[2, 10]."""

    operation: str = Field(..., min_length=1, max_length=32)
    operands: list[float] = Field(..., min_length=1)

    @field_validator("operation")
    @classmethod
    def operation_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Operation must not be blank")
        return v.strip().lower()


def _format_number(value: float | int, precision: int) -> str:
    try:
        return f"{value:.{precision}f}"
    except OverflowError:
        # int too large for a float; print it exactly
        return str(value)


class OperationResult(BaseModel):
    """Outcome of a dispatched operation."""

    operation: str
    operands: list[float]
    value: bool | int | float | list[int]

    def formatted_value(self, precision: int = 2) -> str:
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, list):
            return "[" + ", ".join(str(v) for v in self.value) + "]"
        return _format_number(self.value, precision)

    def render(self, precision: int = 2) -> str:
        """Render as ``Result: 5.00 + 3.00 = 8.00`` or ``Result: sqrt(16.00) = 4.00``."""
        args = [_format_number(a, precision) for a in self.operands]
        value = self.formatted_value(precision)
        if len(args) == 2 and not self.operation.isalpha():
            return f"Result: {args[0]} {self.operation} {args[1]} = {value}"
        return f"Result: {self.operation}({', '.join(args)}) = {value}"
