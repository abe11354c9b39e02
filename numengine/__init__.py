"""Stateless numeric engine with an executable contract and a small CLI."""
from numengine.engine import DEFAULT_ENGINE, NumericEngine
from numengine.errors import DivisionByZero, InvalidArgument, NumericError

__all__ = [
    "DEFAULT_ENGINE",
    "NumericEngine",
    "NumericError",
    "DivisionByZero",
    "InvalidArgument",
]
