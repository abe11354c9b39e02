"""Operator registry and dispatch.

Maps the textual operation tokens accepted by the CLI onto engine
operations, converts operands to the types each operation expects, and
returns an OperationResult.  Engine errors propagate unchanged.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from numengine.contract import Signature
from numengine.engine import DEFAULT_ENGINE, NumericEngine
from numengine.models import OperationRequest, OperationResult

logger = logging.getLogger(__name__)


class UnknownOperation(ValueError):
    """Raised when an operation token is not registered."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Unknown operation: {token}")


class MalformedInput(ValueError):
    """Raised when a line of input cannot be turned into a call."""


@dataclass(frozen=True)
class Operator:
    token: str
    method: str
    signature: Signature
    description: str

    def convert(self, operands: list[float]) -> list:
        """Check operand count and coerce integer slots to ``int``."""
        if self.signature is Signature.VALUES:
            return [list(operands)]
        if len(operands) != self.signature.arity:
            raise MalformedInput(
                f"'{self.token}' expects {self.signature.arity} operand(s), "
                f"got {len(operands)}"
            )
        args: list = []
        for kind, value in zip(self.signature.value, operands):
            if kind == "real":
                args.append(value)
                continue
            if not value.is_integer():
                raise MalformedInput(
                    f"'{self.token}' expects an integer operand, got {value}"
                )
            args.append(int(value))
        return args


OPERATORS: dict[str, Operator] = {
    op.token: op
    for op in (
        Operator("+", "add", Signature.REAL_REAL, "a + b"),
        Operator("-", "subtract", Signature.REAL_REAL, "a - b"),
        Operator("*", "multiply", Signature.REAL_REAL, "a * b"),
        Operator("/", "divide", Signature.REAL_REAL, "a / b"),
        Operator("%", "percentage", Signature.REAL_REAL, "b percent of a"),
        Operator("pow", "power", Signature.REAL_REAL, "a raised to b"),
        Operator("round", "round", Signature.REAL_PLACES, "a rounded to b places"),
        Operator("gcd", "gcd", Signature.INT_INT, "greatest common divisor"),
        Operator("lcm", "lcm", Signature.INT_INT, "least common multiple"),
        Operator("sqrt", "square_root", Signature.REAL, "square root"),
        Operator("abs", "absolute", Signature.REAL, "absolute value"),
        Operator("factorial", "factorial", Signature.INT, "n!"),
        Operator("fib", "fibonacci", Signature.INT, "nth Fibonacci number"),
        Operator("prime", "is_prime", Signature.INT, "primality test"),
        Operator("even", "is_even", Signature.INT, "parity test"),
        Operator("primes", "generate_primes", Signature.INT, "primes up to n"),
        Operator("avg", "average", Signature.VALUES, "arithmetic mean"),
        Operator("max", "max", Signature.VALUES, "largest value"),
        Operator("min", "min", Signature.VALUES, "smallest value"),
    )
}


def parse_request(tokens: list[str]) -> OperationRequest:
    """Build a request from ``[operation, operand, ...]`` tokens."""
    if len(tokens) < 2:
        raise MalformedInput("Expected an operation followed by at least one operand")
    try:
        return OperationRequest(operation=tokens[0], operands=tokens[1:])
    except ValidationError as e:
        raise MalformedInput(f"Invalid operands: {' '.join(tokens[1:])}") from e


def dispatch(
    request: OperationRequest, engine: NumericEngine = DEFAULT_ENGINE
) -> OperationResult:
    """Evaluate a request against the engine."""
    try:
        op = OPERATORS[request.operation]
    except KeyError:
        raise UnknownOperation(request.operation) from None

    args = op.convert(request.operands)
    logger.debug(
        "Dispatching %s", op.method, extra={"token": op.token, "operands": args}
    )
    value = getattr(engine, op.method)(*args)
    return OperationResult(
        operation=request.operation, operands=request.operands, value=value
    )
