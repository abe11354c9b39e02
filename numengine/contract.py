"""Formal contract for the numeric engine.

Each operation is described as a collection of:
- preconditions: what inputs must satisfy before the operation
- postconditions: what the output must satisfy given valid inputs
- error conditions: what inputs must cause specific exceptions, and with
  which message
- algebraic properties: mathematical relationships that must hold

The contract is machine-readable.  Validation tools iterate over it to
drive conformance tests and search for counterexamples.

Layers
------
IntRange        inclusive integer interval for exhaustive sweeps
Signature       input shape of an operation (picks value generators)
OperationSpec   per-operation contract (pre/post/error/properties)
BranchSpec      every decision point that white-box tests must cover
EngineContract  the full contract for the engine
build_contract  constructs an EngineContract for a given tolerance
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from numengine import errors
from numengine.errors import DivisionByZero, InvalidArgument


# ---------------------------------------------------------------------------
# Input shapes
# ---------------------------------------------------------------------------

class Signature(Enum):
    REAL_REAL = ("real", "real")
    REAL = ("real",)
    REAL_PLACES = ("real", "places")
    INT = ("int",)
    INT_INT = ("int", "int")
    VALUES = ("values",)

    @property
    def arity(self) -> int:
        return len(self.value)


@dataclass(frozen=True)
class IntRange:
    """Inclusive integer interval [lo, hi]."""

    lo: int
    hi: int

    def __post_init__(self) -> None:
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    def contains(self, v: int) -> bool:
        return self.lo <= v <= self.hi

    @property
    def width(self) -> int:
        return self.hi - self.lo + 1

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Precondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type
    message: str


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    signature: Signature
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]

    def accepts(self, *args: Any) -> bool:
        """True when every precondition holds for ``args``."""
        return all(pre.check(*args) for pre in self.preconditions)

    def expected_error(self, *args: Any) -> ErrorCondition | None:
        for ec in self.error_conditions:
            if ec.trigger(*args):
                return ec
        return None

    def in_domain(self, *args: Any) -> bool:
        """True when ``args`` is accepted and triggers no error condition."""
        return self.expected_error(*args) is None and self.accepts(*args)

    def property_applies(self, prop: AlgebraicProperty, *args: Any) -> bool:
        """Whether ``prop`` should be checked for ``args``.

        A property taking fewer inputs than the operation fills in the
        remaining operands itself and guards its own domain.
        """
        return prop.arity < self.signature.arity or self.in_domain(*args)


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class EngineContract:
    """Complete contract for the numeric engine."""

    tolerance: float
    operations: dict[str, OperationSpec]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def branch_ids(self) -> set[str]:
        return {b.id for b in self.branches}

    def by_signature(self, signature: Signature) -> list[OperationSpec]:
        return [op for op in self.operations.values() if op.signature is signature]


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def close(x: float, y: float, tolerance: float = 1e-9) -> bool:
    """Float equality that treats NaN == NaN and equal infinities as equal."""
    if math.isnan(x) or math.isnan(y):
        return math.isnan(x) and math.isnan(y)
    if math.isinf(x) or math.isinf(y):
        return x == y
    return math.isclose(x, y, rel_tol=tolerance, abs_tol=tolerance)


def naive_is_prime(n: int) -> bool:
    """Reference primality check by plain trial division."""
    if n < 2:
        return False
    return all(n % d for d in range(2, math.isqrt(n) + 1))


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _is_integral(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def _has_values(values: Any) -> bool:
    return values is not None and len(values) > 0


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(tolerance: float = 1e-9) -> EngineContract:
    """Construct the full engine contract."""
    tol = tolerance

    def _close(x: float, y: float) -> bool:
        return close(x, y, tol)

    finite_reals = Precondition(
        "finite_reals",
        "All operands are finite floats",
        lambda *xs: _finite(*xs),
    )
    integers = Precondition(
        "integers",
        "All operands are integers",
        lambda *xs: all(_is_integral(x) for x in xs),
    )

    # ------------------------------------------------------------------ add
    add_spec = OperationSpec(
        name="add",
        signature=Signature.REAL_REAL,
        preconditions=[finite_reals],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals a + b",
                lambda a, b, result: _close(result, a + b),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "add(a, b) == add(b, a)", 2,
                lambda eng, a, b: eng.add(a, b) == eng.add(b, a),
            ),
            AlgebraicProperty(
                "identity", "add(a, 0) == a", 1,
                lambda eng, a: eng.add(a, 0.0) == a,
            ),
        ],
    )

    # ------------------------------------------------------------- subtract
    subtract_spec = OperationSpec(
        name="subtract",
        signature=Signature.REAL_REAL,
        preconditions=[finite_reals],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals a - b",
                lambda a, b, result: _close(result, a - b),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "identity", "subtract(a, 0) == a", 1,
                lambda eng, a: eng.subtract(a, 0.0) == a,
            ),
            AlgebraicProperty(
                "self_inverse", "subtract(a, a) == 0 for finite a", 1,
                lambda eng, a: not _finite(a) or eng.subtract(a, a) == 0,
            ),
            AlgebraicProperty(
                "antisymmetry", "subtract(a, b) == -subtract(b, a)", 2,
                lambda eng, a, b: eng.subtract(a, b) == -eng.subtract(b, a),
            ),
        ],
    )

    # ------------------------------------------------------------- multiply
    multiply_spec = OperationSpec(
        name="multiply",
        signature=Signature.REAL_REAL,
        preconditions=[finite_reals],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals a * b",
                lambda a, b, result: _close(result, a * b),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "multiply(a, b) == multiply(b, a)", 2,
                lambda eng, a, b: eng.multiply(a, b) == eng.multiply(b, a),
            ),
            AlgebraicProperty(
                "identity", "multiply(a, 1) == a", 1,
                lambda eng, a: eng.multiply(a, 1.0) == a,
            ),
            AlgebraicProperty(
                "zero", "multiply(a, 0) == 0 for finite a", 1,
                lambda eng, a: not _finite(a) or eng.multiply(a, 0.0) == 0,
            ),
        ],
    )

    # --------------------------------------------------------------- divide
    def _round_trip(eng: Any, a: float, b: float) -> bool:
        if b == 0:
            return True
        product = eng.multiply(a, b)
        # Overflow or underflow in the product loses the original value.
        if not _finite(product) or (product == 0 and a != 0):
            return True
        if abs(product) < 1e-290:
            return True
        return close(eng.divide(product, b), a, max(tol, 1e-12))

    divide_spec = OperationSpec(
        name="divide",
        signature=Signature.REAL_REAL,
        preconditions=[
            finite_reals,
            Precondition("nonzero_divisor", "Divisor is not zero", lambda a, b: b != 0),
        ],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals a / b",
                lambda a, b, result: _close(result, a / b),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "division_by_zero",
                "DivisionByZero when the divisor is exactly zero",
                lambda a, b: b == 0,
                DivisionByZero,
                errors.DIVISION_BY_ZERO,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "round_trip", "divide(multiply(a, b), b) ~= a for b != 0", 2,
                _round_trip,
            ),
            AlgebraicProperty(
                "identity", "divide(a, 1) == a", 1,
                lambda eng, a: close(eng.divide(a, 1.0), a),
            ),
            AlgebraicProperty(
                "self", "divide(a, a) == 1 for finite a != 0", 1,
                lambda eng, a: a == 0 or not _finite(a) or eng.divide(a, a) == 1.0,
            ),
        ],
    )

    # ----------------------------------------------------------- percentage
    percentage_spec = OperationSpec(
        name="percentage",
        signature=Signature.REAL_REAL,
        preconditions=[finite_reals],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals value * pct / 100",
                lambda v, p, result: _close(result, v * p / 100.0),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "whole", "percentage(v, 100) ~= v", 1,
                lambda eng, v: close(eng.percentage(v, 100.0), v),
            ),
            AlgebraicProperty(
                "zero", "percentage(v, 0) == 0 for finite v", 1,
                lambda eng, v: not _finite(v) or eng.percentage(v, 0.0) == 0,
            ),
        ],
    )

    # ------------------------------------------------------------- absolute
    absolute_spec = OperationSpec(
        name="absolute",
        signature=Signature.REAL,
        preconditions=[finite_reals],
        postconditions=[
            Postcondition(
                "non_negative", "Result is >= 0",
                lambda v, result: result >= 0,
            ),
            Postcondition(
                "magnitude", "Result equals v or -v",
                lambda v, result: result == v or result == -v,
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "symmetry", "absolute(-v) == absolute(v)", 1,
                lambda eng, v: eng.absolute(-v) == eng.absolute(v),
            ),
            AlgebraicProperty(
                "idempotence", "absolute(absolute(v)) == absolute(v)", 1,
                lambda eng, v: eng.absolute(eng.absolute(v)) == eng.absolute(v),
            ),
        ],
    )

    # ---------------------------------------------------------------- round
    round_spec = OperationSpec(
        name="round",
        signature=Signature.REAL_PLACES,
        preconditions=[
            Precondition("finite_value", "Value is finite", lambda v, p: _finite(v)),
            Precondition("places_non_negative", "places >= 0", lambda v, p: p >= 0),
        ],
        postconditions=[
            Postcondition(
                "within_half_unit",
                "|result - value| <= half a unit in the last kept place",
                lambda v, p, result: (
                    abs(result - v) <= 0.5 / 10.0 ** p + tol * max(1.0, abs(v))
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_places",
                "InvalidArgument when places < 0",
                lambda v, p: p < 0,
                InvalidArgument,
                errors.NEGATIVE_PLACES,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "idempotence", "round(round(v, 2), 2) ~= round(v, 2)", 1,
                lambda eng, v: close(eng.round(eng.round(v, 2), 2), eng.round(v, 2)),
            ),
            AlgebraicProperty(
                "integers_fixed", "round(n, 0) == n for integral n", 1,
                lambda eng, v: (
                    not _finite(v)
                    or eng.round(float(math.floor(v)), 0) == math.floor(v)
                ),
            ),
        ],
    )

    # -------------------------------------------------------------- is_even
    is_even_spec = OperationSpec(
        name="is_even",
        signature=Signature.INT,
        preconditions=[integers],
        postconditions=[
            Postcondition(
                "result_correct", "Result is True iff 2 divides n",
                lambda n, result: result == (n % 2 == 0),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "sign_symmetry", "is_even(n) == is_even(-n)", 1,
                lambda eng, n: eng.is_even(n) == eng.is_even(-n),
            ),
            AlgebraicProperty(
                "alternation", "is_even(n) != is_even(n + 1)", 1,
                lambda eng, n: eng.is_even(n) != eng.is_even(n + 1),
            ),
        ],
    )

    # ------------------------------------------------------------- is_prime
    is_prime_spec = OperationSpec(
        name="is_prime",
        signature=Signature.INT,
        preconditions=[integers],
        postconditions=[
            Postcondition(
                "result_correct", "Result matches plain trial division",
                lambda n, result: result == naive_is_prime(n),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "le_one_not_prime", "is_prime(n) is False for n <= 1", 1,
                lambda eng, n: n > 1 or eng.is_prime(n) is False,
            ),
            AlgebraicProperty(
                "even_not_prime", "is_prime(n) is False for even n > 2", 1,
                lambda eng, n: n <= 2 or n % 2 or eng.is_prime(n) is False,
            ),
        ],
    )

    # ---------------------------------------------------------------- power
    def _pow_matches(base: float, exponent: float, result: float) -> bool:
        if base <= 0 or not _finite(result) or result == 0:
            return True
        log_result = exponent * math.log(base)
        if abs(log_result) > 700:
            return True
        return close(result, math.exp(log_result), max(tol, 1e-9 * max(1.0, abs(log_result))))

    power_spec = OperationSpec(
        name="power",
        signature=Signature.REAL_REAL,
        preconditions=[finite_reals],
        postconditions=[
            Postcondition(
                "positive_base", "For base > 0 the result is >= 0",
                lambda b, e, result: b <= 0 or result >= 0,
            ),
            Postcondition(
                "exp_log", "For base > 0 result ~= exp(e * ln(base))",
                _pow_matches,
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "zero_exponent", "power(b, 0) == 1", 1,
                lambda eng, b: eng.power(b, 0.0) == 1.0,
            ),
            AlgebraicProperty(
                "one_exponent", "power(b, 1) == b", 1,
                lambda eng, b: close(eng.power(b, 1.0), b),
            ),
            AlgebraicProperty(
                "negative_fractional_nan",
                "power(b, 0.5) is NaN for b < 0", 1,
                lambda eng, b: b >= 0 or math.isnan(eng.power(b, 0.5)),
            ),
        ],
    )

    # ---------------------------------------------------------- square_root
    square_root_spec = OperationSpec(
        name="square_root",
        signature=Signature.REAL,
        preconditions=[
            finite_reals,
            Precondition("non_negative", "x >= 0", lambda x: x >= 0),
        ],
        postconditions=[
            Postcondition(
                "non_negative", "Result is >= 0",
                lambda x, result: result >= 0,
            ),
            Postcondition(
                "squares_back", "result * result ~= x",
                lambda x, result: close(result * result, x, max(tol, 1e-12)),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_radicand",
                "InvalidArgument when x < 0",
                lambda x: x < 0,
                InvalidArgument,
                errors.NEGATIVE_RADICAND,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "root_of_square", "square_root(a * a) ~= |a|", 1,
                lambda eng, a: (
                    not _finite(a * a) or a * a == 0
                    or close(eng.square_root(a * a), abs(a), max(tol, 1e-12))
                ),
            ),
        ],
    )

    # ------------------------------------------------------------ factorial
    factorial_spec = OperationSpec(
        name="factorial",
        signature=Signature.INT,
        preconditions=[
            integers,
            Precondition("non_negative", "n >= 0", lambda n: n >= 0),
        ],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals math.factorial(n)",
                lambda n, result: result == math.factorial(n),
            ),
            Postcondition(
                "positive", "Result is >= 1",
                lambda n, result: result >= 1,
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_index",
                "InvalidArgument when n < 0",
                lambda n: n < 0,
                InvalidArgument,
                errors.NEGATIVE_FACTORIAL,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "recurrence", "factorial(n) == n * factorial(n - 1) for n >= 1", 1,
                lambda eng, n: n < 1 or eng.factorial(n) == n * eng.factorial(n - 1),
            ),
        ],
    )

    # ------------------------------------------------------------ fibonacci
    fibonacci_spec = OperationSpec(
        name="fibonacci",
        signature=Signature.INT,
        preconditions=[
            integers,
            Precondition("non_negative", "n >= 0", lambda n: n >= 0),
        ],
        postconditions=[
            Postcondition(
                "non_negative", "Result is >= 0",
                lambda n, result: result >= 0,
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_index",
                "InvalidArgument when n < 0",
                lambda n: n < 0,
                InvalidArgument,
                errors.NEGATIVE_FIBONACCI,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "recurrence",
                "fibonacci(n) == fibonacci(n - 1) + fibonacci(n - 2) for n >= 2", 1,
                lambda eng, n: (
                    n < 2
                    or eng.fibonacci(n) == eng.fibonacci(n - 1) + eng.fibonacci(n - 2)
                ),
            ),
        ],
    )

    # ------------------------------------------------------------------ gcd
    gcd_spec = OperationSpec(
        name="gcd",
        signature=Signature.INT_INT,
        preconditions=[integers],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals math.gcd(a, b)",
                lambda a, b, result: result == math.gcd(a, b),
            ),
            Postcondition(
                "non_negative", "Result is >= 0",
                lambda a, b, result: result >= 0,
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "gcd(a, b) == gcd(b, a)", 2,
                lambda eng, a, b: eng.gcd(a, b) == eng.gcd(b, a),
            ),
            AlgebraicProperty(
                "divides", "gcd(a, b) divides both a and b", 2,
                lambda eng, a, b: (
                    eng.gcd(a, b) == 0
                    or (a % eng.gcd(a, b) == 0 and b % eng.gcd(a, b) == 0)
                ),
            ),
            AlgebraicProperty(
                "sign_invariance", "gcd(-a, b) == gcd(a, b)", 2,
                lambda eng, a, b: eng.gcd(-a, b) == eng.gcd(a, b),
            ),
        ],
    )

    # ------------------------------------------------------------------ lcm
    lcm_spec = OperationSpec(
        name="lcm",
        signature=Signature.INT_INT,
        preconditions=[integers],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals math.lcm(a, b)",
                lambda a, b, result: result == math.lcm(a, b),
            ),
            Postcondition(
                "zero_absorbs", "Result is 0 when either input is 0",
                lambda a, b, result: (a != 0 and b != 0) or result == 0,
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "lcm(a, b) == lcm(b, a)", 2,
                lambda eng, a, b: eng.lcm(a, b) == eng.lcm(b, a),
            ),
            AlgebraicProperty(
                "gcd_product", "gcd(a, b) * lcm(a, b) == |a * b|", 2,
                lambda eng, a, b: eng.gcd(a, b) * eng.lcm(a, b) == abs(a * b),
            ),
        ],
    )

    # ------------------------------------------------------ generate_primes
    generate_primes_spec = OperationSpec(
        name="generate_primes",
        signature=Signature.INT,
        preconditions=[integers],
        postconditions=[
            Postcondition(
                "ascending", "Result is strictly ascending",
                lambda n, result: all(x < y for x, y in zip(result, result[1:])),
            ),
            Postcondition(
                "complete", "Result is exactly the primes <= limit",
                lambda n, result: result == [k for k in range(2, n + 1) if naive_is_prime(k)],
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "matches_is_prime", "generate_primes(n) == [k <= n if is_prime(k)]", 1,
                lambda eng, n: (
                    eng.generate_primes(n)
                    == [k for k in range(n + 1) if eng.is_prime(k)]
                ),
            ),
            AlgebraicProperty(
                "fresh_sequence", "Each call returns a new list", 1,
                lambda eng, n: eng.generate_primes(n) is not eng.generate_primes(n),
            ),
        ],
    )

    # ----------------------------------------------------------- aggregates
    def _aggregate_error(message: str) -> ErrorCondition:
        return ErrorCondition(
            "missing_or_empty",
            "InvalidArgument when values is None or empty",
            lambda values: not _has_values(values),
            InvalidArgument,
            message,
        )

    values_present = Precondition(
        "values_present", "values is a non-empty sequence", _has_values,
    )
    finite_values = Precondition(
        "finite_values", "Every value is finite",
        lambda values: _has_values(values) and _finite(*values),
    )

    average_spec = OperationSpec(
        name="average",
        signature=Signature.VALUES,
        preconditions=[values_present, finite_values],
        postconditions=[
            Postcondition(
                "result_correct", "Result equals sum / count",
                lambda values, result: _close(result, sum(values) / len(values)),
            ),
        ],
        error_conditions=[_aggregate_error(errors.EMPTY_VALUES)],
        properties=[
            AlgebraicProperty(
                "between_extremes", "min(values) <= average(values) <= max(values)", 1,
                lambda eng, values: (
                    eng.min(values) - tol * max(1.0, abs(eng.min(values)))
                    <= eng.average(values)
                    <= eng.max(values) + tol * max(1.0, abs(eng.max(values)))
                ),
            ),
        ],
    )

    max_spec = OperationSpec(
        name="max",
        signature=Signature.VALUES,
        preconditions=[values_present, finite_values],
        postconditions=[
            Postcondition(
                "member", "Result is one of the values",
                lambda values, result: result in values,
            ),
            Postcondition(
                "upper_bound", "Result is >= every value",
                lambda values, result: all(result >= v for v in values),
            ),
        ],
        error_conditions=[_aggregate_error(errors.EMPTY_VALUES)],
        properties=[
            AlgebraicProperty(
                "order_invariance", "max(values) == max(reversed(values))", 1,
                lambda eng, values: eng.max(values) == eng.max(values[::-1]),
            ),
        ],
    )

    min_spec = OperationSpec(
        name="min",
        signature=Signature.VALUES,
        preconditions=[values_present, finite_values],
        postconditions=[
            Postcondition(
                "member", "Result is one of the values",
                lambda values, result: result in values,
            ),
            Postcondition(
                "lower_bound", "Result is <= every value",
                lambda values, result: all(result <= v for v in values),
            ),
        ],
        error_conditions=[_aggregate_error(errors.EMPTY_VALUES)],
        properties=[
            AlgebraicProperty(
                "order_invariance", "min(values) == min(reversed(values))", 1,
                lambda eng, values: eng.min(values) == eng.min(values[::-1]),
            ),
            AlgebraicProperty(
                "min_le_max", "min(values) <= max(values)", 1,
                lambda eng, values: eng.min(values) <= eng.max(values),
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # Division
        BranchSpec("DIV-ZERO", "DivisionByZero on b == 0", "b == 0", "divide"),
        BranchSpec("DIV-NORMAL", "IEEE-754 quotient", "b != 0", "divide"),
        # Rounding
        BranchSpec(
            "ROUND-NEGATIVE-PLACES", "InvalidArgument on negative places",
            "places < 0", "round",
        ),
        BranchSpec(
            "ROUND-PASSTHROUGH", "Value returned unchanged",
            "value not finite or value * 10**places not finite", "round",
        ),
        BranchSpec(
            "ROUND-SCALED", "Half-up rounding on the scaled value",
            "value * 10**places finite", "round",
        ),
        # Primality
        BranchSpec("PRIME-LE-ONE", "n <= 1 is not prime", "n <= 1", "is_prime"),
        BranchSpec("PRIME-SMALL", "2 and 3 are prime", "1 < n <= 3", "is_prime"),
        BranchSpec(
            "PRIME-DIV-2-3", "Multiples of 2 or 3 rejected",
            "n % 2 == 0 or n % 3 == 0", "is_prime",
        ),
        BranchSpec(
            "PRIME-WHEEL-HIT", "Divisor found on the 6k +/- 1 wheel",
            "n % i == 0 or n % (i + 2) == 0", "is_prime",
        ),
        BranchSpec(
            "PRIME-WHEEL-MISS", "Wheel exhausted without a divisor",
            "no i with i * i <= n divides n", "is_prime",
        ),
        # Power
        BranchSpec("POW-NORMAL", "math.pow succeeds", "no exception", "power"),
        BranchSpec(
            "POW-OVERFLOW", "Overflow mapped to signed infinity",
            "math.pow raises OverflowError", "power",
        ),
        BranchSpec(
            "POW-ZERO-NEGATIVE", "Zero to a negative power is infinite",
            "base == 0 and exponent < 0", "power",
        ),
        BranchSpec(
            "POW-UNDEFINED", "Undefined real power is NaN",
            "base < 0 and exponent not integral", "power",
        ),
        # Roots and sequences
        BranchSpec("SQRT-NEGATIVE", "InvalidArgument on x < 0", "x < 0", "square_root"),
        BranchSpec("SQRT-NORMAL", "Non-negative root", "x >= 0", "square_root"),
        BranchSpec("FACT-NEGATIVE", "InvalidArgument on n < 0", "n < 0", "factorial"),
        BranchSpec("FACT-NORMAL", "Iterative product", "n >= 0", "factorial"),
        BranchSpec("FIB-NEGATIVE", "InvalidArgument on n < 0", "n < 0", "fibonacci"),
        BranchSpec("FIB-NORMAL", "Iterative pair update", "n >= 0", "fibonacci"),
        BranchSpec("LCM-ZERO", "Zero absorbs", "a == 0 or b == 0", "lcm"),
        BranchSpec("LCM-NORMAL", "|a * b| // gcd(a, b)", "a != 0 and b != 0", "lcm"),
        BranchSpec(
            "PRIMES-BELOW-TWO", "Empty list below 2", "limit < 2", "generate_primes",
        ),
        BranchSpec("PRIMES-SIEVE", "Sieve of Eratosthenes", "limit >= 2", "generate_primes"),
        # Aggregate validation (_require_values)
        BranchSpec("AGG-MISSING", "InvalidArgument on None", "values is None", "aggregate"),
        BranchSpec("AGG-EMPTY", "InvalidArgument on empty", "len(values) == 0", "aggregate"),
        BranchSpec("AGG-VALID", "Non-empty input accepted", "len(values) > 0", "aggregate"),
    ]

    return EngineContract(
        tolerance=tolerance,
        operations={
            op.name: op
            for op in (
                add_spec,
                subtract_spec,
                multiply_spec,
                divide_spec,
                percentage_spec,
                absolute_spec,
                round_spec,
                is_even_spec,
                is_prime_spec,
                power_spec,
                square_root_spec,
                factorial_spec,
                fibonacci_spec,
                gcd_spec,
                lcm_spec,
                generate_primes_spec,
                average_spec,
                max_spec,
                min_spec,
            )
        },
        branches=branches,
    )
