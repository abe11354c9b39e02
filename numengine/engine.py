"""Stateless numeric engine.

Every operation validates its inputs, computes, and returns; nothing is
cached and nothing survives between calls.  Decision branches are
annotated with their branch-IDs (see contract.py BranchSpec) so white-box
tests can trace coverage back to the contract.
"""
from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from numengine.errors import (
    EMPTY_VALUES,
    NEGATIVE_FACTORIAL,
    NEGATIVE_FIBONACCI,
    NEGATIVE_PLACES,
    NEGATIVE_RADICAND,
    DivisionByZero,
    InvalidArgument,
)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == int(x) and int(x) % 2 == 1


@dataclass(frozen=True)
class NumericEngine:

    # -- internal helpers ---------------------------------------------------

    @staticmethod
    def _require_values(values: Iterable[float] | None) -> list[float]:
        """Materialise an aggregate input, rejecting None and empty.

        Branches: AGG-MISSING, AGG-EMPTY, AGG-VALID
        """
        if values is None:                                        # AGG-MISSING
            raise InvalidArgument(EMPTY_VALUES)
        items = list(values)
        if not items:                                             # AGG-EMPTY
            raise InvalidArgument(EMPTY_VALUES)
        return items                                              # AGG-VALID

    # -- arithmetic ---------------------------------------------------------

    def add(self, a: float, b: float) -> float:
        return a + b

    def subtract(self, a: float, b: float) -> float:
        return a - b

    def multiply(self, a: float, b: float) -> float:
        return a * b

    def divide(self, a: float, b: float) -> float:
        """IEEE-754 division; only an exact zero divisor is rejected.

        Branches: DIV-ZERO, DIV-NORMAL
        """
        if b == 0:                                                # DIV-ZERO
            raise DivisionByZero()
        return float(a) / float(b)                                # DIV-NORMAL

    def percentage(self, value: float, pct: float) -> float:
        return value * pct / 100.0

    def absolute(self, value: float) -> float:
        return abs(value)

    def round(self, value: float, places: int) -> float:
        """Round half-up on ``value * 10**places`` and scale back.

        Branches: ROUND-NEGATIVE-PLACES, ROUND-PASSTHROUGH, ROUND-SCALED
        """
        if places < 0:                                            # ROUND-NEGATIVE-PLACES
            raise InvalidArgument(NEGATIVE_PLACES)
        if not math.isfinite(value):                              # ROUND-PASSTHROUGH
            return value
        try:
            scale = 10.0 ** places
        except OverflowError:                                     # ROUND-PASSTHROUGH
            return value
        scaled = value * scale
        if not math.isfinite(scaled):                             # ROUND-PASSTHROUGH
            return value
        # scaled - floor(scaled) is exact; scaled + 0.5 is not.
        floor = math.floor(scaled)
        if scaled - floor >= 0.5:                                 # ROUND-SCALED
            floor += 1
        return floor / scale

    # -- number theory ------------------------------------------------------

    def is_even(self, n: int) -> bool:
        return n % 2 == 0

    def is_prime(self, n: int) -> bool:
        """Trial division over the 6k +/- 1 wheel.

        Branches: PRIME-LE-ONE, PRIME-SMALL, PRIME-DIV-2-3, PRIME-WHEEL-HIT,
                  PRIME-WHEEL-MISS
        """
        if n <= 1:                                                # PRIME-LE-ONE
            return False
        if n <= 3:                                                # PRIME-SMALL
            return True
        if n % 2 == 0 or n % 3 == 0:                              # PRIME-DIV-2-3
            return False
        i = 5
        while i * i <= n:
            if n % i == 0 or n % (i + 2) == 0:                    # PRIME-WHEEL-HIT
                return False
            i += 6
        return True                                               # PRIME-WHEEL-MISS

    def power(self, base: float, exponent: float) -> float:
        """Real exponentiation with IEEE-754 results for undefined cases.

        ``math.pow`` raises where IEEE-754 produces a special value, so
        those cases are mapped back: overflow to a signed infinity,
        zero to a negative power to infinity, everything else to NaN.

        Branches: POW-NORMAL, POW-OVERFLOW, POW-ZERO-NEGATIVE, POW-UNDEFINED
        """
        try:
            return math.pow(base, exponent)                       # POW-NORMAL
        except OverflowError:                                     # POW-OVERFLOW
            negative = base < 0 and _is_odd_integer(exponent)
            return -math.inf if negative else math.inf
        except ValueError:
            if base == 0:                                         # POW-ZERO-NEGATIVE
                negative = (
                    math.copysign(1.0, base) < 0 and _is_odd_integer(exponent)
                )
                return -math.inf if negative else math.inf
            return math.nan                                       # POW-UNDEFINED

    def square_root(self, x: float) -> float:
        """Branches: SQRT-NEGATIVE, SQRT-NORMAL"""
        if x < 0:                                                 # SQRT-NEGATIVE
            raise InvalidArgument(NEGATIVE_RADICAND)
        return math.sqrt(x)                                       # SQRT-NORMAL

    def factorial(self, n: int) -> int:
        """Iterative product 1..n; 0! is 1.

        Branches: FACT-NEGATIVE, FACT-NORMAL
        """
        if n < 0:                                                 # FACT-NEGATIVE
            raise InvalidArgument(NEGATIVE_FACTORIAL)
        result = 1
        for i in range(2, n + 1):                                 # FACT-NORMAL
            result *= i
        return result

    def fibonacci(self, n: int) -> int:
        """Iterative Fibonacci, O(n) time and O(1) space.

        Branches: FIB-NEGATIVE, FIB-NORMAL
        """
        if n < 0:                                                 # FIB-NEGATIVE
            raise InvalidArgument(NEGATIVE_FIBONACCI)
        a, b = 0, 1
        for _ in range(n):                                        # FIB-NORMAL
            a, b = b, a + b
        return a

    def gcd(self, a: int, b: int) -> int:
        a, b = abs(a), abs(b)
        while b:
            a, b = b, a % b
        return a

    def lcm(self, a: int, b: int) -> int:
        """Branches: LCM-ZERO, LCM-NORMAL"""
        if a == 0 or b == 0:                                      # LCM-ZERO
            return 0
        return abs(a * b) // self.gcd(a, b)                       # LCM-NORMAL

    def generate_primes(self, limit: int) -> list[int]:
        """All primes <= limit in ascending order (sieve of Eratosthenes).

        Branches: PRIMES-BELOW-TWO, PRIMES-SIEVE
        """
        if limit < 2:                                             # PRIMES-BELOW-TWO
            return []
        sieve = bytearray([1]) * (limit + 1)                      # PRIMES-SIEVE
        sieve[0] = sieve[1] = 0
        i = 2
        while i * i <= limit:
            if sieve[i]:
                sieve[i * i :: i] = bytes(len(range(i * i, limit + 1, i)))
            i += 1
        return [n for n, flag in enumerate(sieve) if flag]

    # -- aggregates ---------------------------------------------------------

    def average(self, values: Iterable[float] | None) -> float:
        items = self._require_values(values)
        return float(sum(items)) / len(items)

    def max(self, values: Iterable[float] | None) -> float:
        return float(max(self._require_values(values)))

    def min(self, values: Iterable[float] | None) -> float:
        return float(min(self._require_values(values)))


# Shared instance for callers that do not need their own.
DEFAULT_ENGINE = NumericEngine()
