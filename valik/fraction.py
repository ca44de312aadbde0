"""Exact rational numbers used for error rates."""

from __future__ import annotations

import math
import re

_DEFAULT_LIMITER = 1050
_MAX_ITERATIONS = 400

_SIMPLE_FLOAT = re.compile(r"^([+-]|)([0-9]+)(.([0-9]+)|)$")
_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:inf(?:inity)?|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)


def _round_half_away(value: float) -> int:
    magnitude = math.floor(abs(value) + 0.5)
    return -magnitude if value < 0 else magnitude


def _parse_float_prefix(text: str) -> float:
    """Parse the longest leading floating point number; 0.0 if there is none."""
    try:
        return float(text)
    except ValueError:
        match = _FLOAT_PREFIX.match(text)
        return float(match.group(0)) if match else 0.0


class Fraction:
    """A fraction with a positive denominator and a lower bound (limiter) for tiny values.

    The limiter is the smallest meaningful error rate denominator: values close to
    zero are represented as 1/limiter because they make searches very slow.
    """

    def __init__(self, numerator: int, denominator: int) -> None:
        numerator = int(numerator)
        denominator = int(denominator)
        if denominator == 0:
            raise ValueError("denominator can't be zero.")
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        self.numerator = numerator
        self.denominator = denominator
        self.limiter = _DEFAULT_LIMITER

    @classmethod
    def from_precision_limit(cls, precision_limit: int) -> Fraction:
        """The smallest representable error rate, 1 / max(1050, precision_limit)."""
        limiter = max(_DEFAULT_LIMITER, int(precision_limit))
        result = cls(1, limiter)
        result.limiter = limiter
        return result

    @classmethod
    def from_string(cls, text: str) -> Fraction:
        """Parse a decimal number exactly, or fall back to a binary approximation."""
        match = _SIMPLE_FLOAT.search(text)
        if match:
            sign, integer, _, fraction_digits = match.groups()
            fraction_digits = fraction_digits or ""
            numerator = int(integer + fraction_digits)
            denominator = 10 ** len(fraction_digits)
            if sign == "-":
                numerator = -numerator
            return cls(numerator, denominator)
        return cls.from_double(_parse_float_prefix(text))

    @classmethod
    def from_double_with_limit(cls, value: float, precision_limit: int) -> Fraction:
        """Like from_double, but values below the precision limit become 1/limiter."""
        if abs(value) < 1.0 / (precision_limit * 1.05):
            return cls.from_precision_limit(precision_limit)
        return cls.from_double(value)

    @classmethod
    def from_double(cls, value: float) -> Fraction:
        """The exact binary fraction of a floating point value."""
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"cannot convert {value} to a fraction.")
        normalized, exponent = math.frexp(value)
        for _ in range(_MAX_ITERATIONS):
            if normalized == math.floor(normalized):
                break
            if exponent <= -62 or exponent >= 62:
                break
            normalized *= 2.0
            exponent -= 1

        numerator = _round_half_away(normalized)
        denominator = 1
        if exponent > 0:
            numerator <<= exponent
        else:
            denominator <<= -exponent
        return cls(numerator, denominator)

    def __float__(self) -> float:
        return self.numerator / self.denominator

    def is_proper(self) -> bool:
        """True when |numerator| < denominator."""
        return abs(self.numerator) < self.denominator

    def __floor__(self) -> int:
        return self.numerator // self.denominator

    def __ceil__(self) -> int:
        return (self.numerator + self.denominator - 1) // self.denominator

    def __abs__(self) -> Fraction:
        return Fraction(abs(self.numerator), self.denominator)

    def inverse(self) -> Fraction:
        """The reciprocal; raises ValueError for zero."""
        return Fraction(self.denominator, self.numerator)

    def __truediv__(self, other: object) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        return self * other.inverse()

    def __mul__(self, other: object) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        return Fraction(self.numerator * other.numerator, self.denominator * other.denominator)

    def __sub__(self, other: object) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        return Fraction(
            self._numerator_times_denominator(other) - other._numerator_times_denominator(self),
            self.denominator * other.denominator,
        )

    def _numerator_times_denominator(self, other: Fraction) -> int:
        return self.numerator * other.denominator

    def limit_denominator(self, max_denominator: int = 1000000) -> Fraction:
        """The closest fraction whose denominator is at most max_denominator."""
        if self.denominator <= max_denominator:
            return self

        sign = -1 if self.numerator < 0 else 1
        p0, q0, p1, q1 = 0, 1, 1, 0
        n, d = abs(self.numerator), self.denominator
        while d != 0:
            a = n // d
            q2 = q0 + a * q1
            if q2 > max_denominator:
                break
            p0, q0, p1, q1 = p1, q1, p0 + a * p1, q2
            n, d = d, n - a * d

        k = (max_denominator - q0) // q1
        bound1 = Fraction(sign * (p0 + k * p1), q0 + k * q1)
        bound2 = Fraction(sign * p1, q1)

        distance1 = abs(bound1._numerator_times_denominator(self) - self._numerator_times_denominator(bound1))
        distance2 = abs(bound2._numerator_times_denominator(self) - self._numerator_times_denominator(bound2))
        return bound2 if distance2 <= distance1 else bound1

    def __str__(self) -> str:
        if self.denominator != self.limiter:
            return f"{self.numerator / self.denominator:g} = ({self.numerator}/{self.denominator})"
        return "0 = (0/1)"