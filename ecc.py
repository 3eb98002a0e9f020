"""
Point arithmetic on short Weierstrass curves y² = x³ + ax + b.

A Curve is either an integer curve, whose coordinates are unbounded
integers (or rationals when a slope does not divide evenly), or a curve
over a prime field, whose coordinates are FieldElements. The two kinds
are never mixed on one curve.
"""

from dataclasses import dataclass
from fractions import Fraction
from numbers import Rational
from typing import Optional, Union

from sympy import isprime

from finite_field import FieldElement, IncompatibleFieldError

Coordinate = Union[int, Fraction, FieldElement]


class InvalidPointError(ValueError):
    def __init__(self, message):
        self.message = f"Invalid point. {message}"
        super().__init__(self.message)


class CurveMismatchError(TypeError):
    def __init__(self, message):
        self.message = f"Curve mismatch. {message}"
        super().__init__(self.message)


def _show(value):
    return value.num if isinstance(value, FieldElement) else value


@dataclass(frozen=True)
class Curve:
    a: Coordinate
    """Coefficient a."""
    b: Coordinate
    """Coefficient b."""
    prime: Optional[int] = None
    """Modulus of the coordinate field, or None for an integer curve."""

    def __post_init__(self):
        if self.prime is not None and not isprime(self.prime):
            raise ValueError(f"Field modulus {self.prime} is not prime")
        object.__setattr__(self, "a", self.lift(self.a))
        object.__setattr__(self, "b", self.lift(self.b))

    @classmethod
    def over_field(cls, a: Coordinate, b: Coordinate, prime: int) -> "Curve":
        return cls(a, b, prime)

    def lift(self, value) -> Coordinate:
        """Bring a coefficient or coordinate into this curve's domain."""
        if self.prime is None:
            if isinstance(value, FieldElement):
                raise IncompatibleFieldError(f"{value!r} cannot be used on the integer curve {self}.")
            if not isinstance(value, Rational):
                raise TypeError(f"Expected an integer or rational coordinate, got {type(value).__name__}")
            return value
        if isinstance(value, FieldElement):
            if value.prime != self.prime:
                raise IncompatibleFieldError(f"{value!r} does not belong to the curve {self}.")
            return value.normalized()
        if isinstance(value, int) and not isinstance(value, bool):
            return FieldElement(value % self.prime, self.prime)
        raise TypeError(f"Expected an integer or FieldElement_{self.prime}, got {type(value).__name__}")

    def is_on_curve(self, x, y) -> bool:
        x, y = self.lift(x), self.lift(y)
        return y ** 2 == x ** 3 + self.a * x + self.b

    def new_point(self, x, y) -> "Point":
        return Point(x, y, self)

    def new_infinity(self) -> "Point":
        return Point(None, None, self)

    def _divide(self, numerator, denominator):
        # Field division for field curves, exact rational division otherwise.
        if self.prime is not None:
            return numerator / denominator
        quotient = Fraction(numerator, denominator)
        return quotient.numerator if quotient.denominator == 1 else quotient

    def __str__(self):
        over = f" over F_{self.prime}" if self.prime is not None else ""
        return f"y^2 = x^3 + {_show(self.a)}x + {_show(self.b)}{over}"


@dataclass(frozen=True)
class Point:
    x: Optional[Coordinate]
    y: Optional[Coordinate]
    curve: Curve

    def __post_init__(self):
        if self.x is None and self.y is None:
            return  # Point at infinity
        if self.x is None or self.y is None:
            raise InvalidPointError("A finite point needs both coordinates.")

        x, y = self.curve.lift(self.x), self.curve.lift(self.y)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)
        if not self.curve.is_on_curve(x, y):
            raise InvalidPointError(f"({_show(x)}, {_show(y)}) is not on the curve {self.curve}")

    @property
    def is_infinity(self) -> bool:
        return self.x is None

    def equals(self, other: Optional["Point"]) -> bool:
        return isinstance(other, Point) and self == other

    def add(self, other: "Point") -> "Point":
        """
        Add two points with the chord-and-tangent rule.

        - If either point is at infinity, return the other one
        - If the points are mirror images (same x), return infinity
        - If the points coincide, use the tangent slope (3x² + a) / 2y
        - Otherwise use the chord slope (y₂ - y₁) / (x₂ - x₁)
        """
        if not isinstance(other, Point):
            raise TypeError(f"Cannot add Point and {type(other).__name__}")
        if self.curve != other.curve:
            raise CurveMismatchError(f"Points are on {self.curve} and {other.curve}.")

        curve = self.curve
        if self.is_infinity:
            return other
        if other.is_infinity:
            return self

        x1, y1, x2, y2 = self.x, self.y, other.x, other.y
        if x1 == x2:
            # Vertical line
            if y1 != y2:
                return curve.new_infinity()
            # Vertical tangent
            if y1 == curve.lift(0):
                return curve.new_infinity()
            s = curve._divide(3 * x1 ** 2 + curve.a, 2 * y1)
            x3 = s ** 2 - 2 * x1
        else:
            s = curve._divide(y2 - y1, x2 - x1)
            x3 = s ** 2 - x1 - x2
        y3 = s * (x1 - x3) - y1

        try:
            return curve.new_point(x3, y3)
        except InvalidPointError as exc:
            raise AssertionError(f"Group law left the curve {curve}") from exc

    def neg(self) -> "Point":
        if self.is_infinity:
            return self
        return Point(self.x, -self.y, self.curve)

    def scalar_multiply(self, coef: int) -> "Point":
        """Compute coef * self by double-and-add."""
        if coef < 0:
            return self.neg().scalar_multiply(-coef)

        result = self.curve.new_infinity()
        addend = self
        while coef:
            if coef & 1:
                result += addend
            coef >>= 1
            if coef:
                addend += addend

        return result

    def __add__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.add(other.neg())

    def __neg__(self):
        return self.neg()

    def __mul__(self, coef):
        if not isinstance(coef, int) or isinstance(coef, bool):
            return NotImplemented
        return self.scalar_multiply(coef)

    __rmul__ = __mul__

    def __repr__(self):
        if self.is_infinity:
            return "Point(infinity)"
        return f"Point({_show(self.x)}, {_show(self.y)})"


# Integer curve y² = x³ + 5x + 7
CURVE_5_7 = Curve(5, 7)

# y² = x³ + 7 over F_223, a small stand-in with the shape of secp256k1
F223_CURVE = Curve.over_field(0, 7, 223)
F223_GENERATOR = F223_CURVE.new_point(47, 71)


# Example usage
if __name__ == "__main__":
    P = CURVE_5_7.new_point(-1, -1)
    Q = CURVE_5_7.new_point(2, 5)
    print(f"Curve: {CURVE_5_7}")
    print(f"{P} + {P} = {P + P}")
    print(f"{Q} + {P} = {Q + P}")
    print(f"{P} + {-P} = {P + -P}")

    G = F223_GENERATOR
    print(f"\nCurve: {F223_CURVE}")
    print("Testing scalar multiplication:")
    for k in range(1, 6):
        print(f"{k} * G = {k * G}")
