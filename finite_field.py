"""Arithmetic on residues modulo a prime."""

from dataclasses import dataclass
from typing import Optional, Union


class IncompatibleFieldError(TypeError):
    def __init__(self, message):
        self.message = f"Incompatible fields. {message}"
        super().__init__(self.message)


@dataclass(frozen=True)
class FieldElement:
    num: int
    """Residue. Left as given by the constructor, reduced by every operation."""
    prime: int
    """Modulus of the field. Callers guarantee it is prime."""

    def equals(self, other: Optional["FieldElement"]) -> bool:
        """True when other is present and has the same num and prime."""
        if not isinstance(other, FieldElement):
            return False
        return self.num == other.num and self.prime == other.prime

    def add(self, other: Union["FieldElement", int]) -> "FieldElement":
        other = self._coerce(other, "add")
        return FieldElement((self.num + other.num) % self.prime, self.prime)

    def sub(self, other: Union["FieldElement", int]) -> "FieldElement":
        other = self._coerce(other, "subtract")
        return FieldElement((self.num - other.num) % self.prime, self.prime)

    def mul(self, other: Union["FieldElement", int]) -> "FieldElement":
        other = self._coerce(other, "multiply")
        return FieldElement((self.num * other.num) % self.prime, self.prime)

    def pow(self, exponent: int) -> "FieldElement":
        """
        Raise to an integer power.

        The exponent is first reduced modulo p - 1 (Fermat's little theorem),
        so a negative exponent gives the inverse of the matching positive power.
        Zero stays zero for positive exponents and has no negative powers.
        """
        if self.is_zero():
            if exponent < 0:
                raise ZeroDivisionError(f"Cannot raise zero to a negative power in {self._field_name()}")
            return FieldElement(0 if exponent else 1, self.prime)
        n = exponent % (self.prime - 1)
        return FieldElement(pow(self.num, n, self.prime), self.prime)

    def div(self, other: Union["FieldElement", int]) -> "FieldElement":
        """Multiply by the inverse of other, computed as other^(p-2)."""
        other = self._coerce(other, "divide")
        if other.is_zero():
            raise ZeroDivisionError(f"Cannot divide by zero in {self._field_name()}")
        num = self.num * pow(other.num, self.prime - 2, self.prime)
        return FieldElement(num % self.prime, self.prime)

    def neg(self) -> "FieldElement":
        return FieldElement(-self.num % self.prime, self.prime)

    def inv(self) -> "FieldElement":
        if self.is_zero():
            raise ZeroDivisionError(f"No inverse for zero in {self._field_name()}")
        return FieldElement(pow(self.num, self.prime - 2, self.prime), self.prime)

    def normalized(self) -> "FieldElement":
        """Same residue with num in [0, prime)."""
        return FieldElement(self.num % self.prime, self.prime)

    def is_zero(self) -> bool:
        return self.num % self.prime == 0

    def _coerce(self, other, operation):
        # Plain ints are lifted into this element's field.
        if isinstance(other, FieldElement):
            if other.prime != self.prime:
                raise IncompatibleFieldError(
                    f"Cannot {operation} {self._field_name()} and {other._field_name()}."
                )
            return other
        if isinstance(other, int) and not isinstance(other, bool):
            return FieldElement(other % self.prime, self.prime)
        raise TypeError(f"Cannot {operation} {self._field_name()} and {type(other).__name__}")

    def _field_name(self):
        return f"FieldElement_{self.prime}"

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return self._coerce(other, "subtract").sub(self)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return self.mul(other)

    def __pow__(self, exponent):
        return self.pow(exponent)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return self._coerce(other, "divide").div(self)

    def __neg__(self):
        return self.neg()

    def __int__(self):
        return self.num

    def __repr__(self):
        return f"{self._field_name()}({self.num})"
