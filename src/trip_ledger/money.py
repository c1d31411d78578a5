"""Fixed-point money value type.

Every monetary computation in TripLedger goes through Money so that repeated
add/subtract/divide operations never accumulate floating-point drift.
Amounts are stored as an integer count of 1/10_000 currency units.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .exceptions import DivisionByZeroError

SCALE = 4  # stored decimal places
MINOR_UNIT_PLACES = 2  # currency minor unit (cents)

_FACTOR = 10**SCALE


def _round_half_away(numerator: int, denominator: int) -> int:
    """Integer division rounding half away from zero (denominator > 0)."""
    quotient, remainder = divmod(abs(numerator), denominator)
    if 2 * remainder >= denominator:
        quotient += 1
    return -quotient if numerator < 0 else quotient


def _check_places(places: int) -> int:
    if not 0 <= places <= SCALE:
        raise ValueError(f"places must be between 0 and {SCALE}, got {places}")
    return 10 ** (SCALE - places)


@dataclass(frozen=True, order=True, repr=False)
class Money:
    """Exact monetary amount.

    Comparisons are exact integer comparisons between Money instances. Tolerances
    for "effectively zero" belong to callers, not to this type.
    """

    units: int

    @classmethod
    def of(cls, amount: "Money | Decimal | int | str") -> "Money":
        """
        Create Money from a Decimal, int or numeric string.

        Values with more than four decimal places are rounded half away
        from zero. Floats are rejected; pass a string or Decimal instead.

        Raises:
            TypeError: If amount is a float or an unsupported type
            ValueError: If amount is not a finite number
        """
        if isinstance(amount, Money):
            return amount
        if isinstance(amount, bool) or isinstance(amount, float):
            raise TypeError(
                f"Money cannot be built from {type(amount).__name__}; "
                f"use a str or Decimal"
            )
        if not isinstance(amount, (Decimal, int, str)):
            raise TypeError(f"Unsupported money amount type: {type(amount).__name__}")

        try:
            value = Decimal(amount.strip() if isinstance(amount, str) else amount)
        except InvalidOperation as e:
            raise ValueError(f"Invalid money amount: {amount!r}") from e
        if not value.is_finite():
            raise ValueError(f"Money amount must be finite, got {amount!r}")

        units = value.scaleb(SCALE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(int(units))

    @classmethod
    def from_units(cls, units: int) -> "Money":
        """Create Money from a raw count of 1/10_000 units."""
        return cls(int(units))

    @classmethod
    def zero(cls) -> "Money":
        return cls(0)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: object) -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.units + other.units)

    def __sub__(self, other: object) -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.units - other.units)

    def __neg__(self) -> "Money":
        return Money(-self.units)

    def __abs__(self) -> "Money":
        return Money(abs(self.units))

    def add(self, other: "Money") -> "Money":
        return self + other

    def subtract(self, other: "Money") -> "Money":
        return self - other

    def divide(self, by: int) -> "Money":
        """
        Divide by a positive integer, rounding half away from zero.

        Args:
            by: Positive integer divisor

        Returns:
            The quotient at the stored scale

        Raises:
            DivisionByZeroError: If by is zero
            ValueError: If by is negative
        """
        if by == 0:
            raise DivisionByZeroError(f"Cannot divide {self} by zero")
        if by < 0:
            raise ValueError(f"Divisor must be a positive integer, got {by}")
        return Money(_round_half_away(self.units, by))

    def allocate(self, count: int, places: int = MINOR_UNIT_PLACES) -> list["Money"]:
        """
        Split into `count` parts that sum exactly to this amount.

        Each part receives the same whole number of minor units (10^-places).
        Leftover minor units go one each to the first parts, and any sub-minor
        leftover goes to the first part.

        Example:
            Money.of("10.00").allocate(3) -> [3.34, 3.33, 3.33]

        Raises:
            ValueError: If count is not positive or places is out of range
        """
        if count <= 0:
            raise ValueError(f"Split count must be positive, got {count}")
        step = _check_places(places)

        total = abs(self.units)
        minor_total, sub_minor = divmod(total, step)
        base, extra = divmod(minor_total, count)

        parts = [base * step + (step if i < extra else 0) for i in range(count)]
        parts[0] += sub_minor

        sign = -1 if self.units < 0 else 1
        return [Money(sign * part) for part in parts]

    def round(self, places: int = MINOR_UNIT_PLACES) -> "Money":
        """Round half away from zero to `places` decimal places."""
        step = _check_places(places)
        return Money(_round_half_away(self.units, step) * step)

    # ------------------------------------------------------------------
    # Comparison helpers
    # ------------------------------------------------------------------

    def greater_than(self, other: "Money") -> bool:
        return self > other

    def less_than(self, other: "Money") -> bool:
        return self < other

    def is_zero(self) -> bool:
        return self.units == 0

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_decimal(self) -> Decimal:
        """Exact Decimal value."""
        return Decimal(self.units).scaleb(-SCALE)

    def to_float(self) -> float:
        """Float value for display only. Never feed it back into arithmetic."""
        return self.units / _FACTOR

    def __str__(self) -> str:
        minor = Decimal(1).scaleb(-MINOR_UNIT_PLACES)
        return str(self.round().to_decimal().quantize(minor))

    def __repr__(self) -> str:
        return f"Money('{self.to_decimal()}')"

    # ------------------------------------------------------------------
    # Pydantic integration
    # ------------------------------------------------------------------

    @classmethod
    def _coerce(cls, value: Any) -> "Money":
        # JSON numbers arrive as floats; go through their shortest repr
        if isinstance(value, float):
            value = repr(value)
        try:
            return cls.of(value)
        except TypeError as e:
            raise ValueError(str(e)) from e

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda money: str(money.to_decimal())
            ),
        )
