"""
Common Value Objects

- Money: Non-negative monetary amount kept at full precision
- TimeRange: Half-open [start, end) interval of a reservation
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidInterval

CENT = Decimal('0.01')
SECONDS_PER_HOUR = Decimal(3600)


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Arithmetic keeps full Decimal precision; ``rounded()`` is applied only
    for display and when the amount is persisted.
    """
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")

    @classmethod
    def zero(cls) -> 'Money':
        return cls(Decimal('0'))

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        return Money(self.amount + other.amount)

    def __sub__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        return Money(self.amount - other.amount)

    def __mul__(self, factor) -> 'Money':
        if not isinstance(factor, (int, float, Decimal)):
            raise TypeError("Can only multiply Money by number")
        return Money(self.amount * Decimal(str(factor)))

    def percent(self, percent) -> 'Money':
        """Return ``percent`` % of this amount"""
        return self * (Decimal(str(percent)) / Decimal(100))

    def rounded(self) -> Decimal:
        return self.amount.quantize(CENT, rounding=ROUND_HALF_UP)

    def __str__(self):
        return f"{self.rounded():,.2f}"

    def __repr__(self):
        return f"Money({self.amount})"


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents the half-open interval [start, end). Ranges that only touch
    at an endpoint do not overlap, so back-to-back reservations are allowed.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidInterval(
                f"End time ({self.end.isoformat()}) must be after start time ({self.start.isoformat()})"
            )

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Overlap formula: start1 < end2 AND end1 > start2

        Examples:
            - 09:00-12:00 overlaps with 11:00-13:00 -> True
            - 09:00-12:00 overlaps with 12:00-14:00 -> False (adjacent)
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")
        return self.start < other.end and self.end > other.start

    @property
    def hours(self) -> Decimal:
        """Duration in (possibly fractional) hours"""
        delta = self.end - self.start
        seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(10 ** 6)
        return seconds / SECONDS_PER_HOUR

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"TimeRange({self.start!r}, {self.end!r})"
