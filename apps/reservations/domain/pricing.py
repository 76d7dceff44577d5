"""
Pricing Calculator

Prices a reservation from the workspace's hourly rate and its duration
discount tiers. Pure: no I/O, no errors for valid input.

Tier bands (half-open, in hours):
    [0, 8)        -> no discount
    [8, 720)      -> day tier
    [720, 8760)   -> month tier (30 x 24)
    [8760, inf)   -> year tier  (365 x 24)
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from shared.domain.value_objects import Money, TimeRange

DAY_TIER_HOURS = Decimal(8)
MONTH_TIER_HOURS = Decimal(30 * 24)
YEAR_TIER_HOURS = Decimal(365 * 24)


@dataclass(frozen=True)
class DiscountTiers:
    """Percent discounts per duration band"""
    day: int
    month: int
    year: int

    def __post_init__(self):
        for name in ('day', 'month', 'year'):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} discount must be between 0 and 100, got {value}")

    def percent_for(self, hours: Decimal) -> int:
        if hours >= YEAR_TIER_HOURS:
            return self.year
        if hours >= MONTH_TIER_HOURS:
            return self.month
        if hours >= DAY_TIER_HOURS:
            return self.day
        return 0

    def with_overrides(
        self,
        day: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> 'DiscountTiers':
        """Replace the tiers that are set, keep the rest"""
        return DiscountTiers(
            day=self.day if day is None else day,
            month=self.month if month is None else month,
            year=self.year if year is None else year,
        )


DEFAULT_DISCOUNT_TIERS = DiscountTiers(day=10, month=20, year=30)


@dataclass(frozen=True)
class PriceBreakdown:
    hours: Decimal
    base_price: Money
    tier_percent: int
    discount_amount: Money
    price_after_tier: Money


def calculate_price(
    rate: Money,
    time_range: TimeRange,
    tiers: DiscountTiers = DEFAULT_DISCOUNT_TIERS,
) -> PriceBreakdown:
    """
    Price a booking before coupons

    Amounts keep full precision; round with ``Money.rounded()`` on display
    or persistence.

    Example:
        10h at 10/h with a 10% day tier -> base 100, discount 10, after tier 90
    """
    hours = time_range.hours
    base_price = rate * hours
    tier_percent = tiers.percent_for(hours)
    discount_amount = base_price.percent(tier_percent)
    return PriceBreakdown(
        hours=hours,
        base_price=base_price,
        tier_percent=tier_percent,
        discount_amount=discount_amount,
        price_after_tier=base_price - discount_amount,
    )
