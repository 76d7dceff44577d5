"""Coupon ledger.

Validates, redeems, refunds and issues a user's coupons. Redemption and
refund are compare-and-set updates on the ``used`` flag, so two bookings
racing for the same coupon resolve to exactly one winner. Both are meant to
run inside the caller's transaction: if the reservation insert fails the
redemption is rolled back with it.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime
from typing import Iterable

from django.utils import timezone  # type: ignore

from shared.domain.exceptions import CouponInvalid, StorageFailure
from shared.domain.value_objects import Money

from .models import Coupon

logger = logging.getLogger(__name__)

CODE_ATTEMPTS = 5


def coupons_for_user(user_id: int, code: str | None = None):
    """Queryset of the user's coupons, optionally narrowed to one code."""

    qs = Coupon.objects.filter(user_id=user_id)
    if code is not None:
        qs = qs.filter(code=code)
    return qs


def find_redeemable(coupons: Iterable[Coupon], code: str, now: datetime | None = None) -> Coupon:
    """Return the unused, unexpired coupon with ``code`` or raise CouponInvalid."""

    now = now or timezone.now()
    for coupon in coupons:
        if coupon.code == code and coupon.is_redeemable(now):
            return coupon
    raise CouponInvalid()


def list_valid(coupons: Iterable[Coupon], now: datetime | None = None) -> list[Coupon]:
    now = now or timezone.now()
    return [coupon for coupon in coupons if coupon.is_redeemable(now)]


def apply_coupon(coupon: Coupon, price_after_tier: Money) -> tuple[Money, Money]:
    """Return ``(coupon_discount, final_price)``; the coupon is not touched."""

    coupon_discount = price_after_tier.percent(coupon.discount_percent)
    return coupon_discount, price_after_tier - coupon_discount


def redeem(coupon: Coupon, price_after_tier: Money, now: datetime | None = None) -> Money:
    """Consume the coupon and return the price after the coupon discount."""

    now = now or timezone.now()
    updated = Coupon.objects.filter(pk=coupon.pk, used=False, expiry_date__gt=now).update(used=True)
    if not updated:
        # Someone else consumed it between lookup and redemption.
        logger.info(f"Coupon {coupon.code} of user {coupon.user_id} lost the redemption race")
        raise CouponInvalid()
    coupon.used = True
    _, final_price = apply_coupon(coupon, price_after_tier)
    return final_price


def refund(coupon: Coupon) -> bool:
    """Make the coupon usable again. Returns False if it was not marked used."""

    updated = Coupon.objects.filter(pk=coupon.pk, used=True).update(used=False)
    coupon.used = False
    return bool(updated)


def generate_code(prefix: str) -> str:
    return f"{prefix}{secrets.token_hex(3).upper()}"


def issue_coupon(user_id: int, discount_percent: int, expiry_date: datetime, *, prefix: str) -> Coupon:
    """Append a fresh coupon to the user's set under a code unique for that user."""

    for _ in range(CODE_ATTEMPTS):
        code = generate_code(prefix)
        if not Coupon.objects.filter(user_id=user_id, code=code).exists():
            return Coupon.objects.create(
                user_id=user_id,
                code=code,
                discount_percent=discount_percent,
                expiry_date=expiry_date,
            )
    raise StorageFailure(f"Could not allocate a unique coupon code for user {user_id}")
