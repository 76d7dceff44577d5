"""Loyalty issuer: grant a coupon once a user's confirmed spend is high enough.

The total is recomputed over the whole history on every booking, so a user
already above the threshold gets a new coupon each time they book.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from dateutil.relativedelta import relativedelta  # type: ignore
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from apps.users.coupons import issue_coupon
from apps.users.models import Coupon

from .domain.events import LoyaltyCouponIssued
from .repositories import DjangoReservationRepository

logger = logging.getLogger(__name__)


def loyalty_policy() -> dict:
    return {
        "threshold": Decimal(str(getattr(settings, "RESERVATIONS_LOYALTY_THRESHOLD", 10000))),
        "percent": int(getattr(settings, "RESERVATIONS_LOYALTY_PERCENT", 15)),
        "validity_months": int(getattr(settings, "RESERVATIONS_LOYALTY_VALIDITY_MONTHS", 3)),
        "prefix": getattr(settings, "RESERVATIONS_LOYALTY_CODE_PREFIX", "LOYAL"),
    }


def maybe_issue_coupon(user_id: int, now: datetime | None = None, reservation_repo=None) -> Coupon | None:
    """Issue a loyalty coupon if the user's confirmed spend reaches the threshold."""

    policy = loyalty_policy()
    reservation_repo = reservation_repo or DjangoReservationRepository()
    total_spent = reservation_repo.confirmed_total_for_user(user_id)
    if total_spent < policy["threshold"]:
        logger.debug(f"User {user_id} spent {total_spent}, below loyalty threshold")
        return None

    now = now or timezone.now()
    expiry_date = now + relativedelta(months=policy["validity_months"])
    with DjangoUnitOfWork() as uow:
        coupon = issue_coupon(
            user_id,
            policy["percent"],
            expiry_date,
            prefix=policy["prefix"],
        )
        uow.add_event(LoyaltyCouponIssued(
            aggregate_id=user_id,
            user_id=user_id,
            coupon_code=coupon.code,
            discount_percent=coupon.discount_percent,
            expiry_date=expiry_date,
            total_spent=total_spent,
        ))

    logger.info(f"Issued loyalty coupon {coupon.code} to user {user_id} (spent {total_spent})")
    return coupon
