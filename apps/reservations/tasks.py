"""Celery tasks for the reservation domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.db import DatabaseError  # type: ignore

from shared.domain.exceptions import StorageFailure

from .loyalty import maybe_issue_coupon

logger = logging.getLogger(__name__)


@shared_task(name="reservations.issue_loyalty_coupon")
def issue_loyalty_coupon(user_id: int) -> str | None:
    """Начисляет купон лояльности после бронирования.

    Ошибки хранилища только логируются: бронирование уже сохранено и не
    должно откатываться из-за купона.
    """

    try:
        coupon = maybe_issue_coupon(user_id)
    except (DatabaseError, StorageFailure) as exc:
        logger.error(f"Loyalty coupon issuance failed for user {user_id}: {exc}", exc_info=True)
        return None
    return coupon.code if coupon else None
