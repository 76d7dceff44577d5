"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.users.models import Coupon, User
from apps.workspaces.models import Coworking, Workspace


@pytest.fixture
def user(db):
    return User.objects.create_user(email="member@example.com", password="MemberPass123")


@pytest.fixture
def coworking(db):
    return Coworking.objects.create(
        name="Hub Podil",
        address="вул. Сагайдачного, 1",
        description="Open space на Подоле.",
        facilities=[Coworking.Facility.WIFI, Coworking.Facility.COFFEE],
        max_capacity=40,
        opens_at=time(8, 0),
        closes_at=time(22, 0),
    )


@pytest.fixture
def workspace(coworking):
    return Workspace.objects.create(
        coworking=coworking,
        name="Desk 1",
        type=Workspace.Type.DESK,
        price_per_hour=Decimal("10.00"),
        discount_day=10,
    )


@pytest.fixture
def make_coupon(db):
    def _make(owner, code="SPRING15", percent=15, days=30, used=False):
        return Coupon.objects.create(
            user=owner,
            code=code,
            discount_percent=percent,
            expiry_date=timezone.now() + timedelta(days=days),
            used=used,
        )

    return _make
