"""Coupon ledger: validation, single-use redemption, refunds and issuance."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.users import coupons as ledger
from apps.users.models import Coupon
from shared.domain.exceptions import CouponInvalid
from shared.domain.value_objects import Money

pytestmark = pytest.mark.django_db


def test_find_redeemable_returns_matching_coupon(user, make_coupon):
    coupon = make_coupon(user)
    make_coupon(user, code="OTHER10", percent=10)

    found = ledger.find_redeemable(ledger.coupons_for_user(user.id), "SPRING15")

    assert found == coupon


@pytest.mark.parametrize(
    "kwargs",
    [
        {"used": True},
        {"days": -1},
    ],
)
def test_find_redeemable_rejects_used_and_expired(user, make_coupon, kwargs):
    make_coupon(user, **kwargs)

    with pytest.raises(CouponInvalid):
        ledger.find_redeemable(ledger.coupons_for_user(user.id), "SPRING15")


def test_find_redeemable_rejects_unknown_code(user, make_coupon):
    make_coupon(user)

    with pytest.raises(CouponInvalid):
        ledger.find_redeemable(ledger.coupons_for_user(user.id), "NOPE")


def test_coupons_of_other_users_are_not_visible(user, make_coupon, django_user_model):
    stranger = django_user_model.objects.create_user(email="stranger@example.com", password="x")
    make_coupon(stranger)

    with pytest.raises(CouponInvalid):
        ledger.find_redeemable(ledger.coupons_for_user(user.id), "SPRING15")


def test_list_valid_skips_used_and_expired(user, make_coupon):
    valid = make_coupon(user, code="VALID")
    make_coupon(user, code="USED", used=True)
    make_coupon(user, code="OLD", days=-3)

    assert ledger.list_valid(ledger.coupons_for_user(user.id)) == [valid]


def test_apply_coupon_discounts_price_after_tier(user, make_coupon):
    coupon = make_coupon(user, percent=15)

    coupon_discount, final_price = ledger.apply_coupon(coupon, Money(Decimal("90")))

    assert coupon_discount.rounded() == Decimal("13.50")
    assert final_price.rounded() == Decimal("76.50")


def test_redeem_marks_coupon_used_and_returns_final_price(user, make_coupon):
    coupon = make_coupon(user)

    final_price = ledger.redeem(coupon, Money(Decimal("90")))

    coupon.refresh_from_db()
    assert coupon.used is True
    assert final_price.rounded() == Decimal("76.50")


def test_second_redemption_of_same_coupon_fails(user, make_coupon):
    make_coupon(user)
    # Two requests that both looked the coupon up before either redeemed it.
    first = Coupon.objects.get(user=user, code="SPRING15")
    second = Coupon.objects.get(user=user, code="SPRING15")

    ledger.redeem(first, Money(Decimal("90")))
    with pytest.raises(CouponInvalid):
        ledger.redeem(second, Money(Decimal("50")))

    assert Coupon.objects.get(pk=first.pk).used is True


def test_refund_only_flips_used_coupons(user, make_coupon):
    coupon = make_coupon(user, used=True)

    assert ledger.refund(coupon) is True
    assert ledger.refund(coupon) is False
    coupon.refresh_from_db()
    assert coupon.used is False


def test_issue_coupon_generates_prefixed_code(user):
    expiry = timezone.now() + timedelta(days=90)

    coupon = ledger.issue_coupon(user.id, 15, expiry, prefix="LOYAL")

    assert re.fullmatch(r"LOYAL[0-9A-F]{6}", coupon.code)
    assert coupon.discount_percent == 15
    assert coupon.used is False
    assert coupon.expiry_date == expiry


def test_issue_coupon_retries_on_code_collision(user, make_coupon, monkeypatch):
    make_coupon(user, code="LOYALAAAAAA")
    codes = iter(["LOYALAAAAAA", "LOYALBBBBBB"])
    monkeypatch.setattr(ledger, "generate_code", lambda prefix: next(codes))

    coupon = ledger.issue_coupon(user.id, 15, timezone.now() + timedelta(days=1), prefix="LOYAL")

    assert coupon.code == "LOYALBBBBBB"
