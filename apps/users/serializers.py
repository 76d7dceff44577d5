"""Serializers for user-owned resources."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    """Купон пользователя в ответах API."""

    class Meta:
        model = Coupon
        fields = ["id", "code", "discount_percent", "expiry_date", "used", "created_at"]
        read_only_fields = fields
