"""Serializers for the reservation domain."""

from __future__ import annotations

from decimal import ROUND_HALF_UP

from rest_framework import serializers  # type: ignore

from .models import Reservation


class ReservationCreateSerializer(serializers.Serializer):
    """Запрос на бронирование (и на расчёт цены)."""

    workspace_id = serializers.IntegerField(min_value=1)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    coupon_code = serializers.CharField(
        max_length=32,
        required=False,
        allow_blank=True,
        allow_null=True,
    )

    def validate_coupon_code(self, value):  # type: ignore
        if not value:
            return None
        return value.strip() or None


class WorkspaceSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    type = serializers.CharField(read_only=True)
    coworking_name = serializers.ReadOnlyField(source="coworking.name")
    coworking_address = serializers.ReadOnlyField(source="coworking.address")


class ReservationSerializer(serializers.ModelSerializer):
    """Детальный сериализатор бронирования."""

    user_id = serializers.ReadOnlyField()
    user_email = serializers.ReadOnlyField(source="user.email")
    workspace_id = serializers.ReadOnlyField()
    workspace = WorkspaceSummarySerializer(read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "user_id",
            "user_email",
            "workspace_id",
            "workspace",
            "start_time",
            "end_time",
            "total_price",
            "discount_applied",
            "coupon_code",
            "status",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class QuoteSerializer(serializers.Serializer):
    """Расчёт стоимости без бронирования."""

    hours = serializers.DecimalField(max_digits=12, decimal_places=2, rounding=ROUND_HALF_UP)
    base_price = serializers.DecimalField(
        source="base_price.amount", max_digits=14, decimal_places=2, rounding=ROUND_HALF_UP
    )
    discount_percent = serializers.IntegerField()
    discount_amount = serializers.DecimalField(
        source="discount_amount.amount", max_digits=14, decimal_places=2, rounding=ROUND_HALF_UP
    )
    coupon_discount = serializers.DecimalField(
        source="coupon_discount.amount", max_digits=14, decimal_places=2, rounding=ROUND_HALF_UP
    )
    final_price = serializers.DecimalField(
        source="final_price.amount", max_digits=14, decimal_places=2, rounding=ROUND_HALF_UP
    )
