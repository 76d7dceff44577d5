"""Catalogue models: coworking spaces and bookable workspaces."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

PERCENT_VALIDATORS = [MinValueValidator(0), MaxValueValidator(100)]


class Coworking(models.Model):
    """Коворкинг: площадка, объединяющая рабочие места."""

    class Facility(models.TextChoices):
        WIFI = "wifi", _("Wi-Fi")
        COFFEE = "coffee", _("Кофе")
        PRINTER = "printer", _("Принтер")
        MEETING_ROOM = "meeting_room", _("Переговорная")
        PARKING = "parking", _("Парковка")
        LOCKERS = "lockers", _("Шкафчики")
        FREE_SNACKS = "free_snacks", _("Бесплатные снеки")

    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255)
    description = models.TextField()
    facilities = models.JSONField(default=list, blank=True, help_text=_("Список кодов удобств."))
    max_capacity = models.PositiveIntegerField(default=0)
    opens_at = models.TimeField()
    closes_at = models.TimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Коворкинг")
        verbose_name_plural = _("Коворкинги")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name


class Workspace(models.Model):
    """Рабочее место, которое можно забронировать по часам."""

    class Type(models.TextChoices):
        DESK = "desk", _("Стол")
        OFFICE = "office", _("Офис")
        MEETING_ROOM = "meeting_room", _("Переговорная")

    coworking = models.ForeignKey(
        Coworking,
        on_delete=models.CASCADE,
        related_name="workspaces",
    )
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=Type.choices)
    price_per_hour = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    capacity = models.PositiveSmallIntegerField(default=1)
    available = models.BooleanField(default=True)
    # Empty tier fields fall back to the default discount policy.
    discount_day = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=PERCENT_VALIDATORS,
        help_text=_("Скидка (%) за бронь от 8 часов."),
    )
    discount_month = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=PERCENT_VALIDATORS,
        help_text=_("Скидка (%) за бронь от 30 дней."),
    )
    discount_year = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=PERCENT_VALIDATORS,
        help_text=_("Скидка (%) за бронь от 365 дней."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Рабочее место")
        verbose_name_plural = _("Рабочие места")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price_per_hour__gt=0),
                name="workspace_positive_price",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.get_type_display()})"
