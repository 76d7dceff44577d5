"""Reservation model for workspace bookings."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.exceptions import AlreadyCancelled, InvalidTransition


class Reservation(models.Model):
    """Бронирование рабочего места на интервал [start_time, end_time)."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Ожидает подтверждения")
        CONFIRMED = "confirmed", _("Подтверждено")
        CANCELLED = "cancelled", _("Отменено")

    ALLOWED_TRANSITIONS = {
        Status.PENDING.value: {Status.CONFIRMED.value, Status.CANCELLED.value},
        Status.CONFIRMED.value: {Status.CANCELLED.value},
        Status.CANCELLED.value: set(),
    }

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reservations",
    )
    workspace = models.ForeignKey(
        "workspaces.Workspace",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_applied = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text=_("Скидка (%) по длительности, без учёта купона."),
    )
    coupon_code = models.CharField(max_length=32, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.CONFIRMED,
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Бронирование")
        verbose_name_plural = _("Бронирования")
        ordering = ["-start_time"]
        indexes = [
            models.Index(fields=["workspace", "start_time", "end_time"], name="reservation_workspace_slot_idx"),
            models.Index(fields=["status"], name="reservation_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="reservation_end_after_start",
            ),
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="reservation_non_negative_price",
            ),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.pk} {self.workspace_id} {self.start_time:%Y-%m-%d %H:%M}"

    def can_transition_to(self, status: str) -> bool:
        allowed = self.ALLOWED_TRANSITIONS.get(self.Status(self.status).value, set())
        return self.Status(status).value in allowed

    def transition_to(self, status: str) -> None:
        """Move to ``status`` or raise if the state machine forbids it."""

        if not self.can_transition_to(status):
            if self.status == self.Status.CANCELLED:
                raise AlreadyCancelled()
            raise InvalidTransition(f"Cannot move reservation from {self.status} to {status}.")
        self.status = status

    def mark_cancelled(self) -> None:
        self.transition_to(self.Status.CANCELLED)
        self.cancelled_at = timezone.now()
