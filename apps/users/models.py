"""User domain models for the coworking platform.

Пользователь входит по email и имеет одну из двух ролей: обычный
пользователь или администратор площадки. Каждому пользователю
принадлежит набор купонов, которые списываются при бронировании и
возвращаются при отмене.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(BaseUserManager):
    """Менеджер пользователей, использующий email в качестве логина."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email обязателен для создания пользователя.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.USER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Суперпользователь должен иметь is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Суперпользователь должен иметь is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Пользователь платформы."""

    class RoleChoices(models.TextChoices):
        USER = "user", _("Пользователь")
        ADMIN = "admin", _("Администратор")

    username = models.CharField(
        _("Отображаемое имя"),
        max_length=150,
        blank=True,
    )
    email = models.EmailField(_("Email"), unique=True)
    role = models.CharField(
        _("Роль"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.USER,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        verbose_name = _("Пользователь")
        verbose_name_plural = _("Пользователи")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    def is_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_staff or self.is_superuser


class Coupon(models.Model):
    """Купон пользователя: одноразовая процентная скидка с ограниченным сроком."""

    user = models.ForeignKey(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="coupons",
    )
    code = models.CharField(max_length=32)
    discount_percent = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    expiry_date = models.DateTimeField()
    used = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Купон")
        verbose_name_plural = _("Купоны")
        ordering = ["expiry_date"]
        constraints = [
            models.UniqueConstraint(fields=["user", "code"], name="coupon_unique_code_per_user"),
            models.CheckConstraint(
                condition=models.Q(discount_percent__lte=100),
                name="coupon_discount_percent_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.discount_percent}%)"

    def is_redeemable(self, now: datetime | None = None) -> bool:
        now = now or timezone.now()
        return not self.used and self.expiry_date > now


# Short alias used across apps and tests
User = CustomUser
