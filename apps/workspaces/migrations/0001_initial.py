import decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def percent_validators():
    return [
        django.core.validators.MinValueValidator(0),
        django.core.validators.MaxValueValidator(100),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Coworking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("address", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("facilities", models.JSONField(blank=True, default=list, help_text="Список кодов удобств.")),
                ("max_capacity", models.PositiveIntegerField(default=0)),
                ("opens_at", models.TimeField()),
                ("closes_at", models.TimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Коворкинг",
                "verbose_name_plural": "Коворкинги",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Workspace",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                (
                    "type",
                    models.CharField(
                        choices=[("desk", "Стол"), ("office", "Офис"), ("meeting_room", "Переговорная")],
                        max_length=20,
                    ),
                ),
                (
                    "price_per_hour",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))],
                    ),
                ),
                ("capacity", models.PositiveSmallIntegerField(default=1)),
                ("available", models.BooleanField(default=True)),
                (
                    "discount_day",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        help_text="Скидка (%) за бронь от 8 часов.",
                        null=True,
                        validators=percent_validators(),
                    ),
                ),
                (
                    "discount_month",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        help_text="Скидка (%) за бронь от 30 дней.",
                        null=True,
                        validators=percent_validators(),
                    ),
                ),
                (
                    "discount_year",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        help_text="Скидка (%) за бронь от 365 дней.",
                        null=True,
                        validators=percent_validators(),
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "coworking",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="workspaces",
                        to="workspaces.coworking",
                    ),
                ),
            ],
            options={
                "verbose_name": "Рабочее место",
                "verbose_name_plural": "Рабочие места",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(price_per_hour__gt=0),
                        name="workspace_positive_price",
                    ),
                ],
            },
        ),
    ]
