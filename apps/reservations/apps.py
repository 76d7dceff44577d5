from django.apps import AppConfig  # type: ignore


class ReservationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.reservations"
    verbose_name = "Бронирования"

    def ready(self) -> None:
        from .application.event_handlers import register_event_handlers

        register_event_handlers()
