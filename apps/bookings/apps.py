from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    label = "bookings"

    def ready(self):
        from apps.bookings import handlers
        from shared.application.message_bus import message_bus

        handlers.register(message_bus)
