from django.apps import AppConfig


class SalesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.sales'

    def ready(self):
        """Import signals when app is ready"""
        import backend.sales.signals  # noqa: F401
