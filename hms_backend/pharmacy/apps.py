from django.apps import AppConfig


class PharmacyConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'hms_backend.pharmacy'
    verbose_name = 'Pharmacy & Inventory'
