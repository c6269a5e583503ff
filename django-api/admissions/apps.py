from django.apps import AppConfig


class AdmissionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "admissions"

    def ready(self) -> None:
        from admissions import signals  # noqa: F401
        from admissions.conf import load_settings
        from admissions.wiring import build_services

        self.settings = load_settings()
        self.services = build_services(self.settings)
