import importlib

from django.apps import AppConfig


class EmployeesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pyrol.employees"
    verbose_name = "Employees"

    def ready(self) -> None:  # pragma: no cover
        importlib.import_module("pyrol.employees.signals")
        return super().ready()
