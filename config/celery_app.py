import os

from celery import Celery
from celery.signals import setup_logging

# Workers run with production settings unless told otherwise; pytest passes
# --ds=config.settings.test and manage.py defaults to local.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

app = Celery("pyrol")

# All celery-related configuration keys carry a `CELERY_` prefix in settings.
app.config_from_object("django.conf:settings", namespace="CELERY")


@setup_logging.connect
def config_loggers(*args, **kwargs):
    from logging.config import dictConfig  # noqa: PLC0415

    from django.conf import settings  # noqa: PLC0415

    dictConfig(settings.LOGGING)


# Picks up pyrol.payroll.tasks and pyrol.attendance.tasks.
app.autodiscover_tasks()
