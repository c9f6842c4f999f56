"""Celery application instance for School Panel."""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "school_panel.settings")

app = Celery("school_panel")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
