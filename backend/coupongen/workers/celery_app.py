"""Celery app configuration."""
from celery import Celery
from celery.schedules import crontab

from coupongen.config import get_settings
from coupongen.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

celery_app = Celery(
    "coupongen",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["coupongen.workers.tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    beat_schedule={
        "deactivate-expired-campaigns": {
            "task": "coupongen.workers.tasks.deactivate_expired_campaigns",
            "schedule": crontab(minute=0),
        },
    },
)
