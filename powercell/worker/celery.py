"""
Celery configuration for background task processing.
"""
from celery import Celery
from powercell.core.config import settings

celery = Celery(
    "powercell",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["powercell.worker.tasks"]
)

celery.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
    result_expires=3600,  # 1 hour
    beat_schedule={
        "check-low-stock-levels": {
            "task": "powercell.worker.tasks.check_low_stock_levels",
            "schedule": settings.low_stock_check_interval,
        }
    }
)

if __name__ == "__main__":
    celery.start()
