"""
Celery application configuration for the ERP integration.
"""
from celery import Celery

from erp_integration.core.config import settings

celery_app = Celery(
    "erp_integration",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "erp_integration.tasks.erp_tasks",
    ]
)

celery_app.conf.update(
    # Serialization
    task_serializer=settings.celery_task_serializer,
    result_serializer=settings.celery_result_serializer,
    accept_content=settings.celery_accept_content,

    # Timezone
    timezone=settings.celery_timezone,
    enable_utc=settings.celery_enable_utc,

    # Task execution
    task_always_eager=settings.celery_task_always_eager,
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutes hard limit
    task_soft_time_limit=25 * 60,  # 25 minutes soft limit

    # A batch must run in file order, one at a time
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    result_expires=7200,  # Keep results for 2 hours

    task_routes={
        'erp_integration.tasks.erp_tasks.run_erp_import': {
            'queue': 'erp_queue',
        },
    },

    broker_connection_retry_on_startup=True,
)

if __name__ == '__main__':
    celery_app.start()
