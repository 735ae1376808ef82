"""
Celery configuration for distributed task queue.

This module configures the Celery application with:
- Redis broker and result backend
- Task routing for pipeline executions
- No automatic retries
- Worker process initialization (Logfire)
"""
import os
import sys
from pathlib import Path
import logfire
from celery import Celery
from celery.signals import worker_process_init
from config.redis_config import redis_settings

# Add project root to Python path for module imports
# so Celery workers can resolve imports like `from services.pipeline_executor import ...`
project_root = Path(__file__).parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Initialize Celery application
celery_app = Celery(
    "text_pipeline",
    broker=redis_settings.broker_url,
    backend=redis_settings.result_backend,
    include=["tasks.execution_tasks"],
)

# Celery configuration
celery_app.conf.update(
    # Serialization
    task_serializer="json",
    result_serializer="json",
    # Allow both JSON and pickle for deserialization (pickle needed for exceptions)
    accept_content=["json", "pickle"],

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task results
    result_expires=3600,
    result_extended=True,

    # Task routing
    task_routes={
        "tasks.execution_tasks.execute_pipeline_task": {
            "queue": "pipelines_default"
        },
    },

    # Worker configuration
    # Pipeline runs are long-lived network waits; one task at a time per process
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,
    worker_concurrency=2,

    # Task execution
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Retry configuration
    # Failed steps are never retried; a failed run is final
    task_autoretry_for=(),  # Disable automatic retries
    task_retry_kwargs={
        "max_retries": 0,
    },

    # Monitoring
    worker_send_task_events=True,
    task_send_sent_event=True,
)


@worker_process_init.connect
def init_worker_process(**kwargs) -> None:
    """
    Initialize each worker process.

    Runs once per worker process (not per task): restores the import path
    and configures Logfire and pydantic-ai instrumentation.
    """
    # Forked children do not always inherit the parent's sys.path
    project_root = Path(__file__).parent.absolute()
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    from config.settings import settings
    from observability.logfire_config import LogfireConfig

    LogfireConfig.initialize(
        token=settings.logfire_token,
        service_name="text-pipeline-worker",
        console=False,
    )

    logfire.info(
        "Celery worker initialized",
        project_root=str(project_root),
        logfire_enabled=bool(settings.logfire_token or os.getenv("LOGFIRE_TOKEN")),
        llm_model=settings.llm_model,
    )

