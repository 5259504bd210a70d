"""
Celery tasks package initialization.
"""
from erp_integration.tasks.erp_tasks import *  # noqa: F401,F403
