"""
Celery tasks for ERP product imports.
"""
import logging
from typing import Any, Dict, Optional

from celery import Task

from erp_integration.celery_app import celery_app
from erp_integration.core.erp_logger import configure_erp_logging
from erp_integration.core.exceptions import ErpIntegrationError
from erp_integration.db.session import SessionLocal
from erp_integration.repositories.catalog_repository import CatalogRepository
from erp_integration.services.erp_file_reader import read_erp_products
from erp_integration.services.product_batch_processor import ProductBatchProcessor

logger = logging.getLogger(__name__)

__all__ = ["DatabaseTask", "run_erp_import"]


class DatabaseTask(Task):
    """Base task with database session management."""
    _db = None
    session_factory = SessionLocal

    @property
    def db(self):
        if self._db is None:
            self._db = self.session_factory()
        return self._db

    def after_return(self, *args, **kwargs):
        if self._db is not None:
            self._db.close()
            self._db = None


@celery_app.task(
    bind=True,
    base=DatabaseTask,
    name="erp_integration.tasks.erp_tasks.run_erp_import",
)
def run_erp_import(self, file_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Import a whole ERP products file as one task.

    Records keep their file order, so the batch is never split across tasks.

    Args:
        file_path: ERP products file (defaults to the configured path)

    Returns:
        Dict with success flag and the batch report
    """
    configure_erp_logging()
    try:
        records = read_erp_products(file_path)
        report = ProductBatchProcessor(CatalogRepository(self.db)).process(records)
    except ErpIntegrationError as e:
        logger.error(f"ERP import task failed: {e}")
        return {"success": False, "error": str(e)}

    logger.info(f"ERP import task finished: {report.summary()}")
    return {"success": True, "report": report.model_dump(mode="json")}
