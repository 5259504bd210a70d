"""
ERP integration endpoints: product imports and order cancel notifications.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from erp_integration.core.config import settings
from erp_integration.core.exceptions import EmptyBatchError, ErpFileReadError
from erp_integration.db.session import get_db
from erp_integration.repositories.catalog_repository import CatalogRepository
from erp_integration.schemas.orders import OrderCancelResult
from erp_integration.schemas.products import BatchReport, ImportTaskResponse, ProductImportRequest
from erp_integration.services.erp_file_reader import read_erp_products
from erp_integration.services.order_cancel_service import OrderCancelService
from erp_integration.services.product_batch_processor import ProductBatchProcessor
from erp_integration.tasks.erp_tasks import run_erp_import

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/erp", tags=["ERP Integration"])


@router.post("/products/import", response_model=BatchReport)
def import_products(body: ProductImportRequest, db: Session = Depends(get_db)):
    """
    Apply a batch of ERP product records sent in the request body.
    """
    try:
        return ProductBatchProcessor(CatalogRepository(db)).process(body.products)
    except EmptyBatchError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/products/import-file", response_model=BatchReport)
def import_products_file(db: Session = Depends(get_db)):
    """
    Apply the ERP products file found at the configured path.
    """
    try:
        records = read_erp_products(settings.products_json_path)
        return ProductBatchProcessor(CatalogRepository(db)).process(records)
    except ErpFileReadError as e:
        logger.error(f"Failed to read ERP file: {e}")
        raise HTTPException(status_code=400, detail=f"Failed to read ERP file: {e}")
    except EmptyBatchError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/products/import-async", response_model=ImportTaskResponse)
def import_products_async():
    """
    Queue an import of the configured ERP products file.
    """
    task = run_erp_import.delay(settings.products_json_path)
    logger.info(f"Queued ERP import task {task.id}")
    return ImportTaskResponse(task_id=task.id, file_path=settings.products_json_path)


@router.post("/orders/{increment_id}/cancel", response_model=OrderCancelResult)
def cancel_order(increment_id: str):
    """
    Mark an order as canceled in the ERP orders export file.
    """
    return OrderCancelService().mark_order_canceled(increment_id)
