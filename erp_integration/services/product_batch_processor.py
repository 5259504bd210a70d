"""
Batch processing of ERP product records.

Records are handled one after the other in input order. A record that fails,
for whatever reason, is reported and the batch moves on to the next one.
"""
import logging
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from erp_integration.core.exceptions import EmptyBatchError
from erp_integration.repositories.catalog_repository import CatalogGateway
from erp_integration.schemas.products import (
    ActionOutcome,
    BatchReport,
    ErrorKind,
    ProductRecord,
)
from erp_integration.services.product_action_service import ProductActionService
from erp_integration.services.product_input_validator import ProductInputValidator

logger = logging.getLogger(__name__)


class ProductBatchProcessor:
    """Validates, applies and accounts for a batch of product records."""

    def __init__(
        self,
        catalog: CatalogGateway,
        validator: Optional[ProductInputValidator] = None,
        action_service: Optional[ProductActionService] = None,
    ):
        self.validator = validator or ProductInputValidator()
        self.action_service = action_service or ProductActionService(catalog)

    def process(self, records: Sequence[Any]) -> BatchReport:
        """
        Process every record of the batch.

        Args:
            records: Decoded ERP records, in file order

        Returns:
            BatchReport with counters, failure messages and per-record outcomes

        Raises:
            EmptyBatchError: The batch holds no records
        """
        if not records:
            raise EmptyBatchError()

        logger.info(f"Processing batch of {len(records)} product records")
        report = BatchReport()
        for index, data in enumerate(records, start=1):
            outcome = self.process_record(index, data)
            report.add(outcome)
            if outcome.succeeded:
                logger.info(outcome.message)
            else:
                logger.warning(outcome.message)

        logger.info(f"Batch finished: {report.summary()}")
        return report

    def process_record(self, index: int, data: Any) -> ActionOutcome:
        """
        Process a single record.

        Args:
            index: 1-based position of the record in the batch
            data: Decoded ERP record

        Returns:
            ActionOutcome for the record, never raises
        """
        sku = data.get("sku") if isinstance(data, Mapping) else None
        if not sku:
            return ActionOutcome.skipped(
                f"Record #{index}: Product data missing SKU, cannot process."
            )

        validation = self.validator.validate(data)
        if not validation.valid:
            return ActionOutcome.failed(str(sku), validation.message, ErrorKind.VALIDATION)

        try:
            record = ProductRecord.from_mapping(data)
        except PydanticValidationError as e:
            return ActionOutcome.failed(str(sku), self._parse_failure(sku, e), ErrorKind.VALIDATION)

        try:
            return self.action_service.execute(record)
        except Exception as e:
            logger.error(f"Unexpected error processing SKU {sku}: {e}", exc_info=True)
            return ActionOutcome.failed(
                str(sku), f"Failed to process SKU: {sku} - {e}", ErrorKind.UNEXPECTED
            )

    @staticmethod
    def _parse_failure(sku: Any, error: PydanticValidationError) -> str:
        """One readable line per invalid field, e.g. 'sources.0.quantity: Input should be ...'."""
        fields = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in error.errors()
        )
        return f'Product with SKU "{sku}" could not be processed: {fields}'
