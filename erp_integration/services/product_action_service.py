"""
Product actions applied to the catalog.

Each action receives a record that already passed ProductInputValidator and
returns an ActionOutcome. Business rules owned here:
- a product can only be created once,
- an update must change something (any stock entry counts as a change,
  quantities are not compared with the stored stock),
- enabling an enabled product or disabling a disabled one is refused.
"""
import logging
from typing import Callable, Dict, List

from erp_integration.core.exceptions import ProductNotFoundError
from erp_integration.models.catalog_models import (
    CatalogProduct,
    ProductStatus,
    SourceItem,
    SourceItemStatus,
)
from erp_integration.repositories.catalog_repository import CatalogGateway
from erp_integration.schemas.products import (
    ActionOutcome,
    ErrorKind,
    OutcomeStatus,
    ProductAction,
    ProductRecord,
)

logger = logging.getLogger(__name__)


def build_source_items(record: ProductRecord) -> List[SourceItem]:
    """Stock rows for every source that carries a quantity; the others are skipped."""
    items = []
    for source in record.sources:
        if source.quantity is None:
            continue
        quantity = float(source.quantity)
        items.append(SourceItem(
            sku=record.sku,
            source_code=source.source_code,
            quantity=quantity,
            status=int(SourceItemStatus.for_quantity(quantity)),
        ))
    return items


class ProductActionService:
    """Applies one validated product record to the catalog."""

    def __init__(self, catalog: CatalogGateway):
        self.catalog = catalog
        self._handlers: Dict[ProductAction, Callable[[ProductRecord], ActionOutcome]] = {
            ProductAction.NEW: self.create_product,
            ProductAction.UPDATE: self.update_product,
            ProductAction.ENABLE: self.enable_product,
            ProductAction.DISABLE: self.disable_product,
        }

    def execute(self, record: ProductRecord) -> ActionOutcome:
        """Dispatch the record to the handler of its action."""
        return self._handlers[record.action](record)

    def create_product(self, record: ProductRecord) -> ActionOutcome:
        """
        Create a product and its stock.

        Args:
            record: Validated record with action "new"

        Returns:
            created, or failed when the SKU already exists
        """
        sku = record.sku
        if self.catalog.get_by_sku(sku) is not None:
            return ActionOutcome.failed(
                sku,
                f'Product with SKU "{sku}" could not be created: already exists.',
                ErrorKind.CONFLICT,
            )

        product = CatalogProduct(
            sku=sku,
            name=record.name,
            price=float(record.price or 0),
            type_id=record.type_id,
            attribute_set_id=int(record.attribute_set_id),
            status=int(record.status),
            visibility=int(record.visibility),
        )
        self.catalog.save(product)

        source_items = build_source_items(record)
        if source_items:
            self.catalog.save_source_items(source_items)

        logger.info(f"Product {sku} created with {len(source_items)} source items")
        return ActionOutcome.done(OutcomeStatus.CREATED, sku)

    def update_product(self, record: ProductRecord) -> ActionOutcome:
        """
        Update price and stock of an existing product.

        A record with at least one stock entry always counts as a change.

        Args:
            record: Validated record with action "update"

        Returns:
            updated, or failed when the product is unknown or nothing changed
        """
        sku = record.sku
        try:
            product = self.catalog.get(sku)
        except ProductNotFoundError as e:
            return ActionOutcome.failed(
                sku,
                f'Product with SKU "{sku}" could not be updated: {e}',
                ErrorKind.NOT_FOUND,
            )

        changed = False
        if record.price is not None:
            price = float(record.price)
            if float(product.price) != price:
                logger.debug(f"Price of {sku}: {product.price} -> {price}")
                product.price = price
                changed = True

        source_items = build_source_items(record)
        if source_items:
            changed = True

        if not changed:
            return ActionOutcome.failed(
                sku,
                f'Product with SKU "{sku}" could not be updated: no changes detected.',
                ErrorKind.NO_CHANGE,
            )

        self.catalog.save(product)
        if source_items:
            self.catalog.save_source_items(source_items)
        return ActionOutcome.done(OutcomeStatus.UPDATED, sku)

    def enable_product(self, record: ProductRecord) -> ActionOutcome:
        return self._set_status(record.sku, ProductStatus.ENABLED)

    def disable_product(self, record: ProductRecord) -> ActionOutcome:
        return self._set_status(record.sku, ProductStatus.DISABLED)

    def _set_status(self, sku: str, target: ProductStatus) -> ActionOutcome:
        """Switch product status; every error ends up in the outcome."""
        verb = "enabled" if target == ProductStatus.ENABLED else "disabled"
        try:
            product = self.catalog.get(sku)
            if int(product.status) == target:
                return ActionOutcome.failed(
                    sku,
                    f'Product with SKU "{sku}" could not be {verb}: already {verb}.',
                    ErrorKind.NO_CHANGE,
                )
            product.status = int(target)
            self.catalog.save(product)
        except ProductNotFoundError as e:
            return ActionOutcome.failed(
                sku, f'Product with SKU "{sku}" could not be {verb}: {e}', ErrorKind.NOT_FOUND
            )
        except Exception as e:
            logger.error(f"Error switching product {sku} to {verb}: {e}", exc_info=True)
            return ActionOutcome.failed(
                sku, f'Product with SKU "{sku}" could not be {verb}: {e}', ErrorKind.UNEXPECTED
            )

        return ActionOutcome.done(OutcomeStatus(verb), sku)
