"""
Catalog repository.

Handles product and source item persistence keyed by SKU.
"""
import logging
from typing import List, Optional, Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from erp_integration.core.exceptions import ProductNotFoundError
from erp_integration.models.catalog_models import CatalogProduct, SourceItem

logger = logging.getLogger(__name__)


class CatalogGateway(Protocol):
    """What the product actions need from a catalog backend."""

    def get_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        ...

    def get(self, sku: str) -> CatalogProduct:
        ...

    def save(self, product: CatalogProduct) -> CatalogProduct:
        ...

    def save_source_items(self, items: Sequence[SourceItem]) -> None:
        ...


class CatalogRepository:
    """SQLAlchemy implementation of the catalog gateway."""

    def __init__(self, db: Session):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def get_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        """
        Get product by SKU.

        Args:
            sku: Product SKU

        Returns:
            CatalogProduct or None if not found
        """
        return self.db.query(CatalogProduct).filter(
            CatalogProduct.sku == sku
        ).first()

    def get(self, sku: str) -> CatalogProduct:
        """
        Get product by SKU, failing when it does not exist.

        Raises:
            ProductNotFoundError: No product with this SKU
        """
        product = self.get_by_sku(sku)
        if product is None:
            raise ProductNotFoundError(sku)
        return product

    def save(self, product: CatalogProduct) -> CatalogProduct:
        """
        Insert or update a product and commit.

        Args:
            product: Product to persist

        Returns:
            The refreshed product
        """
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving product {product.sku}: {e}")
            raise
        return product

    def save_source_items(self, items: Sequence[SourceItem]) -> None:
        """
        Upsert a batch of source items by (sku, source_code) in one commit.

        Args:
            items: Source items to persist
        """
        if not items:
            return
        try:
            for item in items:
                existing = self.db.query(SourceItem).filter(
                    SourceItem.sku == item.sku,
                    SourceItem.source_code == item.source_code
                ).first()
                if existing:
                    existing.quantity = item.quantity
                    existing.status = item.status
                else:
                    self.db.add(item)
                # later entries for the same source see this one
                self.db.flush()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving {len(items)} source items: {e}")
            raise
        logger.debug(f"Saved {len(items)} source items")

    def get_source_items(self, sku: str) -> List[SourceItem]:
        """
        Get stock of a product at every source.

        Args:
            sku: Product SKU

        Returns:
            Source items ordered by source code
        """
        return self.db.query(SourceItem).filter(
            SourceItem.sku == sku
        ).order_by(SourceItem.source_code).all()
