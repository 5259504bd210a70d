"""SQLAlchemy models for the product catalog and its per-source stock."""
from enum import IntEnum

from sqlalchemy import Column, DateTime, Float, Integer, String, UniqueConstraint, func

from erp_integration.db.base import Base


class ProductStatus(IntEnum):
    ENABLED = 1
    DISABLED = 2


class SourceItemStatus(IntEnum):
    OUT_OF_STOCK = 0
    IN_STOCK = 1

    @classmethod
    def for_quantity(cls, quantity: float) -> "SourceItemStatus":
        return cls.IN_STOCK if quantity > 0 else cls.OUT_OF_STOCK


class CatalogProduct(Base):
    """A catalog product, unique by SKU."""

    __tablename__ = "catalog_product"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sku = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, default=0.0)
    type_id = Column(String(32), nullable=False, default="simple")
    attribute_set_id = Column(Integer, nullable=False, default=4)
    status = Column(Integer, nullable=False, default=int(ProductStatus.ENABLED))
    visibility = Column(Integer, nullable=False, default=4)

    # Timestamps
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False,
                        server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<CatalogProduct(sku={self.sku}, status={self.status}, price={self.price})>"


class SourceItem(Base):
    """Stock quantity of one SKU at one inventory source."""

    __tablename__ = "inventory_source_item"
    __table_args__ = (
        UniqueConstraint("sku", "source_code", name="uq_source_item_sku_source"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sku = Column(String(64), nullable=False, index=True)
    source_code = Column(String(64), nullable=False, default="default")
    quantity = Column(Float, nullable=False, default=0.0)
    status = Column(Integer, nullable=False, default=int(SourceItemStatus.OUT_OF_STOCK),
                    comment="1 in stock, 0 out of stock")

    def __repr__(self):
        return f"<SourceItem(sku={self.sku}, source={self.source_code}, qty={self.quantity})>"
