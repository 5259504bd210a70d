import logging
from typing import Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from erp_integration.core.config import settings
from erp_integration.core.erp_logger import ERP_LOGGER_NAME
from erp_integration.core.exceptions import ProductNotFoundError
from erp_integration.db.base import Base
from erp_integration.models.catalog_models import CatalogProduct, SourceItem
from erp_integration.repositories.catalog_repository import CatalogRepository


class FakeCatalogGateway:
    """In-memory catalog recording every call made by the product actions."""

    def __init__(self, products: Optional[List[CatalogProduct]] = None):
        self.products: Dict[str, CatalogProduct] = {p.sku: p for p in products or []}
        self.lookups: List[str] = []
        self.saved_products: List[CatalogProduct] = []
        self.saved_batches: List[List[SourceItem]] = []
        self.failing_skus: Dict[str, Exception] = {}

    def _lookup(self, sku):
        self.lookups.append(sku)
        if sku in self.failing_skus:
            raise self.failing_skus[sku]
        return self.products.get(sku)

    def get_by_sku(self, sku):
        return self._lookup(sku)

    def get(self, sku):
        product = self._lookup(sku)
        if product is None:
            raise ProductNotFoundError(sku)
        return product

    def save(self, product):
        self.saved_products.append(product)
        self.products[product.sku] = product
        return product

    def save_source_items(self, items):
        self.saved_batches.append(list(items))


def make_product(sku="SKU-1", price=10.0, status=1, **kwargs) -> CatalogProduct:
    values = dict(
        sku=sku,
        name=f"Product {sku}",
        price=price,
        type_id="simple",
        attribute_set_id=4,
        status=status,
        visibility=4,
    )
    values.update(kwargs)
    return CatalogProduct(**values)


@pytest.fixture(autouse=True)
def erp_paths(tmp_path, monkeypatch):
    """Point every configured file at the test's temporary directory."""
    monkeypatch.setattr(settings, "log_file", str(tmp_path / "log" / "erp_integration.log"))
    monkeypatch.setattr(settings, "products_json_path", str(tmp_path / "import" / "erp_products.json"))
    monkeypatch.setattr(settings, "orders_json_path", str(tmp_path / "export" / "erp_orders.json"))
    yield tmp_path
    erp_logger = logging.getLogger(ERP_LOGGER_NAME)
    for handler in list(erp_logger.handlers):
        erp_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog(db) -> CatalogRepository:
    return CatalogRepository(db)


@pytest.fixture
def fake_catalog() -> FakeCatalogGateway:
    return FakeCatalogGateway()
