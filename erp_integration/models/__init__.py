from erp_integration.models.catalog_models import CatalogProduct, SourceItem, ProductStatus, SourceItemStatus

__all__ = [
    "CatalogProduct",
    "SourceItem",
    "ProductStatus",
    "SourceItemStatus",
]
