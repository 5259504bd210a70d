"""
Repository layer for database operations.

- CatalogRepository: catalog products and per-source stock, by SKU
"""
from erp_integration.repositories.catalog_repository import CatalogGateway, CatalogRepository

__all__ = [
    "CatalogGateway",
    "CatalogRepository",
]
