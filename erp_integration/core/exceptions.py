"""
Run-level exceptions of the ERP integration.

Per-record problems are never raised out of a batch; they travel as
ActionOutcome values. Only the errors below reach the caller.
"""


class ErpIntegrationError(Exception):
    """Base class for ERP integration errors."""


class EmptyBatchError(ErpIntegrationError):
    """Raised when an import batch contains no records at all."""

    def __init__(self, message: str = "No products found in file."):
        super().__init__(message)


class ErpFileReadError(ErpIntegrationError):
    """Raised when the ERP products file cannot be read or decoded."""


class ProductNotFoundError(ErpIntegrationError):
    """Raised by the catalog when a SKU has no product."""

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f'The product with SKU "{sku}" does not exist.')
