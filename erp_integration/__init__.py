"""ERP product integration: imports ERP product actions into the catalog."""

__version__ = "1.0.0"
