"""Reading the ERP products exchange file."""
import json
import logging
from typing import Any, Dict, List, Optional

from erp_integration.core.config import settings
from erp_integration.core.exceptions import ErpFileReadError

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    """NaN and Infinity are not JSON numbers; refuse them instead of decoding."""
    raise ValueError(f"non-finite number {name} is not allowed")


def read_erp_products(file_path: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Read product records from the ERP JSON file.

    The file holds either a list of records or an object with a
    "products" list.

    Args:
        file_path: Path of the file (defaults to settings.products_json_path)

    Returns:
        Decoded records, in file order

    Raises:
        ErpFileReadError: File missing, unreadable or not shaped as expected
    """
    file_path = file_path or settings.products_json_path
    try:
        with open(file_path, encoding="utf-8") as fh:
            payload = json.load(fh, parse_constant=_reject_constant)
    except FileNotFoundError:
        raise ErpFileReadError(f"File not found: {file_path}")
    except ValueError as e:
        raise ErpFileReadError(f"Invalid JSON in {file_path}: {e}")
    except OSError as e:
        raise ErpFileReadError(f"Cannot read {file_path}: {e}")

    if isinstance(payload, dict) and "products" in payload:
        payload = payload["products"]
    if not isinstance(payload, list):
        raise ErpFileReadError(
            f"Expected a list of products in {file_path}, got {type(payload).__name__}"
        )

    logger.debug(f"Read {len(payload)} product records from {file_path}")
    return payload
