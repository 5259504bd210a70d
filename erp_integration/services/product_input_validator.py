"""
Input validation for ERP product records.

Validation works on the raw decoded record so that missing fields, wrong
types and negative values can all be reported before anything is parsed or
touched in the catalog. Every violated rule adds its own reason.
"""
import logging
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, List, Optional

from erp_integration.schemas.products import ProductAction, ValidationResult

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "unknown"

# Checked in this order; each missing field yields its own reason
REQUIRED_NEW_FIELDS = (
    ("name", "name is missing."),
    ("price", "price is missing."),
    ("attribute_set_id", "attribute_set_id is missing."),
    ("type_id", "type_id is missing."),
    ("status", "status is missing."),
    ("visibility", "visibility is missing."),
    ("sources", "sources array is missing or invalid."),
)


# Present values must parse as these types
TYPED_FIELDS = (
    ("name", str),
    ("attribute_set_id", int),
    ("type_id", str),
    ("status", int),
    ("visibility", int),
)

INTEGER_TEXT = re.compile(r"[+-]?\d+")


def _as_source_list(value: Any) -> Optional[list]:
    """Source entries of a list or of a JSON object (its values), None otherwise."""
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return list(value)
    return None


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return isinstance(value, str) and INTEGER_TEXT.fullmatch(value) is not None


def _as_number(value: Any) -> Optional[float]:
    """Finite numeric value of a JSON scalar, None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class ProductInputValidator:
    """Routes a record to the rules of its action and collects every violation."""

    def __init__(self):
        self._rules: Dict[ProductAction, Callable[[Mapping, str], List[str]]] = {
            ProductAction.NEW: self.validate_new,
            ProductAction.UPDATE: self.validate_update,
            ProductAction.ENABLE: self.validate_enable,
            ProductAction.DISABLE: self.validate_disable,
        }

    def validate(self, data: Mapping[str, Any]) -> ValidationResult:
        """
        Validate a raw product record against the rules of its action.

        Args:
            data: Decoded ERP record

        Returns:
            ValidationResult with every violated rule, in evaluation order
        """
        sku = self._sku(data)
        raw_action = data.get("action")
        if raw_action is None or str(raw_action).strip() == "":
            return ValidationResult(
                reasons=[f'Product with SKU "{sku}" could not be processed: action is missing.']
            )

        action = ProductAction.parse(raw_action)
        if action is None:
            return ValidationResult(
                reasons=[f'Product with SKU "{sku}" has unknown action: {str(raw_action).lower()}']
            )

        result = ValidationResult(reasons=self._rules[action](data, sku))
        if not result.valid:
            logger.debug(f"Record {sku} rejected for {action.value}: {result.message}")
        return result

    def validate_new(self, data: Mapping[str, Any], sku: str) -> List[str]:
        prefix = f'Product with SKU "{sku}" could not be created: '
        reasons = []

        for field, error in REQUIRED_NEW_FIELDS:
            value = data.get(field)
            if (
                value is None
                or (field == "name" and value == "")
                or (field == "sources" and _as_source_list(value) is None)
            ):
                reasons.append(prefix + error)

        reasons.extend(self._check_types(data, prefix))

        if data.get("price") is not None:
            reasons.extend(self._check_price(data["price"], prefix))

        sources = _as_source_list(data.get("sources"))
        if sources is not None:
            reasons.extend(self._check_sources(sources, prefix))

        return reasons

    def validate_update(self, data: Mapping[str, Any], sku: str) -> List[str]:
        prefix = f'Product with SKU "{sku}" could not be updated: '
        reasons = []

        reasons.extend(self._check_types(data, prefix))

        if data.get("price") is not None:
            reasons.extend(self._check_price(data["price"], prefix))

        sources = _as_source_list(data.get("sources"))
        if sources is None:
            reasons.append(prefix + "sources array is missing or invalid.")
        else:
            reasons.extend(self._check_sources(sources, prefix))

        return reasons

    def validate_enable(self, data: Mapping[str, Any], sku: str) -> List[str]:
        return self._check_sku(data)

    def validate_disable(self, data: Mapping[str, Any], sku: str) -> List[str]:
        return self._check_sku(data)

    @staticmethod
    def _sku(data: Mapping[str, Any]) -> str:
        sku = data.get("sku")
        return "" if sku is None else str(sku)

    @staticmethod
    def _check_sku(data: Mapping[str, Any]) -> List[str]:
        if not data.get("sku"):
            return ["Product with SKU is missing: SKU is missing."]
        return []

    @staticmethod
    def _check_types(data: Mapping[str, Any], prefix: str) -> List[str]:
        reasons = []
        for field, expected in TYPED_FIELDS:
            value = data.get(field)
            if value is None:
                continue
            if expected is str and not isinstance(value, str):
                reasons.append(prefix + f"{field} must be a string ({value})")
            elif expected is int and not _is_integer(value):
                reasons.append(prefix + f"{field} must be an integer ({value})")
        return reasons

    @staticmethod
    def _check_price(price: Any, prefix: str) -> List[str]:
        number = _as_number(price)
        if number is None:
            return [prefix + f"price must be a number ({price})"]
        if number < 0:
            return [prefix + f"price cannot be negative ({number:.2f})"]
        return []

    @staticmethod
    def _check_sources(sources: Sequence, prefix: str) -> List[str]:
        reasons = []
        for source in sources:
            if not isinstance(source, Mapping):
                source = {}
            source_code = source.get("source_code")
            if source_code is None:
                source_code = UNKNOWN_SOURCE

            quantity = source.get("quantity")
            if quantity is None:
                reasons.append(prefix + f'quantity for source "{source_code}" is missing')
                continue

            number = _as_number(quantity)
            if number is None:
                reasons.append(prefix + f'quantity for source "{source_code}" must be a number ({quantity})')
            elif number < 0:
                reasons.append(prefix + f'quantity for source "{source_code}" cannot be negative ({number:.2f})')
        return reasons
