"""
Schemas for ERP product records and import results.
"""
from enum import Enum
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from erp_integration.core.config import settings


class ProductAction(str, Enum):
    NEW = "new"
    UPDATE = "update"
    ENABLE = "enable"
    DISABLE = "disable"

    @classmethod
    def parse(cls, value: Any) -> Optional["ProductAction"]:
        """Case-insensitive lookup, None for unknown values."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class SourceQuantity(BaseModel):
    """Stock quantity of a product at one inventory source"""
    source_code: str = Field(default_factory=lambda: settings.default_source_code)
    quantity: Optional[float] = None

    @field_validator("source_code", mode="before")
    @classmethod
    def _default_source_code(cls, value):
        if value is None or value == "":
            return settings.default_source_code
        return str(value)


class ProductRecord(BaseModel):
    """One product action as sent by the ERP"""
    sku: str
    action: ProductAction = ProductAction.UPDATE
    name: Optional[str] = None
    price: Optional[float] = None
    attribute_set_id: int = 4
    status: int = 1
    visibility: int = 4
    type_id: str = "simple"
    sources: List[SourceQuantity] = Field(default_factory=list)

    @field_validator("sku", mode="before")
    @classmethod
    def _sku_as_text(cls, value):
        return value if value is None else str(value)

    @field_validator("action", mode="before")
    @classmethod
    def _normalize_action(cls, value):
        if value is None or value == "":
            return ProductAction.UPDATE
        return str(value).strip().lower()

    @field_validator("attribute_set_id", "status", "visibility", "type_id", mode="before")
    @classmethod
    def _fill_null_defaults(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("sources", mode="before")
    @classmethod
    def _null_sources(cls, value):
        if value is None:
            return []
        # a JSON object of sources is read as its values
        if isinstance(value, Mapping):
            return list(value.values())
        return value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProductRecord":
        return cls.model_validate(dict(data))


class ValidationResult(BaseModel):
    """Outcome of validating one raw record; reasons keep rule evaluation order."""
    reasons: List[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.reasons

    @property
    def message(self) -> str:
        return "; ".join(self.reasons)


class OutcomeStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    ENABLED = "enabled"
    DISABLED = "disabled"
    SKIPPED = "skipped"
    FAILED = "failed"


SUCCESS_STATUSES = (
    OutcomeStatus.CREATED,
    OutcomeStatus.UPDATED,
    OutcomeStatus.ENABLED,
    OutcomeStatus.DISABLED,
)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    NO_CHANGE = "no_change"
    UNEXPECTED = "unexpected"


class ActionOutcome(BaseModel):
    """Result of processing one record"""
    sku: Optional[str] = None
    status: OutcomeStatus
    message: str
    error_kind: Optional[ErrorKind] = None

    @property
    def succeeded(self) -> bool:
        return self.status in SUCCESS_STATUSES

    @classmethod
    def done(cls, status: OutcomeStatus, sku: str) -> "ActionOutcome":
        return cls(sku=sku, status=status, message=f"{status.value.capitalize()}: {sku}")

    @classmethod
    def failed(cls, sku: Optional[str], message: str, kind: ErrorKind) -> "ActionOutcome":
        return cls(sku=sku, status=OutcomeStatus.FAILED, message=message, error_kind=kind)

    @classmethod
    def skipped(cls, message: str) -> "ActionOutcome":
        return cls(status=OutcomeStatus.SKIPPED, message=message, error_kind=ErrorKind.VALIDATION)


class BatchReport(BaseModel):
    """Aggregated result of one import run"""
    created: int = 0
    updated: int = 0
    enabled: int = 0
    disabled: int = 0
    failures: List[str] = Field(default_factory=list)
    outcomes: List[ActionOutcome] = Field(default_factory=list)

    @computed_field
    @property
    def total(self) -> int:
        return len(self.outcomes)

    @computed_field
    @property
    def nothing_processed(self) -> bool:
        return self.created == 0 and self.updated == 0 and self.enabled == 0 and self.disabled == 0

    def add(self, outcome: ActionOutcome) -> None:
        """Count one outcome; failures and skips keep their message in input order."""
        self.outcomes.append(outcome)
        if outcome.succeeded:
            counter = outcome.status.value
            setattr(self, counter, getattr(self, counter) + 1)
        else:
            self.failures.append(outcome.message)

    def summary(self) -> str:
        return (
            f"Total updated: {self.updated} | created: {self.created} | "
            f"disabled: {self.disabled} | enabled: {self.enabled}"
        )


class ProductImportRequest(BaseModel):
    """Request body carrying already decoded ERP records"""
    products: List[Any] = Field(default_factory=list)


class ImportTaskResponse(BaseModel):
    task_id: str
    status: str = "queued"
    file_path: Optional[str] = None
