"""
Schemas for ERP order export updates
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class OrderCancelStatus(str, Enum):
    CANCELED = "canceled"
    NOT_FOUND = "not_found"
    FILE_MISSING = "file_missing"
    INVALID = "invalid"
    ERROR = "error"


class OrderCancelResult(BaseModel):
    """Result of marking an order as canceled in the ERP orders file"""
    increment_id: Optional[str] = None
    status: OrderCancelStatus
    message: str

    @property
    def updated(self) -> bool:
        return self.status == OrderCancelStatus.CANCELED
