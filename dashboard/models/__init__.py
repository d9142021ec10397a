"""
Pydantic models for dashboard API requests.
"""
from pydantic import BaseModel, Field
from typing import Optional

from models.stock import InventoryEntry, Material


class StockReportRequest(BaseModel):
    inventory: dict[str, InventoryEntry] = Field(default_factory=dict)   # keyed by material id
    materials: list[Material] = Field(default_factory=list)
    company_name: Optional[str] = None
    generated_by: Optional[str] = None
