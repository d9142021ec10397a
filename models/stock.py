from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal, Union


StockStatus = Literal["good", "low", "critical", "out-of-stock"]


class Material(BaseModel):
    """A material from the material master list."""
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    code: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    standard_price: Optional[float] = Field(default=None, alias="standardPrice")
    minimum_stock_level: Optional[float] = Field(default=None, alias="minimumStockLevel")


class InventoryEntry(BaseModel):
    """Current stock position for one material (inventory is keyed by material id)."""
    model_config = ConfigDict(populate_by_name=True)

    current_stock: float = Field(default=0.0, alias="currentStock")
    reorder_level: Optional[float] = Field(default=None, alias="reorderLevel")
    average_cost:  Optional[float] = Field(default=None, alias="averageCost")
    total_value:   Optional[float] = Field(default=None, alias="totalValue")


class StockReportRow(BaseModel):
    """One derived row of the stock valuation report (never persisted)."""
    id: Union[int, str]
    code: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    current_stock: float
    reorder_level: float
    unit_cost: float
    total_value: float
    status: StockStatus


class StockReportStats(BaseModel):
    """Summary figures shown above the report table."""
    total_materials: int = 0
    materials_with_stock: int = 0
    total_value: float = 0.0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
