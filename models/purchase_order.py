from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Union


class POItem(BaseModel):
    """
    A single line on a Purchase Order as returned by the backend.
    Quantities and rates may be missing depending on how far the order has
    progressed (ordered vs. collected), so every numeric field is optional.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Union[int, str]] = None
    material_name: Optional[str] = Field(default=None, alias="materialName")
    quantity_ordered:  Optional[float] = Field(default=None, alias="quantityOrdered")
    quantity_received: Optional[float] = Field(default=None, alias="quantityReceived")
    unit_price:    Optional[float] = Field(default=None, alias="unitPrice")
    contract_rate: Optional[float] = Field(default=None, alias="contractRate")
    total_price:   Optional[float] = Field(default=None, alias="totalPrice")

    @property
    def line_total(self) -> float:
        """
        Stated totalPrice when set, otherwise quantity x rate.
        Zero counts as "not set" at every step (ordered qty falls back to
        received qty, unit price falls back to the contract rate).
        """
        if self.total_price:
            return self.total_price
        qty = self.quantity_ordered or self.quantity_received or 0.0
        rate = self.unit_price or self.contract_rate or 0.0
        return qty * rate


class PurchaseOrder(BaseModel):
    """
    A Purchase Order as served by GET /purchase-orders.
    id is the primary key used when linking invoices to the order.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    order_number:  Optional[str] = Field(default=None, alias="orderNumber")
    supplier_id:   Optional[Union[int, str]] = Field(default=None, alias="supplierId")
    supplier_name: Optional[str] = Field(default=None, alias="supplierName")
    order_date:    Optional[str] = Field(default=None, alias="orderDate")    # YYYY-MM-DD
    total_amount:  Optional[float] = Field(default=None, alias="totalAmount")
    status:        Optional[str] = None
    items: List[POItem] = Field(default_factory=list)

    @property
    def items_total(self) -> float:
        """Sum of line totals; the stored totalAmount when the order has no items."""
        if not self.items:
            return self.total_amount or 0.0
        return sum(item.line_total for item in self.items)
