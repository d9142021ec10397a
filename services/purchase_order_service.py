"""
Purchase order lookups needed by the invoice screens.
"""
from typing import Union

from models.result import ServiceResult
from services.base import ApiService

BASE_PATH = "/purchase-orders"


class PurchaseOrderService(ApiService):

    def get_by_id(self, order_id: Union[int, str]) -> ServiceResult:
        return self._call("GET", f"{BASE_PATH}/{order_id}", "fetch purchase order")

    def get_unbilled(self) -> ServiceResult:
        """Orders with no invoice issued yet (candidates for a vendor bill)."""
        return self._call(
            "GET", f"{BASE_PATH}/unbilled", "load unbilled purchase orders", empty=[],
        )
