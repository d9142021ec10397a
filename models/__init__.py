from .invoice import PurchaseInvoice, InvoiceForm, PaymentForm, PAYMENT_METHODS
from .purchase_order import PurchaseOrder, POItem
from .stock import Material, InventoryEntry, StockReportRow, StockReportStats
from .result import Success, Failure, ServiceResult, SyncReport, result_from_envelope

__all__ = [
    "PurchaseInvoice", "InvoiceForm", "PaymentForm", "PAYMENT_METHODS",
    "PurchaseOrder", "POItem",
    "Material", "InventoryEntry", "StockReportRow", "StockReportStats",
    "Success", "Failure", "ServiceResult", "SyncReport", "result_from_envelope",
]
