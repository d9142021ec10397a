from .formatting import Formatter
from .invoice_modal import (
    InvoiceModal, ListMode, CreateMode, ViewMode, PaymentMode,
    InvoiceValidationError, InvalidModeError, status_badge,
)
from .stock_report import StockReport, stock_status

__all__ = [
    "Formatter",
    "InvoiceModal", "ListMode", "CreateMode", "ViewMode", "PaymentMode",
    "InvoiceValidationError", "InvalidModeError", "status_badge",
    "StockReport", "stock_status",
]
