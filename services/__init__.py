from .transport import ApiTransport, TransportError
from .purchase_invoice_service import PurchaseInvoiceService, calculate_days_overdue
from .purchase_order_service import PurchaseOrderService
from .upload_service import UploadService

__all__ = [
    "ApiTransport", "TransportError",
    "PurchaseInvoiceService", "calculate_days_overdue",
    "PurchaseOrderService", "UploadService",
]
