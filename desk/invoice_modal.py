"""
Invoice screen for a single purchase order.

The screen is a small state machine over four modes, each carrying only the
data it needs:

  ListMode     invoices already issued against the order
  CreateMode   new company bill (this order) or vendor bill (several orders
               of one supplier), with its form buffer and order selection
  ViewMode     one invoice, with its document-upload panel
  PaymentMode  one invoice, with the payment form buffer

Every backend failure ends up in the message banner; nothing is retried.
"""
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath
from typing import Callable, Iterator, Literal, Optional, Union

from models.invoice import InvoiceForm, PaymentForm, PurchaseInvoice
from models.purchase_order import PurchaseOrder
from desk.formatting import to_number
from services.base import to_payload
from services.purchase_invoice_service import PurchaseInvoiceService
from services.purchase_order_service import PurchaseOrderService
from services.upload_service import UploadService

logger = logging.getLogger(__name__)

ATTACHMENT_ENTITY = "invoices"
ALLOWED_ATTACHMENT_SUFFIXES = (".pdf", ".jpg", ".jpeg", ".png")
MAX_ATTACHMENT_BYTES = 5 * 1024 * 1024


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------

@dataclass
class ListMode:
    pass


@dataclass
class CreateMode:
    form: InvoiceForm
    bill_type: Literal["company", "vendor"] = "company"
    available_orders: list[PurchaseOrder] = field(default_factory=list)
    selected_orders: list[PurchaseOrder] = field(default_factory=list)

    @property
    def selected_total(self) -> float:
        return sum(order.total_amount or 0.0 for order in self.selected_orders)


@dataclass
class ViewMode:
    invoice: PurchaseInvoice


@dataclass
class PaymentMode:
    invoice: PurchaseInvoice
    form: PaymentForm

    @property
    def max_payment(self) -> float:
        """Input cap offered to the user; not enforced on submit."""
        return self.invoice.balance_due


Mode = Union[ListMode, CreateMode, ViewMode, PaymentMode]


@dataclass
class Message:
    type: Literal["", "success", "error"] = ""
    text: str = ""


@dataclass(frozen=True)
class StatusBadge:
    label: str
    color: str
    icon: str


STATUS_BADGES: dict[str, StatusBadge] = {
    "unpaid":  StatusBadge("Unpaid", "#f59e0b", "clock"),
    "partial": StatusBadge("Partially Paid", "#3b82f6", "clock"),
    "paid":    StatusBadge("Paid", "#10b981", "check"),
    "overdue": StatusBadge("Overdue", "#ef4444", "alert"),
}


def status_badge(status: Optional[str]) -> StatusBadge:
    """Badge for a payment status; unknown statuses look like unpaid."""
    return STATUS_BADGES.get(status or "", STATUS_BADGES["unpaid"])


class InvalidModeError(RuntimeError):
    """An action was attempted from a mode that does not offer it."""


class InvoiceValidationError(ValueError):
    """A form failed client-side validation; the message is user-facing."""


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def generate_invoice_number(now: Optional[float] = None) -> str:
    """INV-<year>-<last six digits of the epoch-millisecond clock>."""
    now = time.time() if now is None else now
    year = datetime.fromtimestamp(now).year
    millis = str(int(now * 1000))
    return f"INV-{year}-{millis[-6:]}"


def prefill_amount(order: Optional[PurchaseOrder]) -> str:
    """Order items total to 3 decimals, or blank when there is nothing to bill."""
    if order is None:
        return ""
    total = order.items_total
    return f"{total:.3f}" if total > 0 else ""


def validate_invoice_form(
    form: InvoiceForm,
    bill_type: str,
    selected_orders: list[PurchaseOrder],
) -> None:
    if not form.invoice_number.strip():
        raise InvoiceValidationError("Invoice number is required")
    if to_number(form.invoice_amount) <= 0:
        raise InvoiceValidationError("Valid invoice amount is required")
    if bill_type == "vendor":
        if not selected_orders:
            raise InvoiceValidationError(
                "Please select at least one purchase order for vendor bill"
            )
        suppliers = {order.supplier_id for order in selected_orders}
        if len(suppliers) > 1:
            raise InvoiceValidationError(
                "All selected purchase orders must belong to the same supplier."
            )


def validate_payment_form(form: PaymentForm) -> None:
    if to_number(form.amount) <= 0:
        raise InvoiceValidationError("Valid payment amount is required")


def validate_attachment(filename: str, content: bytes) -> None:
    if PurePath(filename).suffix.lower() not in ALLOWED_ATTACHMENT_SUFFIXES:
        raise InvoiceValidationError("Only PDF, JPG and PNG documents can be attached")
    if len(content) > MAX_ATTACHMENT_BYTES:
        raise InvoiceValidationError("Document exceeds the 5 MB upload limit")


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class InvoiceModal:
    """
    Invoices of one purchase order: list, create, view and pay.

    Usage:
        modal = InvoiceModal(po, invoice_service, order_service, upload_service)
        modal.open()
        modal.start_create()
        modal.mode.form.invoice_amount = "125.500"
        if modal.submit_create():
            ...
    """

    def __init__(
        self,
        purchase_order: PurchaseOrder,
        invoice_service: PurchaseInvoiceService,
        order_service: PurchaseOrderService,
        upload_service: UploadService,
        on_success: Optional[Callable[[], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self.purchase_order = purchase_order
        self.invoice_service = invoice_service
        self.order_service = order_service
        self.upload_service = upload_service
        self.on_success = on_success
        self.on_close = on_close

        self.mode: Mode = ListMode()
        self.invoices: list[PurchaseInvoice] = []
        self.message = Message()
        self.loading = False
        self.is_open = False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _busy(self) -> Iterator[None]:
        previous = self.loading
        self.loading = True
        try:
            yield
        finally:
            self.loading = previous

    def _set_mode(self, mode: Mode) -> None:
        logger.debug("Invoice modal %s -> %s", type(self.mode).__name__, type(mode).__name__)
        self.mode = mode

    def _require(self, *mode_types: type) -> Mode:
        if not isinstance(self.mode, mode_types):
            names = ", ".join(t.__name__ for t in mode_types)
            raise InvalidModeError(f"Action needs {names}, modal is in {type(self.mode).__name__}")
        return self.mode

    def _error(self, text: str) -> None:
        self.message = Message("error", text)

    def _success(self, text: str) -> None:
        self.message = Message("success", text)

    def _clear_message(self) -> None:
        self.message = Message()

    def _notify_success(self) -> None:
        if self.on_success:
            self.on_success()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        self.is_open = True
        self.load_invoices()

    def close(self) -> None:
        """Back to the list with every buffer and the banner cleared."""
        self._set_mode(ListMode())
        self._clear_message()
        self.is_open = False
        if self.on_close:
            self.on_close()

    def load_invoices(self) -> None:
        if self.purchase_order is None:
            return
        with self._busy():
            result = self.invoice_service.get_by_purchase_order(self.purchase_order.id)
        if result.success:
            self.invoices = [PurchaseInvoice.model_validate(row) for row in result.data or []]
        else:
            self._error(result.error)

    def back_to_list(self) -> None:
        self._set_mode(ListMode())

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def start_create(self) -> CreateMode:
        form = InvoiceForm(
            invoice_number=generate_invoice_number(),
            invoice_amount=prefill_amount(self.purchase_order),
        )
        mode = CreateMode(form=form)
        self._set_mode(mode)
        return mode

    def set_bill_type(self, bill_type: str) -> None:
        mode = self._require(CreateMode)
        if bill_type not in ("company", "vendor"):
            raise ValueError(f"Unknown bill type: {bill_type!r}")
        mode.bill_type = bill_type
        if bill_type == "vendor":
            self.load_unbilled_orders()

    def load_unbilled_orders(self) -> None:
        """Only meaningful while building a vendor bill."""
        mode = self._require(CreateMode)
        if mode.bill_type != "vendor":
            return
        with self._busy():
            result = self.order_service.get_unbilled()
        if result.success:
            mode.available_orders = [PurchaseOrder.model_validate(row) for row in result.data or []]
        else:
            self._error("Failed to load unbilled purchase orders")

    def toggle_order(self, order: PurchaseOrder, selected: bool) -> None:
        mode = self._require(CreateMode)
        already = any(o.id == order.id for o in mode.selected_orders)
        if selected and not already:
            mode.selected_orders.append(order)
        elif not selected:
            mode.selected_orders = [o for o in mode.selected_orders if o.id != order.id]

    def submit_create(self) -> bool:
        mode = self._require(CreateMode)
        if self.loading:
            return False
        self._clear_message()

        try:
            validate_invoice_form(mode.form, mode.bill_type, mode.selected_orders)
        except InvoiceValidationError as e:
            self._error(str(e))
            return False

        payload = to_payload(mode.form)
        with self._busy():
            if mode.bill_type == "vendor":
                result = self.invoice_service.create_vendor_bill({
                    **payload,
                    "coversPurchaseOrders": [o.id for o in mode.selected_orders],
                    "supplierId": mode.selected_orders[0].supplier_id,
                })
            else:
                result = self.invoice_service.create({
                    **payload,
                    "purchaseOrderId": self.purchase_order.id,
                    "supplierId": self.purchase_order.supplier_id,
                })

            if not result.success:
                self._error(result.error or "Failed to create invoice")
                return False

            if mode.bill_type == "vendor":
                text = f"Vendor bill created successfully (covering {len(mode.selected_orders)} POs)"
            else:
                text = "Invoice created successfully"
            self.load_invoices()
            self._set_mode(ListMode())
            self._success(text)
        self._notify_success()
        return True

    # ------------------------------------------------------------------
    # View / payment
    # ------------------------------------------------------------------

    def view_invoice(self, invoice: PurchaseInvoice) -> ViewMode:
        mode = ViewMode(invoice=invoice)
        self._set_mode(mode)
        return mode

    def start_payment(self, invoice: PurchaseInvoice) -> PaymentMode:
        """Payment form prefilled with the outstanding balance."""
        form = PaymentForm(amount=f"{invoice.balance_due:.3f}")
        mode = PaymentMode(invoice=invoice, form=form)
        self._set_mode(mode)
        return mode

    def submit_payment(self) -> bool:
        mode = self._require(PaymentMode)
        if self.loading:
            return False
        self._clear_message()

        try:
            validate_payment_form(mode.form)
        except InvoiceValidationError as e:
            self._error(str(e))
            return False

        with self._busy():
            result = self.invoice_service.record_payment(mode.invoice.id, mode.form)
            if not result.success:
                self._error(result.error or "Failed to record payment")
                return False
            self.load_invoices()
            self._set_mode(ListMode())
            self._success("Payment recorded successfully")
        self._notify_success()
        return True

    # ------------------------------------------------------------------
    # Attachment panel (view mode)
    # ------------------------------------------------------------------

    def _refresh_selected(self, mode: ViewMode) -> Optional[str]:
        """Re-fetch the list and the open invoice; returns the error if the detail fetch failed."""
        self.load_invoices()
        updated = self.invoice_service.get_by_id(mode.invoice.id)
        if not updated.success:
            return updated.error
        if updated.data:
            mode.invoice = PurchaseInvoice.model_validate(updated.data)
        return None

    def upload_attachment(self, filename: str, content: bytes) -> bool:
        mode = self._require(ViewMode)
        if self.loading:
            return False
        try:
            validate_attachment(filename, content)
        except InvoiceValidationError as e:
            self._error(str(e))
            return False

        with self._busy():
            result = self.upload_service.upload_single_file(
                ATTACHMENT_ENTITY, mode.invoice.id, filename, content,
            )
            if not result.success:
                self._error(f"Failed to upload document: {result.error}")
                return False
            stale = self._refresh_selected(mode)
        if stale:
            self._error(f"Invoice document uploaded, but reloading it failed: {stale}")
        else:
            self._success("Invoice document uploaded successfully")
        return True

    def delete_attachment(self) -> bool:
        mode = self._require(ViewMode)
        if self.loading:
            return False
        with self._busy():
            result = self.upload_service.delete_single_file(ATTACHMENT_ENTITY, mode.invoice.id)
            if not result.success:
                self._error(f"Failed to delete document: {result.error}")
                return False
            stale = self._refresh_selected(mode)
        if stale:
            self._error(f"Invoice document deleted, but reloading it failed: {stale}")
        else:
            self._success("Invoice document deleted successfully")
        return True
