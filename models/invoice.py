from datetime import date
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal, Union


PaymentStatus = Literal["unpaid", "partial", "paid", "overdue"]
BillType = Literal["company", "vendor"]
BillStatus = Literal["draft", "sent"]                    # company bills only
PaymentMethod = Literal["bank_transfer", "cheque", "cash", "card"]

PAYMENT_METHODS: dict[str, str] = {
    "bank_transfer": "Bank Transfer",
    "cheque":        "Cheque",
    "cash":          "Cash",
    "card":          "Card",
}


def _today() -> str:
    return date.today().isoformat()


class PurchaseInvoice(BaseModel):
    """
    A purchase invoice (company bill or vendor bill) as served by the backend.

    balance_due is authoritative on the server (invoice_amount - paid_amount);
    the client only ever reads it.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    invoice_number: Optional[str] = None
    invoice_date:   Optional[str] = None     # YYYY-MM-DD
    due_date:       Optional[str] = None     # YYYY-MM-DD
    invoice_amount: float = 0.0
    paid_amount:    float = 0.0
    balance_due:    float = 0.0
    payment_status: Optional[str] = "unpaid"
    payment_terms_days: Optional[int] = 0
    notes: Optional[str] = None
    attachment: Optional[str] = None         # storage path, e.g. "invoices/INV-1.pdf"
    purchase_order_id: Optional[Union[int, str]] = None
    supplier_id:   Optional[Union[int, str]] = None
    supplier_name: Optional[str] = None

    bill_type:   Optional[str] = Field(default=None, alias="billType")
    bill_status: Optional[str] = None
    covers_purchase_orders: List[Union[int, str]] = Field(default_factory=list, alias="coversPurchaseOrders")
    covers_company_bills:   List[Union[int, str]] = Field(default_factory=list, alias="coversCompanyBills")

    @property
    def attachment_name(self) -> Optional[str]:
        """Last path segment of the stored attachment, if any."""
        if not self.attachment:
            return None
        return self.attachment.split("/")[-1]


class InvoiceForm(BaseModel):
    """
    Create-invoice form buffer.
    Amount and payment terms hold the text as typed; they are parsed only
    when the form is validated.
    """
    model_config = ConfigDict(populate_by_name=True)

    invoice_number: str = Field(default="", alias="invoiceNumber")
    invoice_date:   str = Field(default_factory=_today, alias="invoiceDate")
    due_date:       str = Field(default="", alias="dueDate")
    invoice_amount: str = Field(default="", alias="invoiceAmount")
    payment_terms_days: Union[int, str] = Field(default=0, alias="paymentTermsDays")
    notes: str = ""


class PaymentForm(BaseModel):
    """Payment being recorded against an invoice (submitted, never stored)."""
    model_config = ConfigDict(populate_by_name=True)

    amount: str = ""
    payment_date:   str = Field(default_factory=_today, alias="paymentDate")
    payment_method: PaymentMethod = Field(default="bank_transfer", alias="paymentMethod")
    reference: str = ""
    notes: str = ""
