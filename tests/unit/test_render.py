"""
Unit tests for terminal rendering of the invoice modal.
"""
from unittest.mock import MagicMock

import click
import pytest

from desk.formatting import Formatter
from desk.invoice_modal import InvoiceModal, Message
from desk.render import render_badge, render_modal
from models.invoice import PurchaseInvoice
from models.purchase_order import PurchaseOrder


@pytest.fixture
def modal(sample_purchase_order) -> InvoiceModal:
    return InvoiceModal(
        PurchaseOrder.model_validate(sample_purchase_order),
        MagicMock(), MagicMock(), MagicMock(),
    )


@pytest.fixture
def fmt() -> Formatter:
    return Formatter("OMR", 3)


def _text(modal, fmt) -> str:
    return click.unstyle(render_modal(modal, fmt))


@pytest.mark.unit
class TestRenderModal:

    def test_empty_list(self, modal, fmt):
        text = _text(modal, fmt)
        assert "Invoices for PO-2024-042" in text
        assert "No invoices created for this purchase order" in text

    def test_list_rows(self, modal, fmt, sample_invoice):
        modal.invoices = [PurchaseInvoice.model_validate(sample_invoice)]
        text = _text(modal, fmt)
        assert "CB-INV-2024-000117" in text
        assert "Partially Paid" in text
        assert "Balance: OMR 105.500" in text

    def test_create_vendor_lists_orders(self, modal, fmt, sample_unbilled_orders):
        mode = modal.start_create()
        mode.bill_type = "vendor"
        mode.available_orders = [PurchaseOrder.model_validate(o) for o in sample_unbilled_orders]
        mode.selected_orders = mode.available_orders[:1]
        text = _text(modal, fmt)
        assert "Purchase orders (1 of 3 selected)" in text
        assert "[x] 1. PO-101" in text
        assert "[ ] 2. PO-102" in text
        assert "Total: OMR 100.000" in text

    def test_view_shows_document(self, modal, fmt, sample_invoice):
        modal.view_invoice(PurchaseInvoice.model_validate({**sample_invoice, "attachment": "invoices/17/a.pdf"}))
        text = _text(modal, fmt)
        assert "Invoice Details" in text
        assert "Document: a.pdf" in text
        assert "Due date:        04 Apr 2024" in text

    def test_payment_shows_cap(self, modal, fmt, sample_invoice):
        modal.start_payment(PurchaseInvoice.model_validate(sample_invoice))
        text = _text(modal, fmt)
        assert "Amount (max 105.500): 105.500" in text
        assert "Bank Transfer" in text

    def test_message_and_loading(self, modal, fmt):
        modal.message = Message("error", "Invoice number is required")
        modal.loading = True
        lines = _text(modal, fmt).splitlines()
        assert lines[0] == "Invoice number is required"
        assert lines[-1] == "  (working...)"

    def test_unknown_mode_fails_loudly(self, modal, fmt):
        modal.mode = object()
        with pytest.raises(TypeError):
            render_modal(modal, fmt)

    def test_badge_unknown_status(self):
        assert click.unstyle(render_badge("weird")).endswith("Unpaid")
