"""
Terminal rendering of the invoice modal.

One renderer per mode; render_modal dispatches on the mode type and refuses
anything it does not know, so adding a mode without a renderer fails loudly.
"""
import click

from desk.formatting import Formatter
from desk.invoice_modal import (
    CreateMode,
    InvoiceModal,
    ListMode,
    PaymentMode,
    ViewMode,
    status_badge,
)
from models.invoice import PAYMENT_METHODS

# badge hex colour -> closest terminal colour
_TERMINAL_COLORS = {
    "#f59e0b": "yellow",
    "#3b82f6": "blue",
    "#10b981": "green",
    "#ef4444": "red",
}
_ICONS = {"clock": "◷", "check": "✓", "alert": "!"}


def render_badge(status) -> str:
    badge = status_badge(status)
    return click.style(
        f"{_ICONS.get(badge.icon, '')} {badge.label}",
        fg=_TERMINAL_COLORS.get(badge.color, "white"),
    )


def _render_list(modal: InvoiceModal, fmt: Formatter) -> list[str]:
    order = modal.purchase_order
    lines = [f"Invoices for {order.order_number or order.id}", ""]
    if not modal.invoices:
        lines.append("  No invoices created for this purchase order")
        return lines
    for idx, inv in enumerate(modal.invoices, start=1):
        lines.append(
            f"  [{idx}] {inv.invoice_number or '(no number)':<20} "
            f"{fmt.format_date(inv.invoice_date):<12} {render_badge(inv.payment_status)}"
        )
        lines.append(
            f"      Amount: {fmt.format_currency(inv.invoice_amount)}   "
            f"Paid: {fmt.format_currency(inv.paid_amount)}   "
            f"Balance: {fmt.format_currency(inv.balance_due)}"
        )
    return lines


def _render_create(modal: InvoiceModal, mode: CreateMode, fmt: Formatter) -> list[str]:
    form = mode.form
    bill = "Vendor Bill (multiple purchase orders)" if mode.bill_type == "vendor" \
        else "Company Bill (this purchase order)"
    lines = [
        "Create New Invoice",
        "",
        f"  Bill type:       {bill}",
        f"  Invoice number:  {form.invoice_number}",
        f"  Invoice date:    {form.invoice_date}",
        f"  Amount ({fmt.currency_code}):    {form.invoice_amount or '-'}",
        f"  Payment terms:   {form.payment_terms_days or 0} days",
        f"  Due date:        {form.due_date or '-'}",
        f"  Notes:           {form.notes or '-'}",
    ]
    if mode.bill_type == "vendor":
        lines += ["", f"  Purchase orders ({len(mode.selected_orders)} of "
                      f"{len(mode.available_orders)} selected)"]
        if not mode.available_orders:
            lines.append("    No unbilled purchase orders available")
        selected_ids = {o.id for o in mode.selected_orders}
        for idx, po in enumerate(mode.available_orders, start=1):
            tick = "x" if po.id in selected_ids else " "
            lines.append(
                f"    [{tick}] {idx}. {po.order_number or po.id:<16} "
                f"{fmt.format_currency(po.total_amount):>16}  "
                f"{po.supplier_name or ''} • {fmt.format_date(po.order_date)}"
            )
        if mode.selected_orders:
            lines.append(f"    Total: {fmt.format_currency(mode.selected_total)}")
    return lines


def _render_view(mode: ViewMode, fmt: Formatter) -> list[str]:
    inv = mode.invoice
    lines = [
        "Invoice Details",
        "",
        f"  Invoice number:  {inv.invoice_number}",
        f"  Status:          {render_badge(inv.payment_status)}",
        f"  Invoice date:    {fmt.format_date(inv.invoice_date)}",
        f"  Due date:        {fmt.format_date(inv.due_date) if inv.due_date else 'N/A'}",
        f"  Invoice amount:  {fmt.format_currency(inv.invoice_amount)}",
        f"  Paid amount:     {fmt.format_currency(inv.paid_amount)}",
        f"  Balance due:     {fmt.format_currency(inv.balance_due)}",
        f"  Payment terms:   {inv.payment_terms_days or 0} days",
    ]
    if inv.notes:
        lines += ["", f"  Notes: {inv.notes}"]
    lines += ["", f"  Document: {inv.attachment_name or '(none attached)'}"]
    return lines


def _render_payment(mode: PaymentMode, fmt: Formatter) -> list[str]:
    inv, form = mode.invoice, mode.form
    return [
        "Record Payment",
        "",
        f"  Invoice number:  {inv.invoice_number}",
        f"  Invoice amount:  {fmt.format_currency(inv.invoice_amount)}",
        f"  Already paid:    {fmt.format_currency(inv.paid_amount)}",
        f"  Balance due:     {fmt.format_currency(inv.balance_due)}",
        "",
        f"  Amount (max {mode.max_payment:.3f}): {form.amount}",
        f"  Payment date:    {form.payment_date}",
        f"  Method:          {PAYMENT_METHODS.get(form.payment_method, form.payment_method)}",
        f"  Reference:       {form.reference or '-'}",
    ]


def render_modal(modal: InvoiceModal, fmt: Formatter) -> str:
    mode = modal.mode
    if isinstance(mode, ListMode):
        lines = _render_list(modal, fmt)
    elif isinstance(mode, CreateMode):
        lines = _render_create(modal, mode, fmt)
    elif isinstance(mode, ViewMode):
        lines = _render_view(mode, fmt)
    elif isinstance(mode, PaymentMode):
        lines = _render_payment(mode, fmt)
    else:
        raise TypeError(f"No renderer for modal mode {type(mode).__name__}")

    if modal.message.text:
        color = "red" if modal.message.type == "error" else "green"
        lines = [click.style(modal.message.text, fg=color), ""] + lines
    if modal.loading:
        lines.append("  (working...)")
    return "\n".join(lines)
