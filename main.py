#!/usr/bin/env python3
"""
Procurement Desk — CLI entry point.

Usage examples:
  python main.py check                                  # Verify config and API access
  python main.py invoices --status unpaid               # List unpaid invoices
  python main.py invoices --bill-type vendor --from 2024-01-01
  python main.py modal 42                               # Interactive invoice screen for PO 42
  python main.py pay 17 --amount 250.000 --method cheque --reference CHQ-1182
  python main.py sync                                   # Run all maintenance syncs
  python main.py stock-report inventory.json materials.json --csv --print
"""
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from config import Config
from desk.formatting import Formatter
from desk.invoice_modal import CreateMode, InvoiceModal, ListMode, PaymentMode, ViewMode
from desk.render import render_badge, render_modal
from desk.stock_report import StockReport
from models.invoice import PAYMENT_METHODS, PaymentForm, PurchaseInvoice
from models.purchase_order import PurchaseOrder
from services import (
    ApiTransport,
    PurchaseInvoiceService,
    PurchaseOrderService,
    UploadService,
    calculate_days_overdue,
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quieten noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Procurement Desk — purchase invoices, payments and stock reports."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _setup_logging(verbose)


def _transport(ctx: click.Context) -> ApiTransport:
    config = Config()
    transport = ApiTransport(config)
    ctx.call_on_close(transport.close)
    return transport


def _fail(message: str) -> None:
    click.echo(f"✗ {message}", err=True)
    sys.exit(1)


# --------------------------------------------------------------------
# check command
# --------------------------------------------------------------------

@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Verify that the API is reachable with the configured token."""
    config = Config()
    click.echo("\n=== Procurement Desk Setup Check ===\n")
    click.echo(f"  API endpoint:  {config.api_base_url}")
    click.echo(f"  API token:     {'✓ set' if config.api_token else '✗ NOT set (API_TOKEN)'}")
    click.echo(f"  Company:       {config.company_name}")
    click.echo(f"  Currency:      {config.currency_code} ({config.currency_decimals} decimals)")
    click.echo(f"  Export dir:    {config.export_dir}")

    result = PurchaseInvoiceService(_transport(ctx)).get_all(limit=1)
    if result.success:
        click.echo("  API access:    ✓ OK")
    else:
        click.echo(f"  API access:    ✗ {result.error}")
    click.echo()


# --------------------------------------------------------------------
# invoices command
# --------------------------------------------------------------------

@cli.command()
@click.option("--search", default=None, help="Free-text search")
@click.option("--supplier", "supplier_id", default=None, help="Supplier id")
@click.option("--po", "purchase_order_id", default=None, help="Purchase order id")
@click.option("--status", "payment_status",
              type=click.Choice(["unpaid", "partial", "paid", "overdue"]), default=None)
@click.option("--bill-type", type=click.Choice(["company", "vendor"]), default=None)
@click.option("--bill-status", type=click.Choice(["draft", "sent"]), default=None)
@click.option("--from", "from_date", default=None, help="From date (YYYY-MM-DD)")
@click.option("--to", "to_date", default=None, help="To date (YYYY-MM-DD)")
@click.option("--project", "project_id", default=None, help="Project id ('all' for every project)")
@click.option("--page", type=int, default=None)
@click.option("--limit", type=int, default=None)
@click.pass_context
def invoices(ctx: click.Context, **filters) -> None:
    """List purchase invoices."""
    config = Config()
    fmt = Formatter.from_config(config)
    service = PurchaseInvoiceService(_transport(ctx))

    result = service.get_all(**filters)
    if not result.success:
        _fail(result.error)

    rows = [PurchaseInvoice.model_validate(r) for r in result.data or []]
    if not rows:
        click.echo("No purchase invoices found.")
        return

    for inv in rows:
        overdue = calculate_days_overdue(inv.due_date) if inv.balance_due > 0 else 0
        late = click.style(f"  {overdue}d overdue", fg="red") if overdue else ""
        click.echo(
            f"  {inv.invoice_number or inv.id!s:<20} "
            f"{service.get_bill_type_name(inv.bill_type or 'company'):<13} "
            f"{fmt.format_date(inv.invoice_date):<12} "
            f"{fmt.format_currency(inv.invoice_amount):>18} "
            f"bal {fmt.format_currency(inv.balance_due):>18}  "
            f"{render_badge(inv.payment_status)}{late}"
        )
    click.echo(f"\n{len(rows)} invoice(s).")


# --------------------------------------------------------------------
# modal command
# --------------------------------------------------------------------

def _pick(items: list, prompt: str):
    idx = click.prompt(prompt, type=click.IntRange(1, len(items)))
    return items[idx - 1]


def _fill_create_form(modal: InvoiceModal, mode: CreateMode, fmt: Formatter) -> None:
    if click.confirm("Vendor bill covering several purchase orders?", default=False):
        modal.set_bill_type("vendor")
        click.echo(render_modal(modal, fmt))
        if mode.available_orders:
            picks = click.prompt("Order numbers to include (e.g. 1,3)", default="")
            for part in filter(None, (p.strip() for p in picks.split(","))):
                if part.isdigit() and 1 <= int(part) <= len(mode.available_orders):
                    modal.toggle_order(mode.available_orders[int(part) - 1], True)
    form = mode.form
    form.invoice_number = click.prompt("Invoice number", default=form.invoice_number)
    form.invoice_date = click.prompt("Invoice date", default=form.invoice_date)
    form.invoice_amount = click.prompt("Invoice amount", default=form.invoice_amount or "")
    form.payment_terms_days = click.prompt("Payment terms (days)", default=0, type=int)
    form.due_date = click.prompt("Due date", default="", show_default=False)
    form.notes = click.prompt("Notes", default="", show_default=False)


def _fill_payment_form(mode: PaymentMode) -> None:
    form = mode.form
    form.amount = click.prompt(f"Amount (max {mode.max_payment:.3f})", default=form.amount)
    form.payment_date = click.prompt("Payment date", default=form.payment_date)
    form.payment_method = click.prompt(
        "Method", type=click.Choice(list(PAYMENT_METHODS)), default=form.payment_method,
    )
    form.reference = click.prompt("Reference", default="", show_default=False)
    form.notes = click.prompt("Notes", default="", show_default=False)


@cli.command()
@click.argument("purchase_order_id")
@click.pass_context
def modal(ctx: click.Context, purchase_order_id: str) -> None:
    """Interactive invoice screen for one purchase order."""
    config = Config()
    transport = _transport(ctx)
    order_service = PurchaseOrderService(transport)

    found = order_service.get_by_id(purchase_order_id)
    if not found.success:
        _fail(found.error)

    screen = InvoiceModal(
        PurchaseOrder.model_validate(found.data),
        PurchaseInvoiceService(transport),
        order_service,
        UploadService(transport),
    )
    fmt = Formatter.from_config(config)
    screen.open()

    while screen.is_open:
        click.clear()
        click.echo(render_modal(screen, fmt))
        click.echo()
        mode = screen.mode

        if isinstance(mode, ListMode):
            action = click.prompt("[c]reate  [v]iew  [p]ay  [r]efresh  [q]uit",
                                  type=click.Choice(list("cvprq")), show_choices=False)
            if action == "q":
                screen.close()
            elif action == "r":
                screen.load_invoices()
            elif action == "c":
                _fill_create_form(screen, screen.start_create(), fmt)
                screen.submit_create()
            elif screen.invoices and action == "v":
                screen.view_invoice(_pick(screen.invoices, "Invoice #"))
            elif screen.invoices and action == "p":
                payable = [i for i in screen.invoices if i.balance_due > 0]
                if payable:
                    _fill_payment_form(screen.start_payment(_pick(payable, "Invoice # (with balance)")))
                    screen.submit_payment()

        elif isinstance(mode, ViewMode):
            action = click.prompt("[u]pload document  [d]elete document  [p]ay  [b]ack",
                                  type=click.Choice(list("udpb")), show_choices=False)
            if action == "b":
                screen.back_to_list()
            elif action == "u":
                path = Path(click.prompt("Document path", type=click.Path(exists=True, dir_okay=False)))
                screen.upload_attachment(path.name, path.read_bytes())
            elif action == "d":
                screen.delete_attachment()
            elif action == "p" and mode.invoice.balance_due > 0:
                _fill_payment_form(screen.start_payment(mode.invoice))
                screen.submit_payment()

        elif isinstance(mode, (CreateMode, PaymentMode)):
            # A submission failed validation; let the user retry or give up.
            if click.confirm("Edit and resubmit?", default=True):
                if isinstance(mode, CreateMode):
                    _fill_create_form(screen, mode, fmt)
                    screen.submit_create()
                else:
                    _fill_payment_form(mode)
                    screen.submit_payment()
            else:
                screen.back_to_list()


# --------------------------------------------------------------------
# pay command
# --------------------------------------------------------------------

@cli.command()
@click.argument("invoice_id")
@click.option("--amount", required=True, help="Payment amount")
@click.option("--date", "payment_date", default=None, help="Payment date (default: today)")
@click.option("--method", "payment_method", type=click.Choice(list(PAYMENT_METHODS)),
              default="bank_transfer", show_default=True)
@click.option("--reference", default="", help="Transaction id / cheque number")
@click.option("--notes", default="")
@click.pass_context
def pay(
    ctx: click.Context,
    invoice_id: str,
    amount: str,
    payment_date: Optional[str],
    payment_method: str,
    reference: str,
    notes: str,
) -> None:
    """Record a payment against an invoice."""
    form = PaymentForm(amount=amount, payment_method=payment_method, reference=reference, notes=notes)
    if payment_date:
        form.payment_date = payment_date
    try:
        if float(form.amount) <= 0:
            raise ValueError
    except ValueError:
        _fail("Valid payment amount is required")

    result = PurchaseInvoiceService(_transport(ctx)).record_payment(invoice_id, form)
    if not result.success:
        _fail(result.error)
    click.echo(f"✓ {result.message or 'Payment recorded successfully'}")


# --------------------------------------------------------------------
# sync command
# --------------------------------------------------------------------

@cli.command()
@click.pass_context
def sync(ctx: click.Context) -> None:
    """Run the payment-status, prefix and orphan-payment maintenance syncs."""
    report = PurchaseInvoiceService(_transport(ctx)).run_all_sync()
    for label, result in (
        ("Payment status sync", report.status_sync),
        ("Invoice prefix sync", report.prefix_sync),
        ("Orphan payment reset", report.orphan_reset),
    ):
        if result.success:
            detail = result.message or json.dumps(result.data, default=str)
            click.echo(f"  ✓ {label:<22} {detail}")
        else:
            click.echo(f"  ✗ {label:<22} {result.error}")
    if not report.all_succeeded:
        sys.exit(1)


# --------------------------------------------------------------------
# stock-report command
# --------------------------------------------------------------------

@cli.command("stock-report")
@click.argument("inventory_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("materials_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--csv", "write_csv", is_flag=True, help="Write the CSV export")
@click.option("--print", "open_print", is_flag=True, help="Open the printable report in a browser")
@click.option("--output", "-o", default=None, type=click.Path(), help="Output directory")
def stock_report(
    inventory_file: str,
    materials_file: str,
    write_csv: bool,
    open_print: bool,
    output: Optional[str],
) -> None:
    """
    Stock valuation report from an inventory snapshot and the material list.

    \b
    INVENTORY_FILE  JSON object keyed by material id
    MATERIALS_FILE  JSON array of materials
    """
    config = Config()
    if output:
        config.export_dir = Path(output)
    fmt = Formatter.from_config(config)

    inventory = json.loads(Path(inventory_file).read_text(encoding="utf-8"))
    materials = json.loads(Path(materials_file).read_text(encoding="utf-8"))
    report = StockReport(
        inventory, materials,
        company_name=config.company_name, generated_by=config.user_name, formatter=fmt,
    )

    s = report.stats
    click.echo(f"\n  Total materials:   {s.total_materials} ({s.materials_with_stock} in stock)")
    click.echo(f"  Total value:       {fmt.format_currency(s.total_value)}")
    click.echo(f"  Low stock items:   {s.low_stock_count}")
    click.echo(f"  Out of stock:      {s.out_of_stock_count}\n")

    if write_csv or open_print:
        config.ensure_export_dir()
    if write_csv:
        out_file = config.export_dir / report.csv_filename()
        out_file.write_text(report.to_csv(), encoding="utf-8")
        click.echo(f"  CSV written to:    {out_file}")
    if open_print:
        html_file = config.export_dir / f"stock-report-{report.generated_on.isoformat()}.html"
        html_file.write_text(report.render_print_document(), encoding="utf-8")
        click.echo(f"  Print document:    {html_file}")
        click.launch(str(html_file))


if __name__ == "__main__":
    cli()
