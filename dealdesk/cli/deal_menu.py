from __future__ import annotations

from decimal import Decimal

import questionary
from rich.console import Console
from rich.table import Table

from dealdesk.constants import BILL_TYPE_LABELS, DEAL_TYPE_LABELS, STATUS_LABELS, label
from dealdesk.models import format_ils, parse_ils
from dealdesk.models.bill import Bill, BillDirection, BillPayment, BillType, PaymentType
from dealdesk.models.deal import Deal, DealStatus, DealType
from dealdesk.services.balance import extract_bill_amount, signed_bill_amount
from dealdesk.services.deal_service import DealLockedError, DealService, deal_table_state
from dealdesk.services.table import PAGE_SIZES, TablePage
from dealdesk.settings import settings

console = Console()

BACK = "Back"

SORT_COLUMNS = {
    "Title": "deal.title",
    "Type": "deal.deal_type",
    "Status": "deal.status",
    "Customer": "customer_name",
    "Selling price": "deal.selling_price",
    "Balance": "balance",
    "Created": "deal.created_at",
}


def _money(amount) -> str:
    return format_ils(amount, settings.currency_symbol)


def _balance_style(amount) -> str:
    if amount < 0:
        return "red"
    if amount > 0:
        return "green"
    return "dim"


def render_deals_table(page: TablePage) -> Table:
    table = Table(title="Deals")
    table.add_column("#", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Customer")
    table.add_column("Selling price", justify="right")
    table.add_column("Balance", justify="right")

    for row in page.records:
        deal = row.deal
        table.add_row(
            str(deal.id),
            deal.title,
            label(DEAL_TYPE_LABELS, deal.deal_type),
            label(STATUS_LABELS, deal.status),
            row.customer_name,
            _money(deal.selling_price if deal.selling_price is not None else deal.amount),
            f"[{_balance_style(row.balance)}]{_money(row.balance)}[/]",
        )
    return table


def _choose_enum(prompt: str, labels: dict) -> str | None:
    """Select a value from a label map. Returns '' for 'Any' and None on cancel."""
    choices = ["Any"] + list(labels.values())
    choice = questionary.select(prompt, choices=choices).ask()
    if choice is None:
        return None
    for key, text in labels.items():
        if text == choice:
            return key.value
    return ""


def list_deals_menu(deal_service: DealService) -> None:
    rows = deal_service.list_deal_rows()
    if not rows:
        console.print("[yellow]No deals yet.[/yellow]")
        return

    state = deal_table_state(settings.page_size)

    while True:
        page = state.apply(rows)
        console.print()
        console.print(render_deals_table(page))
        console.print(f"  Page {page.page}/{page.page_count} ({page.total_records} deals)")
        console.print()

        actions = ["Open Deal", "Delete Deals", "Search", "Filter by Type", "Filter by Status", "Sort", "Page Size"]
        if page.has_next:
            actions.append("Next Page")
        if page.has_previous:
            actions.append("Previous Page")
        actions += ["Clear Filters", BACK]

        choice = questionary.select("Actions:", choices=actions).ask()
        if choice is None or choice == BACK:
            return
        elif choice == "Open Deal":
            if not page.records:
                console.print("[yellow]No deals on this page.[/yellow]")
                continue
            deal_choices = {f"{r.deal.id} - {r.deal.title}": r.deal for r in page.records}
            picked = questionary.select("Select a deal:", choices=list(deal_choices) + [BACK]).ask()
            if picked is None or picked == BACK:
                continue
            deal_detail_menu(deal_choices[picked], deal_service)
            rows = deal_service.list_deal_rows()
        elif choice == "Delete Deals":
            if not page.records:
                console.print("[yellow]No deals on this page.[/yellow]")
                continue
            deal_choices = {f"{r.deal.id} - {r.deal.title}": r.deal for r in page.records}
            picked = questionary.checkbox("Select deals to delete:", choices=list(deal_choices)).ask()
            if not picked:
                continue
            if not questionary.confirm(f"Delete {len(picked)} deal(s)?", default=False).ask():
                continue
            deleted = deal_service.delete_deals([deal_choices[p].id for p in picked])
            console.print(f"[green]{deleted} of {len(picked)} deal(s) deleted.[/green]")
            if deleted < len(picked):
                console.print("[yellow]Closed deals were skipped.[/yellow]")
            rows = deal_service.list_deal_rows()
        elif choice == "Search":
            text = questionary.text("Search:").ask()
            if text is not None:
                state.set_filter("search", text)
        elif choice == "Filter by Type":
            value = _choose_enum("Deal type:", DEAL_TYPE_LABELS)
            if value is not None:
                state.set_filter("deal_type", value)
        elif choice == "Filter by Status":
            value = _choose_enum("Status:", STATUS_LABELS)
            if value is not None:
                state.set_filter("status", value)
        elif choice == "Sort":
            column = questionary.select("Sort by:", choices=list(SORT_COLUMNS)).ask()
            if column is not None:
                state.toggle_sort(SORT_COLUMNS[column])
        elif choice == "Page Size":
            size = questionary.select("Deals per page:", choices=[str(s) for s in PAGE_SIZES]).ask()
            if size is not None:
                state.set_page_size(int(size))
        elif choice == "Next Page":
            state.set_page(state.page + 1)
        elif choice == "Previous Page":
            state.set_page(state.page - 1)
        elif choice == "Clear Filters":
            state.clear_filters()


def _show_deal_detail(deal: Deal, deal_service: DealService) -> None:
    console.print()
    console.print(f"[bold cyan]Deal: {deal.title}[/bold cyan]")
    console.print(f"  Type: {label(DEAL_TYPE_LABELS, deal.deal_type)}  Status: {label(STATUS_LABELS, deal.status)}")
    if deal.description:
        console.print(f"  {deal.description}")

    table = Table(title="Bills")
    table.add_column("#", style="dim")
    table.add_column("Type")
    table.add_column("Direction")
    table.add_column("Amount", justify="right")
    table.add_column("Counts as", justify="right")

    for bill in deal.bills:
        table.add_row(
            str(bill.id),
            label(BILL_TYPE_LABELS, bill.bill_type),
            bill.bill_direction or "",
            _money(extract_bill_amount(bill)),
            _money(signed_bill_amount(bill)),
        )
    console.print(table)

    balance = deal_service.deal_balance(deal)
    console.print(f"  [bold]Balance: [{_balance_style(balance)}]{_money(balance)}[/][/bold]")
    if not deal.is_editable:
        console.print("  [dim]This deal is closed and cannot be changed.[/dim]")


def deal_detail_menu(deal: Deal, deal_service: DealService) -> None:
    while True:
        _show_deal_detail(deal, deal_service)
        console.print()

        choice = questionary.select("Actions:", choices=["Add Receipt", "Change Status", "Delete Deal", BACK]).ask()
        if choice is None or choice == BACK:
            return
        try:
            if choice == "Add Receipt":
                add_receipt_menu(deal, deal_service)
            elif choice == "Change Status":
                value = _choose_enum("New status:", STATUS_LABELS)
                if value:
                    deal = deal_service.change_status(deal, value)
            elif choice == "Delete Deal":
                confirm = questionary.confirm(f"Delete '{deal.title}'?", default=False).ask()
                if confirm:
                    if deal.id is not None and deal_service.delete_deal(deal.id):
                        console.print("[green]Deal deleted.[/green]")
                    else:
                        console.print("[yellow]Deal was already deleted.[/yellow]")
                    return
        except DealLockedError as exc:
            console.print(f"[red]{exc}[/red]")


def _ask_amount(prompt: str) -> Decimal | None:
    while True:
        value = questionary.text(prompt).ask()
        if value is None:
            return None
        parsed = parse_ils(value)
        if parsed is not None and parsed > 0:
            return parsed
        console.print("[red]Invalid amount. Try again.[/red]")


def add_receipt_menu(deal: Deal, deal_service: DealService) -> Bill | None:
    console.print()
    console.print("[bold]New Receipt[/bold]", style="cyan")

    type_labels = {
        BILL_TYPE_LABELS[BillType.RECEIPT_ONLY]: BillType.RECEIPT_ONLY,
        BILL_TYPE_LABELS[BillType.TAX_INVOICE_RECEIPT]: BillType.TAX_INVOICE_RECEIPT,
    }
    type_choice = questionary.select("Bill type:", choices=list(type_labels)).ask()
    if type_choice is None:
        console.print("[yellow]Cancelled.[/yellow]")
        return None

    direction = questionary.select(
        "Direction:", choices=[BillDirection.POSITIVE.value, BillDirection.NEGATIVE.value]
    ).ask()
    if direction is None:
        console.print("[yellow]Cancelled.[/yellow]")
        return None

    payments: list[BillPayment] = []
    while True:
        add = questionary.confirm("Add payment?", default=not payments).ask()
        if not add:
            break
        payment_type = questionary.select("  Payment type:", choices=[p.value for p in PaymentType]).ask()
        if payment_type is None:
            continue
        amount = _ask_amount("  Amount (e.g. 1500.00):")
        if amount is None:
            continue
        payments.append(BillPayment(payment_type=payment_type, amount=amount))
        console.print(f"  [green]Payment added: {payment_type} {_money(amount)}[/green]")

    if not payments:
        console.print("[yellow]No payments added. Receipt not created.[/yellow]")
        return None

    bill = deal_service.add_bill(
        deal,
        Bill(
            bill_type=type_labels[type_choice].value,
            bill_direction=direction,
            bill_payments=payments,
        ),
    )
    console.print(f"[green bold]Receipt {bill.id} created.[/green bold]")
    return bill


def create_deal_menu(deal_service: DealService) -> Deal | None:
    console.print()
    console.print("[bold]New Deal[/bold]", style="cyan")

    title = questionary.text("Title:").ask()
    if not title:
        console.print("[yellow]Cancelled.[/yellow]")
        return None

    deal_type = _choose_enum("Deal type:", DEAL_TYPE_LABELS)
    if not deal_type:
        console.print("[yellow]Cancelled.[/yellow]")
        return None

    price = _ask_amount("Selling price:")
    if price is None:
        console.print("[yellow]Cancelled.[/yellow]")
        return None

    car_value = None
    if deal_type == DealType.EXCHANGE.value:
        car_value = _ask_amount("Customer car evaluation:")

    customers = {f"{c.id} - {c.name}": c for c in deal_service.list_customers()}
    customer_id = None
    if customers:
        picked = questionary.select("Customer:", choices=list(customers) + ["None"]).ask()
        if picked in customers:
            customer_id = customers[picked].id

    deal = deal_service.create_deal(
        Deal(
            title=title,
            deal_type=deal_type,
            status=DealStatus.ACTIVE.value,
            selling_price=price,
            customer_car_eval_value=car_value,
            customer_id=customer_id,
        )
    )
    console.print(f"[green bold]Deal '{deal.title}' created.[/green bold]")
    return deal
