import questionary
from rich.console import Console
from rich.table import Table

from dealdesk.cli.deal_menu import create_deal_menu, list_deals_menu
from dealdesk.repositories.factory import (
    get_activity_log_repository,
    get_bill_repository,
    get_customer_repository,
    get_customer_transaction_repository,
    get_deal_repository,
)
from dealdesk.services.activity_service import ActivityService
from dealdesk.services.deal_service import DealService
from dealdesk.services.ledger_service import LedgerService
from dealdesk.storage.factory import get_storage

console = Console()


def _build_services() -> tuple[DealService, ActivityService]:
    customer_repo = get_customer_repository()
    activity_service = ActivityService(get_activity_log_repository())
    ledger = LedgerService(customer_repo, get_customer_transaction_repository())
    deal_service = DealService(
        get_deal_repository(),
        get_bill_repository(),
        get_storage(),
        ledger,
        activity_service,
        customer_repo=customer_repo,
    )
    return deal_service, activity_service


def show_recent_activity(activity_service: ActivityService, limit: int = 20) -> None:
    entries = activity_service.list_recent(limit)
    if not entries:
        console.print("[yellow]No activity recorded.[/yellow]")
        return

    table = Table(title="Recent Activity")
    table.add_column("When", style="dim")
    table.add_column("Type", style="bold")
    table.add_column("Deal")
    table.add_column("Bill")

    for entry in entries:
        when = entry.created_at.strftime("%d/%m/%Y %H:%M") if entry.created_at else ""
        deal = entry.deal.get("title", "") if entry.deal else ""
        bill = str(entry.bill.get("id", "")) if entry.bill else ""
        table.add_row(when, entry.type, deal, bill)

    console.print()
    console.print(table)


def main_menu() -> None:
    deal_service, activity_service = _build_services()

    console.print()
    console.print("[bold]Deal Desk[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "List Deals",
                "New Deal",
                "Recent Activity",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Bye![/bold]")
            break
        elif choice == "List Deals":
            list_deals_menu(deal_service)
        elif choice == "New Deal":
            create_deal_menu(deal_service)
        elif choice == "Recent Activity":
            show_recent_activity(activity_service)
