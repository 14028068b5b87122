from __future__ import annotations

import logging
from decimal import Decimal

from dealdesk.models import ZERO, format_ils
from dealdesk.models.bill import Bill
from dealdesk.models.customer import CustomerTransaction, TransactionType
from dealdesk.models.deal import Deal, DealType
from dealdesk.repositories.base import CustomerRepository, CustomerTransactionRepository
from dealdesk.services.balance import deal_price, payment_description, signed_bill_amount, trade_in_credit
from dealdesk.settings import settings

logger = logging.getLogger(__name__)


def customer_id_for_deal(deal: Deal) -> int | None:
    """Whose ledger a deal moves: the customer, or for intermediary deals the seller, then the buyer."""
    if deal.customer_id:
        return deal.customer_id
    if deal.deal_type == DealType.INTERMEDIARY.value:
        return deal.seller_id or deal.buyer_id or None
    return None


class LedgerService:
    """Running per-customer balance, with one transaction row per movement.

    Negative balance means the customer owes money.
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        transaction_repo: CustomerTransactionRepository,
    ) -> None:
        self.customer_repo = customer_repo
        self.transaction_repo = transaction_repo

    def update_customer_balance(
        self,
        customer_id: int,
        amount: Decimal,
        transaction_type: TransactionType,
        reference_id: str,
        description: str,
    ) -> bool:
        customer = self.customer_repo.get_by_id(customer_id)
        if customer is None:
            logger.error("Cannot update balance: customer %s not found", customer_id)
            return False

        balance_before = customer.balance
        balance_after = balance_before + amount
        self.customer_repo.update_balance(customer_id, balance_after)

        try:
            self.transaction_repo.create(
                CustomerTransaction(
                    customer_id=customer_id,
                    type=transaction_type,
                    amount=amount,
                    balance_before=balance_before,
                    balance_after=balance_after,
                    reference_id=reference_id,
                    description=description,
                )
            )
        except Exception:
            logger.exception("Could not record transaction for customer %s", customer_id)

        logger.info("Balance updated for customer %s: %s -> %s", customer_id, balance_before, balance_after)
        return True

    def _resolve_customer(self, deal: Deal) -> int | None:
        customer_id = customer_id_for_deal(deal)
        if customer_id is None:
            logger.warning("Deal %s has no customer, ledger not updated", deal.id)
        return customer_id

    def handle_deal_created(self, deal: Deal) -> bool:
        """Charge the customer the deal's selling price."""
        customer_id = self._resolve_customer(deal)
        if customer_id is None:
            return False
        price = abs(deal_price(deal))
        return self.update_customer_balance(
            customer_id,
            -price,
            TransactionType.DEAL_CREATED,
            str(deal.id),
            f"Deal created: {deal.title} ({format_ils(price, settings.currency_symbol)})",
        )

    def handle_exchange_car_credit(self, deal: Deal) -> bool:
        """Credit the customer for the car they handed over in an exchange."""
        credit = trade_in_credit(deal)
        if credit <= 0:
            logger.debug("No car evaluation to credit for deal %s", deal.id)
            return True
        customer_id = self._resolve_customer(deal)
        if customer_id is None:
            return False
        return self.update_customer_balance(
            customer_id,
            credit,
            TransactionType.DEAL_CREATED,
            str(deal.id),
            f"Credit for customer car in exchange deal: {deal.title} ({format_ils(credit, settings.currency_symbol)})",
        )

    def handle_deal_deleted(self, deal: Deal) -> bool:
        """Reverse what creating the deal charged, trade-in credit included."""
        customer_id = self._resolve_customer(deal)
        if customer_id is None:
            return False
        net = abs(deal_price(deal)) - trade_in_credit(deal)
        return self.update_customer_balance(
            customer_id,
            net,
            TransactionType.DEAL_DELETED,
            str(deal.id),
            f"Deal deleted: {deal.title} ({format_ils(net, settings.currency_symbol)})",
        )

    def _receipt_description(self, bill: Bill, deal: Deal, amount: Decimal, customer_name: str) -> str:
        symbol = settings.currency_symbol
        breakdown = payment_description(bill, symbol)
        if amount < 0:
            return f"Expense/Deduction for {customer_name}: {breakdown}"

        owed = max(ZERO, abs(deal_price(deal)) - trade_in_credit(deal))
        if owed > 0 and amount > owed:
            excess = amount - owed
            return (
                f"Payment received from {customer_name}: {breakdown} "
                f"({format_ils(owed, symbol)} for deal + {format_ils(excess, symbol)} excess)"
            )
        if owed > 0:
            return f"Payment received from {customer_name}: {breakdown} (towards deal)"
        note = " (exchange deal - car value credited)" if deal.deal_type == DealType.EXCHANGE.value else ""
        return f"Payment received from {customer_name}: {breakdown}{note}"

    def handle_receipt_created(self, bill: Bill, deal: Deal) -> bool:
        amount = signed_bill_amount(bill)
        if amount == 0:
            logger.debug("No payment amount to process for bill %s", bill.id)
            return True
        customer_id = self._resolve_customer(deal)
        if customer_id is None:
            return False
        return self.update_customer_balance(
            customer_id,
            amount,
            TransactionType.RECEIPT_CREATED,
            str(bill.id),
            self._receipt_description(bill, deal, amount, bill.customer_name or deal.title),
        )

    def handle_receipt_deleted(self, bill: Bill, deal: Deal) -> bool:
        amount = signed_bill_amount(bill)
        if amount == 0:
            logger.debug("No payment amount to reverse for bill %s", bill.id)
            return True
        customer_id = self._resolve_customer(deal)
        if customer_id is None:
            return False
        breakdown = payment_description(bill, settings.currency_symbol)
        name = bill.customer_name or deal.title
        if amount < 0:
            description = f"Reversed expense/deduction for {name}: {breakdown}"
        else:
            description = f"Reversed payment from {name}: {breakdown}"
        return self.update_customer_balance(
            customer_id,
            -amount,
            TransactionType.RECEIPT_DELETED,
            str(bill.id),
            description,
        )

    def list_transactions(self, customer_id: int) -> list[CustomerTransaction]:
        return self.transaction_repo.list_by_customer(customer_id)
