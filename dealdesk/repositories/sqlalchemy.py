from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from ulid import ULID

from dealdesk.constants import IL_TZ
from dealdesk.models import to_decimal_or_zero
from dealdesk.models.activity_log import ActivityLog
from dealdesk.models.bill import Bill, BillPayment
from dealdesk.models.customer import Customer, CustomerTransaction, TransactionType
from dealdesk.models.deal import Deal
from dealdesk.repositories.base import (
    ActivityLogRepository,
    BillRepository,
    CustomerRepository,
    CustomerTransactionRepository,
    DealRepository,
)


def _now() -> datetime:
    return datetime.now(IL_TZ)


def _raw(value: object) -> object:
    """Bind a raw amount. Decimals go in as strings; the driver may not take them."""
    if isinstance(value, Decimal):
        return str(value)
    return value


def _in_clause(prefix: str, ids: list[int]) -> tuple[str, dict]:
    placeholders = ", ".join(f":{prefix}{i}" for i in range(len(ids)))
    params = {f"{prefix}{i}": value for i, value in enumerate(ids)}
    return placeholders, params


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, bill: Bill) -> Bill:
        bill_uuid = str(ULID())
        result = self.conn.execute(
            text(
                "INSERT INTO bills (uuid, deal_id, bill_type, bill_direction, customer_name, "
                "visa_amount, transfer_amount, check_amount, cash_amount, bank_amount, "
                "bill_amount, total_with_tax, created_at) "
                "VALUES (:uuid, :deal_id, :bill_type, :bill_direction, :customer_name, "
                ":visa_amount, :transfer_amount, :check_amount, :cash_amount, :bank_amount, "
                ":bill_amount, :total_with_tax, :created_at)"
            ),
            {
                "uuid": bill_uuid,
                "deal_id": bill.deal_id,
                "bill_type": bill.bill_type,
                "bill_direction": bill.bill_direction,
                "customer_name": bill.customer_name,
                "visa_amount": _raw(bill.visa_amount),
                "transfer_amount": _raw(bill.transfer_amount),
                "check_amount": _raw(bill.check_amount),
                "cash_amount": _raw(bill.cash_amount),
                "bank_amount": _raw(bill.bank_amount),
                "bill_amount": _raw(bill.bill_amount),
                "total_with_tax": _raw(bill.total_with_tax),
                "created_at": _now(),
            },
        )
        bill_id = result.lastrowid
        for i, payment in enumerate(bill.bill_payments):
            self.conn.execute(
                text(
                    "INSERT INTO bill_payments (bill_id, payment_type, amount, sort_order, created_at) "
                    "VALUES (:bill_id, :payment_type, :amount, :sort_order, :created_at)"
                ),
                {
                    "bill_id": bill_id,
                    "payment_type": payment.payment_type,
                    "amount": _raw(payment.amount),
                    "sort_order": i,
                    "created_at": _now(),
                },
            )
        self.conn.commit()
        result = self.get_by_id(bill_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve bill after create (id={bill_id})")
        return result

    @staticmethod
    def _build_bill(row: RowMapping, payment_rows: list[RowMapping]) -> Bill:
        return Bill(
            id=row["id"],
            uuid=row["uuid"],
            deal_id=row["deal_id"],
            bill_type=row["bill_type"],
            bill_direction=row["bill_direction"],
            customer_name=row["customer_name"],
            visa_amount=row["visa_amount"],
            transfer_amount=row["transfer_amount"],
            check_amount=row["check_amount"],
            cash_amount=row["cash_amount"],
            bank_amount=row["bank_amount"],
            bill_amount=row["bill_amount"],
            total_with_tax=row["total_with_tax"],
            bill_payments=[
                BillPayment(
                    id=p["id"],
                    bill_id=p["bill_id"],
                    payment_type=p["payment_type"],
                    amount=p["amount"],
                    created_at=p["created_at"],
                )
                for p in payment_rows
            ],
            created_at=row["created_at"],
        )

    def build_bills(self, rows: list[RowMapping]) -> list[Bill]:
        """Build bills from rows, fetching all their payments in one query."""
        if not rows:
            return []
        placeholders, params = _in_clause("id", [row["id"] for row in rows])
        all_payments = (
            self.conn.execute(
                text(f"SELECT * FROM bill_payments WHERE bill_id IN ({placeholders}) ORDER BY sort_order"),
                params,
            )
            .mappings()
            .fetchall()
        )
        payments_by_bill: dict[int, list[RowMapping]] = {}
        for payment_row in all_payments:
            payments_by_bill.setdefault(payment_row["bill_id"], []).append(payment_row)
        return [self._build_bill(row, payments_by_bill.get(row["id"], [])) for row in rows]

    def get_by_id(self, bill_id: int) -> Bill | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM bills WHERE id = :id AND deleted_at IS NULL"),
                {"id": bill_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self.build_bills([row])[0]

    def list_by_deal(self, deal_id: int) -> list[Bill]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM bills WHERE deal_id = :deal_id AND deleted_at IS NULL ORDER BY created_at, id"),
                {"deal_id": deal_id},
            )
            .mappings()
            .fetchall()
        )
        return self.build_bills(list(rows))

    def list_by_deals(self, deal_ids: list[int]) -> dict[int, list[Bill]]:
        if not deal_ids:
            return {}
        placeholders, params = _in_clause("deal", deal_ids)
        rows = (
            self.conn.execute(
                text(
                    f"SELECT * FROM bills WHERE deal_id IN ({placeholders}) "
                    "AND deleted_at IS NULL ORDER BY created_at, id"
                ),
                params,
            )
            .mappings()
            .fetchall()
        )
        bills_by_deal: dict[int, list[Bill]] = {}
        for bill in self.build_bills(list(rows)):
            bills_by_deal.setdefault(bill.deal_id, []).append(bill)
        return bills_by_deal

    def delete(self, bill_id: int) -> None:
        self.conn.execute(
            text("UPDATE bills SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": bill_id},
        )
        self.conn.commit()


class SQLAlchemyDealRepository(DealRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn
        self.bills = SQLAlchemyBillRepository(conn)

    @staticmethod
    def _params(deal: Deal) -> dict:
        return {
            "title": deal.title,
            "description": deal.description,
            "deal_type": deal.deal_type,
            "status": deal.status,
            "selling_price": _raw(deal.selling_price),
            "amount": _raw(deal.amount),
            "customer_car_eval_value": _raw(deal.customer_car_eval_value),
            "customer_id": deal.customer_id,
            "seller_id": deal.seller_id,
            "buyer_id": deal.buyer_id,
            "car_id": deal.car_id,
        }

    def create(self, deal: Deal) -> Deal:
        deal_uuid = str(ULID())
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO deals (uuid, title, description, deal_type, status, selling_price, amount, "
                "customer_car_eval_value, customer_id, seller_id, buyer_id, car_id, created_at, updated_at) "
                "VALUES (:uuid, :title, :description, :deal_type, :status, :selling_price, :amount, "
                ":customer_car_eval_value, :customer_id, :seller_id, :buyer_id, :car_id, :created_at, :updated_at)"
            ),
            {**self._params(deal), "uuid": deal_uuid, "created_at": now, "updated_at": now},
        )
        deal_id = result.lastrowid
        self.conn.commit()
        result = self.get_by_id(deal_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve deal after create (id={deal_id})")
        return result

    @staticmethod
    def _build_deal(row: RowMapping, bills: list[Bill]) -> Deal:
        return Deal(
            id=row["id"],
            uuid=row["uuid"],
            title=row["title"],
            description=row["description"],
            deal_type=row["deal_type"],
            status=row["status"],
            selling_price=row["selling_price"],
            amount=row["amount"],
            customer_car_eval_value=row["customer_car_eval_value"],
            customer_id=row["customer_id"],
            seller_id=row["seller_id"],
            buyer_id=row["buyer_id"],
            car_id=row["car_id"],
            bills=bills,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _get_one(self, column: str, value: object) -> Deal | None:
        row = (
            self.conn.execute(
                text(f"SELECT * FROM deals WHERE {column} = :value AND deleted_at IS NULL"),
                {"value": value},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_deal(row, self.bills.list_by_deal(row["id"]))

    def get_by_id(self, deal_id: int) -> Deal | None:
        return self._get_one("id", deal_id)

    def get_by_uuid(self, uuid: str) -> Deal | None:
        return self._get_one("uuid", uuid)

    def list_all(self) -> list[Deal]:
        rows = (
            self.conn.execute(text("SELECT * FROM deals WHERE deleted_at IS NULL ORDER BY created_at DESC, id DESC"))
            .mappings()
            .fetchall()
        )
        bills_by_deal = self.bills.list_by_deals([row["id"] for row in rows])
        return [self._build_deal(row, bills_by_deal.get(row["id"], [])) for row in rows]

    def update(self, deal: Deal) -> Deal:
        if deal.id is None:
            raise ValueError("Cannot update deal without an id")
        self.conn.execute(
            text(
                "UPDATE deals SET title = :title, description = :description, deal_type = :deal_type, "
                "status = :status, selling_price = :selling_price, amount = :amount, "
                "customer_car_eval_value = :customer_car_eval_value, customer_id = :customer_id, "
                "seller_id = :seller_id, buyer_id = :buyer_id, car_id = :car_id, updated_at = :updated_at "
                "WHERE id = :id"
            ),
            {**self._params(deal), "updated_at": _now(), "id": deal.id},
        )
        self.conn.commit()
        result = self.get_by_id(deal.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve deal after update (id={deal.id})")
        return result

    def update_status(self, deal_id: int, status: str) -> None:
        self.conn.execute(
            text("UPDATE deals SET status = :status, updated_at = :updated_at WHERE id = :id"),
            {"status": status, "updated_at": _now(), "id": deal_id},
        )
        self.conn.commit()

    def delete(self, deal_id: int) -> None:
        self.conn.execute(
            text("UPDATE deals SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": deal_id},
        )
        self.conn.commit()


class SQLAlchemyCustomerRepository(CustomerRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_customer(row: RowMapping) -> Customer:
        return Customer(
            id=row["id"],
            uuid=row["uuid"],
            name=row["name"],
            id_number=row["id_number"],
            phone=row["phone"],
            balance=to_decimal_or_zero(row["balance"]),
            created_at=row["created_at"],
        )

    def create(self, customer: Customer) -> Customer:
        customer_uuid = str(ULID())
        result = self.conn.execute(
            text(
                "INSERT INTO customers (uuid, name, id_number, phone, balance, created_at) "
                "VALUES (:uuid, :name, :id_number, :phone, :balance, :created_at)"
            ),
            {
                "uuid": customer_uuid,
                "name": customer.name,
                "id_number": customer.id_number,
                "phone": customer.phone,
                "balance": str(customer.balance),
                "created_at": _now(),
            },
        )
        customer_id = result.lastrowid
        self.conn.commit()
        result = self.get_by_id(customer_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve customer after create (id={customer_id})")
        return result

    def get_by_id(self, customer_id: int) -> Customer | None:
        row = (
            self.conn.execute(text("SELECT * FROM customers WHERE id = :id"), {"id": customer_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_customer(row)

    def get_by_name(self, name: str) -> Customer | None:
        row = (
            self.conn.execute(text("SELECT * FROM customers WHERE name = :name ORDER BY id LIMIT 1"), {"name": name})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_customer(row)

    def list_all(self) -> list[Customer]:
        rows = self.conn.execute(text("SELECT * FROM customers ORDER BY name")).mappings().fetchall()
        return [self._row_to_customer(row) for row in rows]

    def update_balance(self, customer_id: int, balance: Decimal) -> None:
        self.conn.execute(
            text("UPDATE customers SET balance = :balance WHERE id = :id"),
            {"balance": str(balance), "id": customer_id},
        )
        self.conn.commit()


class SQLAlchemyCustomerTransactionRepository(CustomerTransactionRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_transaction(row: RowMapping) -> CustomerTransaction:
        return CustomerTransaction(
            id=row["id"],
            customer_id=row["customer_id"],
            type=TransactionType(row["type"]),
            amount=to_decimal_or_zero(row["amount"]),
            balance_before=to_decimal_or_zero(row["balance_before"]),
            balance_after=to_decimal_or_zero(row["balance_after"]),
            reference_id=row["reference_id"],
            description=row["description"],
            created_at=row["created_at"],
        )

    def create(self, transaction: CustomerTransaction) -> CustomerTransaction:
        result = self.conn.execute(
            text(
                "INSERT INTO customer_transactions (customer_id, type, amount, balance_before, "
                "balance_after, reference_id, description, created_at) "
                "VALUES (:customer_id, :type, :amount, :balance_before, "
                ":balance_after, :reference_id, :description, :created_at)"
            ),
            {
                "customer_id": transaction.customer_id,
                "type": transaction.type.value,
                "amount": str(transaction.amount),
                "balance_before": str(transaction.balance_before),
                "balance_after": str(transaction.balance_after),
                "reference_id": transaction.reference_id,
                "description": transaction.description,
                "created_at": _now(),
            },
        )
        transaction_id = result.lastrowid
        self.conn.commit()
        row = (
            self.conn.execute(text("SELECT * FROM customer_transactions WHERE id = :id"), {"id": transaction_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            raise RuntimeError(f"Failed to retrieve transaction after create (id={transaction_id})")
        return self._row_to_transaction(row)

    def list_by_customer(self, customer_id: int) -> list[CustomerTransaction]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM customer_transactions WHERE customer_id = :customer_id ORDER BY id"),
                {"customer_id": customer_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_transaction(row) for row in rows]


class SQLAlchemyActivityLogRepository(ActivityLogRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_activity(row: RowMapping) -> ActivityLog:
        snapshots = {}
        for column in ("deal", "bill", "car"):
            value = row[column]
            if isinstance(value, str):
                value = json.loads(value)
            snapshots[column] = value
        return ActivityLog(
            id=row["id"],
            uuid=row["uuid"],
            type=row["type"],
            created_at=row["created_at"],
            **snapshots,
        )

    def create(self, activity: ActivityLog) -> ActivityLog:
        activity_uuid = str(ULID())
        self.conn.execute(
            text(
                "INSERT INTO activity_logs (uuid, type, deal, bill, car, created_at) "
                "VALUES (:uuid, :type, :deal, :bill, :car, :created_at)"
            ),
            {
                "uuid": activity_uuid,
                "type": activity.type,
                "deal": json.dumps(activity.deal) if activity.deal is not None else None,
                "bill": json.dumps(activity.bill) if activity.bill is not None else None,
                "car": json.dumps(activity.car) if activity.car is not None else None,
                "created_at": _now(),
            },
        )
        self.conn.commit()

        row = (
            self.conn.execute(text("SELECT * FROM activity_logs WHERE uuid = :uuid"), {"uuid": activity_uuid})
            .mappings()
            .fetchone()
        )
        if row is None:
            raise RuntimeError(f"Failed to retrieve activity log after create (uuid={activity_uuid})")
        return self._row_to_activity(row)

    def list_recent(self, limit: int = 50) -> list[ActivityLog]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM activity_logs ORDER BY created_at DESC, id DESC LIMIT :limit"),
                {"limit": limit},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_activity(row) for row in rows]

    def list_by_type(self, activity_type: str, limit: int = 50) -> list[ActivityLog]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM activity_logs WHERE type = :type ORDER BY created_at DESC, id DESC LIMIT :limit"),
                {"type": activity_type, "limit": limit},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_activity(row) for row in rows]
