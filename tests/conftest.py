"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from dealdesk.models.bill import Bill, BillPayment
from dealdesk.models.customer import Customer
from dealdesk.models.deal import Deal

# Matches Alembic head: 3f1c9a2d7b40 (initial schema)
SCHEMA_DDL = """
CREATE TABLE customers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    name TEXT NOT NULL,
    id_number TEXT NOT NULL DEFAULT '',
    phone TEXT NOT NULL DEFAULT '',
    balance NUMERIC NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL
);

CREATE TABLE customer_transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    customer_id INTEGER NOT NULL REFERENCES customers(id) ON DELETE CASCADE,
    type VARCHAR(20) NOT NULL,
    amount NUMERIC NOT NULL,
    balance_before NUMERIC NOT NULL,
    balance_after NUMERIC NOT NULL,
    reference_id VARCHAR(64) NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL
);

CREATE TABLE deals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    title TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    deal_type VARCHAR(40) NOT NULL,
    status VARCHAR(20) NOT NULL DEFAULT 'pending',
    selling_price NUMERIC,
    amount NUMERIC,
    customer_car_eval_value NUMERIC,
    customer_id INTEGER REFERENCES customers(id),
    seller_id INTEGER REFERENCES customers(id),
    buyer_id INTEGER REFERENCES customers(id),
    car_id INTEGER,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    deal_id INTEGER REFERENCES deals(id),
    bill_type VARCHAR(30) NOT NULL,
    bill_direction VARCHAR(10),
    customer_name TEXT NOT NULL DEFAULT '',
    visa_amount TEXT,
    transfer_amount TEXT,
    check_amount TEXT,
    cash_amount TEXT,
    bank_amount TEXT,
    bill_amount TEXT,
    total_with_tax TEXT,
    created_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE bill_payments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    bill_id INTEGER NOT NULL REFERENCES bills(id) ON DELETE CASCADE,
    payment_type VARCHAR(20) NOT NULL,
    amount NUMERIC,
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL
);

CREATE TABLE activity_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    type VARCHAR(30) NOT NULL,
    deal TEXT,
    bill TEXT,
    car TEXT,
    created_at DATETIME NOT NULL
);
"""


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _sample_customer(**overrides) -> Customer:
    defaults = dict(name="Dana Levi", id_number="123456789", phone="050-1234567")
    defaults.update(overrides)
    return Customer(**defaults)


def _sample_deal(**overrides) -> Deal:
    defaults = dict(
        title="Mazda 3 2021",
        description="Trade up",
        deal_type="new_used_sale",
        status="active",
        selling_price=350000,
    )
    defaults.update(overrides)
    return Deal(**defaults)


def _sample_bill(deal_id: int | None = None, **overrides) -> Bill:
    defaults = dict(
        deal_id=deal_id,
        bill_type="receipt_only",
        bill_direction="positive",
        customer_name="Dana Levi",
        bill_payments=[
            BillPayment(payment_type="cash", amount=20000),
            BillPayment(payment_type="visa", amount=30000),
        ],
    )
    defaults.update(overrides)
    return Bill(**defaults)


@pytest.fixture()
def sample_customer():
    return _sample_customer


@pytest.fixture()
def sample_deal():
    return _sample_deal


@pytest.fixture()
def sample_bill():
    return _sample_bill
