import pytest
from sqlalchemy import Connection

from dealdesk.repositories.sqlalchemy import (
    SQLAlchemyActivityLogRepository,
    SQLAlchemyBillRepository,
    SQLAlchemyCustomerRepository,
    SQLAlchemyCustomerTransactionRepository,
    SQLAlchemyDealRepository,
)


@pytest.fixture()
def deal_repo(db_connection: Connection) -> SQLAlchemyDealRepository:
    return SQLAlchemyDealRepository(db_connection)


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def customer_repo(db_connection: Connection) -> SQLAlchemyCustomerRepository:
    return SQLAlchemyCustomerRepository(db_connection)


@pytest.fixture()
def transaction_repo(db_connection: Connection) -> SQLAlchemyCustomerTransactionRepository:
    return SQLAlchemyCustomerTransactionRepository(db_connection)


@pytest.fixture()
def activity_repo(db_connection: Connection) -> SQLAlchemyActivityLogRepository:
    return SQLAlchemyActivityLogRepository(db_connection)
