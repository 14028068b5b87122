from dealdesk.repositories.base import (
    ActivityLogRepository,
    BillRepository,
    CustomerRepository,
    CustomerTransactionRepository,
    DealRepository,
)


def get_deal_repository() -> DealRepository:
    from dealdesk.db import get_connection
    from dealdesk.repositories.sqlalchemy import SQLAlchemyDealRepository

    return SQLAlchemyDealRepository(get_connection())


def get_bill_repository() -> BillRepository:
    from dealdesk.db import get_connection
    from dealdesk.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())


def get_customer_repository() -> CustomerRepository:
    from dealdesk.db import get_connection
    from dealdesk.repositories.sqlalchemy import SQLAlchemyCustomerRepository

    return SQLAlchemyCustomerRepository(get_connection())


def get_customer_transaction_repository() -> CustomerTransactionRepository:
    from dealdesk.db import get_connection
    from dealdesk.repositories.sqlalchemy import SQLAlchemyCustomerTransactionRepository

    return SQLAlchemyCustomerTransactionRepository(get_connection())


def get_activity_log_repository() -> ActivityLogRepository:
    from dealdesk.db import get_connection
    from dealdesk.repositories.sqlalchemy import SQLAlchemyActivityLogRepository

    return SQLAlchemyActivityLogRepository(get_connection())
