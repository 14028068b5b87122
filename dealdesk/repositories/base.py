from abc import ABC, abstractmethod
from decimal import Decimal

from dealdesk.models.activity_log import ActivityLog
from dealdesk.models.bill import Bill
from dealdesk.models.customer import Customer, CustomerTransaction
from dealdesk.models.deal import Deal


class DealRepository(ABC):
    @abstractmethod
    def create(self, deal: Deal) -> Deal: ...

    @abstractmethod
    def get_by_id(self, deal_id: int) -> Deal | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Deal | None: ...

    @abstractmethod
    def list_all(self) -> list[Deal]: ...

    @abstractmethod
    def update(self, deal: Deal) -> Deal: ...

    @abstractmethod
    def update_status(self, deal_id: int, status: str) -> None: ...

    @abstractmethod
    def delete(self, deal_id: int) -> None: ...


class BillRepository(ABC):
    @abstractmethod
    def create(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def get_by_id(self, bill_id: int) -> Bill | None: ...

    @abstractmethod
    def list_by_deal(self, deal_id: int) -> list[Bill]: ...

    @abstractmethod
    def delete(self, bill_id: int) -> None: ...


class CustomerRepository(ABC):
    @abstractmethod
    def create(self, customer: Customer) -> Customer: ...

    @abstractmethod
    def get_by_id(self, customer_id: int) -> Customer | None: ...

    @abstractmethod
    def get_by_name(self, name: str) -> Customer | None: ...

    @abstractmethod
    def list_all(self) -> list[Customer]: ...

    @abstractmethod
    def update_balance(self, customer_id: int, balance: Decimal) -> None: ...


class CustomerTransactionRepository(ABC):
    @abstractmethod
    def create(self, transaction: CustomerTransaction) -> CustomerTransaction: ...

    @abstractmethod
    def list_by_customer(self, customer_id: int) -> list[CustomerTransaction]: ...


class ActivityLogRepository(ABC):
    @abstractmethod
    def create(self, activity: ActivityLog) -> ActivityLog: ...

    @abstractmethod
    def list_recent(self, limit: int = 50) -> list[ActivityLog]: ...

    @abstractmethod
    def list_by_type(self, activity_type: str, limit: int = 50) -> list[ActivityLog]: ...
