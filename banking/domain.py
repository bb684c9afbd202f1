"""Domain entities and repository contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from banking.dto import (
    CustomerResponse,
    NewAccountResponse,
    TransactionResponse,
    WITHDRAWAL,
)


@dataclass
class Account:
    """A bank account as stored in the database."""

    account_id: str = ""
    customer_id: str = ""
    opening_date: str = ""
    account_type: str = ""
    amount: float = 0.0
    status: str = ""

    def can_withdraw(self, amount: float) -> bool:
        """True if the balance is strictly greater than the amount."""
        return self.amount > amount

    def to_new_account_response(self) -> NewAccountResponse:
        return NewAccountResponse(account_id=self.account_id)


@dataclass
class Customer:
    """A customer as stored in the database; status "0" means inactive."""

    id: str = ""
    name: str = ""
    city: str = ""
    zip_code: str = ""
    date_of_birth: str = ""
    status: str = ""

    def to_dto(self) -> CustomerResponse:
        return CustomerResponse(
            id=self.id,
            name=self.name,
            city=self.city,
            zip_code=self.zip_code,
            date_of_birth=self.date_of_birth,
            status="inactive" if self.status == "0" else "active",
        )


@dataclass
class Transaction:
    """A deposit or withdrawal on an account."""

    transaction_id: str = ""
    account_id: str = ""
    amount: float = 0.0
    transaction_type: str = ""
    transaction_date: str = ""

    def is_withdrawal(self) -> bool:
        return self.transaction_type == WITHDRAWAL

    def to_transaction_response(self) -> TransactionResponse:
        return TransactionResponse(
            transaction_id=self.transaction_id,
            account_id=self.account_id,
            amount=self.amount,
            transaction_type=self.transaction_type,
            transaction_date=self.transaction_date,
        )


class AccountRepository(Protocol):
    """Storage for accounts and transactions; failures raise AppError."""

    def save(self, account: Account) -> Account: ...

    def save_transaction(self, transaction: Transaction) -> Transaction: ...

    def find_by_id(self, account_id: str) -> Account: ...


class CustomerRepository(Protocol):
    """Storage for customers.

    A status of "1" selects active customers, "0" inactive ones and ""
    all of them.
    """

    def find_all(self, status: str) -> list[Customer]: ...

    def find_by_id(self, customer_id: str) -> Optional[Customer]: ...


def _stub_customers() -> list[Customer]:
    return [
        Customer("1001", "Alice", "Wonderland", "12345", "2000-01-01", "active"),
        Customer("1002", "Bob", "Builderland", "67890", "1995-05-05", "inactive"),
    ]


@dataclass
class CustomerRepositoryStub:
    """An in-memory customer repository with fixed sample data."""

    customers: list[Customer] = field(default_factory=_stub_customers)

    def find_all(self, status: str = "") -> list[Customer]:
        """Return every stored customer; the stub does not filter by status."""
        return list(self.customers)

    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        """Return the customer with the given id, or None."""
        return next((c for c in self.customers if c.id == customer_id), None)