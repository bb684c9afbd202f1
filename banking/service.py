"""Business operations on customers and accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from banking.domain import Account, AccountRepository, CustomerRepository, Transaction
from banking.dto import (
    CustomerResponse,
    NewAccountRequest,
    NewAccountResponse,
    TransactionRequest,
    TransactionResponse,
)
from banking.errors import validation_error

DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_STATUS_CODES = {"active": "1", "inactive": "0"}


class AccountService:
    """Opens accounts and performs deposits and withdrawals."""

    def __init__(
        self,
        repo: AccountRepository,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repo = repo
        self._now = now

    def _timestamp(self) -> str:
        return self._now().strftime(DB_TIMESTAMP_FORMAT)

    def create_account(self, request: NewAccountRequest) -> NewAccountResponse:
        """Validate the request and open an active account for it."""
        request.validate()
        account = Account(
            customer_id=request.customer_id,
            opening_date=self._timestamp(),
            account_type=request.account_type,
            amount=request.amount,
            status="1",
        )
        return self._repo.save(account).to_new_account_response()

    def make_transaction(self, request: TransactionRequest) -> TransactionResponse:
        """Validate the request, check the balance for withdrawals, and record it."""
        request.validate()
        if request.is_withdrawal():
            account = self._repo.find_by_id(request.account_id)
            if not account.can_withdraw(request.amount):
                raise validation_error("Insufficient balance in the account")
        transaction = Transaction(
            account_id=request.account_id,
            amount=request.amount,
            transaction_type=request.transaction_type,
            transaction_date=self._timestamp(),
        )
        return self._repo.save_transaction(transaction).to_transaction_response()


class CustomerService:
    """Looks up customers."""

    def __init__(self, repo: CustomerRepository) -> None:
        self._repo = repo

    def get_all_customers(self, status: str = "") -> list[CustomerResponse]:
        """Return customers; "active" or "inactive" filters, anything else lists all."""
        code = _STATUS_CODES.get(status, "")
        return [customer.to_dto() for customer in self._repo.find_all(code)]

    def get_customer_by_id(self, customer_id: str) -> Optional[CustomerResponse]:
        """Return the customer with the given id, or None if there is none."""
        customer = self._repo.find_by_id(customer_id)
        return None if customer is None else customer.to_dto()