"""Request and response objects exchanged with clients."""

from __future__ import annotations

from dataclasses import dataclass

from banking.errors import validation_error

MINIMUM_OPENING_AMOUNT = 5000
ACCOUNT_TYPES = ("saving", "checking")
WITHDRAWAL = "withdrawal"
DEPOSIT = "deposit"


@dataclass
class CustomerResponse:
    """A customer as presented to clients."""

    id: str = ""
    name: str = ""
    city: str = ""
    zip_code: str = ""
    date_of_birth: str = ""
    status: str = ""

    def as_dict(self) -> dict:
        """Return the customer with its wire field names."""
        return {
            "id": self.id,
            "full_name": self.name,
            "city": self.city,
            "zip_code": self.zip_code,
            "date_of_birth": self.date_of_birth,
            "status": self.status,
        }


@dataclass
class NewAccountRequest:
    """A request to open an account for a customer."""

    customer_id: str = ""
    account_type: str = ""
    amount: float = 0.0

    def validate(self) -> None:
        """Raise a validation AppError if the request is not acceptable."""
        if self.amount < MINIMUM_OPENING_AMOUNT:
            raise validation_error("Minimum amount for account creation is 5000")
        if self.account_type.lower() not in ACCOUNT_TYPES:
            raise validation_error("Account type must be either 'saving' or 'checking'")


@dataclass
class NewAccountResponse:
    """The identifier of a newly opened account."""

    account_id: str = ""

    def as_dict(self) -> dict:
        """Return the response with its wire field names."""
        return {"account_id": self.account_id}


@dataclass
class TransactionRequest:
    """A request to deposit into or withdraw from an account."""

    customer_id: str = ""
    account_id: str = ""
    amount: float = 0.0
    transaction_type: str = ""
    transaction_date: str = ""

    def is_withdrawal(self) -> bool:
        return self.transaction_type == WITHDRAWAL

    def is_deposit(self) -> bool:
        return self.transaction_type == DEPOSIT

    def validate(self) -> None:
        """Raise a validation AppError if the request is not acceptable."""
        if not self.is_deposit() and not self.is_withdrawal():
            raise validation_error(
                "Transaction type must be either 'withdrawal' or 'deposit'"
            )
        if self.amount <= 0:
            raise validation_error("Amount must be greater than zero")


@dataclass
class TransactionResponse:
    """A recorded transaction together with the resulting balance."""

    transaction_id: str = ""
    account_id: str = ""
    amount: float = 0.0
    transaction_type: str = ""
    transaction_date: str = ""

    def as_dict(self) -> dict:
        """Return the response with its wire field names."""
        return {
            "transaction_id": self.transaction_id,
            "account_id": self.account_id,
            "amount": self.amount,
            "transaction_type": self.transaction_type,
            "transaction_date": self.transaction_date,
        }