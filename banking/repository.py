"""Database-backed repositories for customers, accounts and transactions."""

from __future__ import annotations

from contextlib import closing
from typing import Any, Callable, Optional

from banking import logger
from banking.domain import Account, Customer, Transaction
from banking.errors import unexpected_error

_DB_ERROR = "Unexpected database error"
_CUSTOMER_SELECT = (
    "SELECT customer_id, name, city, zipcode, date_of_birth, status FROM customers"
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class _Repository:
    """A connection factory and the driver's parameter placeholder."""

    def __init__(self, connect: Callable[[], Any], placeholder: str = "%s") -> None:
        self._connect = connect
        self._placeholder = placeholder

    def _query(self, statement: str, params: tuple, fetch: str) -> Any:
        with closing(self._connect()) as connection:
            cursor = connection.cursor()
            cursor.execute(statement.replace("?", self._placeholder), params)
            return getattr(cursor, fetch)()


class AccountRepositoryDB(_Repository):
    """Accounts and transactions kept in a SQL database."""

    def save(self, account: Account) -> Account:
        """Insert the account and return a copy carrying its new id."""
        statement = (
            "INSERT INTO accounts (customer_id, opening_date, account_type, amount, status) "
            "VALUES (?, ?, ?, ?, ?)"
        ).replace("?", self._placeholder)
        try:
            with closing(self._connect()) as connection:
                cursor = connection.cursor()
                cursor.execute(statement, (account.customer_id, account.opening_date,
                                           account.account_type, account.amount, account.status))
                connection.commit()
                new_id = cursor.lastrowid
        except Exception as exc:
            logger.error("Error while creating new account " + str(exc))
            raise unexpected_error(_DB_ERROR) from exc
        if new_id is None:
            logger.error("Error while getting last insert ID")
            raise unexpected_error(_DB_ERROR)
        return Account(str(new_id), account.customer_id, account.opening_date,
                       account.account_type, account.amount, account.status)

    def find_by_id(self, account_id: str) -> Account:
        """Return the account with the given id; a missing one is an error."""
        try:
            row = self._query(
                "SELECT account_id, customer_id, opening_date, account_type, amount "
                "FROM accounts WHERE account_id = ?",
                (account_id,),
                "fetchone",
            )
        except Exception as exc:
            logger.error("Error while fetching account information: " + str(exc))
            raise unexpected_error(_DB_ERROR) from exc
        if row is None:
            logger.error("Error while fetching account information: no rows in result set")
            raise unexpected_error(_DB_ERROR)
        *texts, amount = row
        acc_id, customer_id, opening_date, account_type = map(_text, texts)
        return Account(acc_id, customer_id, opening_date, account_type, float(amount))

    def save_transaction(self, transaction: Transaction) -> Transaction:
        """Record the transaction and adjust the balance.

        The result carries the new id and, as its amount, the balance after the change.
        """
        try:
            connection = self._connect()
        except Exception as exc:
            logger.error(
                "Error while starting a new transaction for bank account transaction: "
                + str(exc)
            )
            raise unexpected_error("Unexpected Database error") from exc

        operator = "-" if transaction.is_withdrawal() else "+"
        insert = ("INSERT INTO transactions (account_id, amount, transaction_type, "
                  "transaction_date) VALUES (?, ?, ?, ?)").replace("?", self._placeholder)
        update = (f"UPDATE accounts SET amount = amount {operator} ? "
                  "WHERE account_id = ?").replace("?", self._placeholder)
        with closing(connection):
            try:
                cursor = connection.cursor()
                cursor.execute(insert, (transaction.account_id, transaction.amount,
                                        transaction.transaction_type,
                                        transaction.transaction_date))
                transaction_id = cursor.lastrowid
                cursor.execute(update, (transaction.amount, transaction.account_id))
            except Exception as exc:
                connection.rollback()
                logger.error("Error while saving transaction: " + str(exc))
                raise unexpected_error(_DB_ERROR) from exc
            try:
                connection.commit()
            except Exception as exc:
                connection.rollback()
                logger.error("Error while committing transaction for bank account: " + str(exc))
                raise unexpected_error(_DB_ERROR) from exc

        if transaction_id is None:
            logger.error("Error while getting the last transaction id")
            raise unexpected_error(_DB_ERROR)

        account = self.find_by_id(transaction.account_id)
        return Transaction(str(transaction_id), transaction.account_id, account.amount,
                           transaction.transaction_type, transaction.transaction_date)


class CustomerRepositoryDB(_Repository):
    """Customers kept in a SQL database; query failures propagate."""

    @staticmethod
    def _customer(row: tuple) -> Customer:
        customer_id, name, city, zipcode, date_of_birth, status = map(_text, row)
        return Customer(id=customer_id, name=name, city=city, zip_code=zipcode,
                        date_of_birth=date_of_birth, status=status)

    def find_all(self, status: str = "") -> list[Customer]:
        """Return customers with the given status, or all when it is empty."""
        statement, params = (
            (_CUSTOMER_SELECT + " WHERE status = ?", (status,)) if status
            else (_CUSTOMER_SELECT, ())
        )
        try:
            rows = self._query(statement, params, "fetchall")
        except Exception as exc:
            logger.error("Error while querying customers " + str(exc))
            raise
        return [self._customer(row) for row in rows]

    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        """Return the customer with the given id, or None if there is none."""
        try:
            row = self._query(_CUSTOMER_SELECT + " WHERE customer_id = ?",
                              (customer_id,), "fetchone")
        except Exception as exc:
            logger.error("Error while scanning customer by ID " + str(exc))
            raise
        return None if row is None else self._customer(row)