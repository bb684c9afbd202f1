"""HTTP interface: routes, request decoding, response encoding and start-up."""

from __future__ import annotations

import argparse
import json
import re
import sys
from typing import Any, Callable, Optional, Sequence
from xml.sax.saxutils import escape

import pymysql
from flask import Flask, Response, abort, request

from banking import logger
from banking.config import Config, get_config
from banking.dto import NewAccountRequest, TransactionRequest
from banking.errors import AppError, internal_server_error, not_found_error
from banking.repository import AccountRepositoryDB, CustomerRepositoryDB
from banking.service import AccountService, CustomerService

JSON_TYPE = "application/json"
XML_TYPE = "application/xml"
_PLAIN_TEXT = "text/plain; charset=utf-8"
_DIGITS = re.compile(r"[0-9]+")
_DEFAULT_PORT = 3306
_USER_SEPARATOR = ":"

_NEW_ACCOUNT_FIELDS = {"customer_id": str, "account_type": str, "amount": float}
_TRANSACTION_FIELDS = {"customer_id": str, "account_id": str, "amount": float,
                       "transaction_type": str, "transaction_date": str}


class ConfigurationError(RuntimeError):
    """Raised when a setting the server needs is missing."""


class _DecodeError(ValueError):
    """Raised when a request body cannot be decoded."""


def sanity_check(config: Config) -> None:
    """Raise ConfigurationError if a required setting is empty."""
    for value, name in ((config.database_uri, "Database URI"),
                        (config.server_port, "Server port"),
                        (config.server_host, "Server host")):
        if not value:
            raise ConfigurationError(f"{name} is not set in the environment variables")


def _split_address(address: str) -> tuple[str, int]:
    if address.startswith("["):
        host, _, rest = address[1:].partition("]")
        port_text = rest[1:]
    elif address.count(":") == 1:
        host, _, port_text = address.partition(":")
    else:
        host, port_text = address, ""
    if port_text and not port_text.isdigit():
        raise ValueError(f"invalid DSN: invalid port {port_text!r}")
    return host, int(port_text) if port_text else _DEFAULT_PORT


def parse_mysql_dsn(dsn: str) -> dict:
    """Turn a ``user:pass@tcp(host:port)/dbname?charset=...`` DSN into
    keyword arguments for ``pymysql.connect``."""
    head, slash, tail = dsn.rpartition("/")
    if not slash:
        raise ValueError("invalid DSN: missing the slash separating the database name")
    database, _, query = tail.partition("?")
    user_info, _, location = head.rpartition("@")
    user, _, password = user_info.partition(_USER_SEPARATOR)

    net, address = location, ""
    if "(" in location:
        if not location.endswith(")"):
            raise ValueError("invalid DSN: did you forget to escape a param value?")
        net, _, address = location[:-1].partition("(")
    net = net or "tcp"

    params: dict[str, Any] = dict(user=user, password=password, database=database)
    if net == "unix":
        params["unix_socket"] = address or "/tmp/mysql.sock"
    elif net == "tcp":
        params["host"], params["port"] = _split_address(address or "127.0.0.1:3306")
    else:
        raise ValueError(f"invalid DSN: unknown network {net!r}")

    for pair in filter(None, query.split("&")):
        key, eq, value = pair.partition("=")
        if not eq:
            raise ValueError(f"invalid DSN: invalid parameter {pair!r}")
        if key == "charset":
            params["charset"] = value.split(",")[0]
    return params


def connect_database(config: Config) -> Callable[[], Any]:
    """Return a factory that opens a new connection to the configured database."""
    params = parse_mysql_dsn(config.database_uri)
    return lambda: pymysql.connect(**params)


def _plain_numbers(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {key: _plain_numbers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain_numbers(item) for item in value]
    return value


def _json_response(payload: Any, status: int, content_type: str = _PLAIN_TEXT) -> Response:
    text = json.dumps(_plain_numbers(payload), ensure_ascii=False, separators=(",", ":"))
    for char in "<>&\u2028\u2029":
        text = text.replace(char, f"\\u{ord(char):04x}")
    return Response(text + "\n", status=status, content_type=content_type)


def _error_response(error: AppError) -> Response:
    return _json_response(error.as_dict(), error.code)


def _customers_response(records: list[dict], single: bool) -> Response:
    if request.headers.get("Content-Type") == XML_TYPE:
        body = "".join(
            "<Customer>"
            + "".join(f"<{k}>{escape(str(v))}</{k}>" for k, v in record.items())
            + "</Customer>"
            for record in records
        )
        return Response(body, status=200, content_type=XML_TYPE)
    return _json_response(records[0] if single else records, 200, JSON_TYPE)


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "array" if isinstance(value, list) else "object"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid character {name[0]!r} looking for beginning of value")


def _decode_into(target: Any, raw: bytes, fields: dict[str, type]) -> None:
    """Fill fields of target from the first JSON value in raw."""
    type_name = type(target).__name__
    text = raw.decode("utf-8", errors="replace").lstrip(" \t\r\n")
    if not text:
        raise _DecodeError("EOF")
    try:
        value, _ = json.JSONDecoder(parse_constant=_reject_constant).raw_decode(text)
    except json.JSONDecodeError as exc:
        raise _DecodeError(f"invalid JSON: {exc.msg}") from exc
    except ValueError as exc:
        raise _DecodeError(str(exc)) from exc
    if value is None:
        return
    if not isinstance(value, dict):
        raise _DecodeError(f"cannot unmarshal {_kind(value)} into value of type {type_name}")
    for key, item in value.items():
        name = next((f for f in fields if f.lower() == key.lower()), None)
        if name is None or item is None:
            continue
        expected = fields[name]
        if expected is str and isinstance(item, str):
            setattr(target, name, item)
        elif expected is float and _kind(item) == "number":
            setattr(target, name, float(item))
        else:
            wanted = "string" if expected is str else "number"
            raise _DecodeError(
                f"cannot unmarshal {_kind(item)} into field {type_name}.{name} of type {wanted}"
            )


def _require_digits(*values: str) -> None:
    if not all(_DIGITS.fullmatch(value) for value in values):
        abort(404)


def create_app(customer_service: CustomerService, account_service: AccountService) -> Flask:
    """Build the web application around the given services."""
    app = Flask(__name__)

    @app.get("/customers")
    def get_all_customers() -> Response:
        try:
            customers = customer_service.get_all_customers(request.args.get("status", ""))
        except Exception:
            return _error_response(internal_server_error("Unexpected error occurred"))
        if customers is None:
            return _error_response(not_found_error("Customers not found"))
        return _customers_response([c.as_dict() for c in customers], single=False)

    @app.get("/customers/<customer_id>")
    def get_customer_by_id(customer_id: str) -> Response:
        _require_digits(customer_id)
        try:
            customer = customer_service.get_customer_by_id(customer_id)
        except Exception:
            return _error_response(internal_server_error("Unexpected error occurred"))
        if customer is None:
            return _error_response(not_found_error("Customer not found"))
        return _customers_response([customer.as_dict()], single=True)

    @app.post("/customers/<customer_id>/account")
    def create_account(customer_id: str) -> Response:
        _require_digits(customer_id)
        new_account = NewAccountRequest(customer_id=customer_id)
        try:
            _decode_into(new_account, request.get_data(), _NEW_ACCOUNT_FIELDS)
        except _DecodeError as exc:
            return _json_response(str(exc), 400)
        try:
            account = account_service.create_account(new_account)
        except AppError as exc:
            return _json_response(exc.message, exc.code)
        return _json_response(account.as_dict(), 201)

    @app.post("/customers/<customer_id>/account/<account_id>")
    def make_transaction(customer_id: str, account_id: str) -> Response:
        _require_digits(customer_id, account_id)
        transaction = TransactionRequest(customer_id=customer_id, account_id=account_id)
        try:
            _decode_into(transaction, request.get_data(), _TRANSACTION_FIELDS)
        except _DecodeError as exc:
            logger.error("Error while decoding: " + str(exc))
            return _json_response(str(exc), 400)
        try:
            result = account_service.make_transaction(transaction)
        except AppError as exc:
            logger.error("Error while making transaction: " + exc.message)
            return _json_response(exc.message, exc.code)
        return _json_response(result.as_dict(), 201)

    return app


def start() -> None:
    """Check the configuration, wire the services and serve until stopped."""
    config = get_config()
    sanity_check(config)
    connect = connect_database(config)
    app = create_app(
        CustomerService(CustomerRepositoryDB(connect)),
        AccountService(AccountRepositoryDB(connect)),
    )
    app.run(host=config.server_host, port=int(config.server_port))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the banking server; returns a process exit status."""
    argparse.ArgumentParser(prog="banking", description="Run the banking server.").parse_args(argv)
    logger.info("Starting the banking application...")
    try:
        start()
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())