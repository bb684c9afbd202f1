import dataclasses
import json

import pytest

from banking.config import Config
from banking.domain import Customer, CustomerRepositoryStub
from banking.errors import unexpected_error
from banking.service import AccountService, CustomerService
from banking.web import (
    ConfigurationError,
    connect_database,
    create_app,
    main,
    parse_mysql_dsn,
    sanity_check,
)


class MemoryAccountRepository:
    def __init__(self):
        self.accounts = {}
        self.transactions = []

    def save(self, account):
        stored = dataclasses.replace(account, account_id=str(len(self.accounts) + 1))
        self.accounts[stored.account_id] = stored
        return stored

    def find_by_id(self, account_id):
        try:
            return self.accounts[account_id]
        except KeyError:
            raise unexpected_error("Unexpected database error") from None

    def save_transaction(self, transaction):
        account = self.find_by_id(transaction.account_id)
        if transaction.is_withdrawal():
            account.amount -= transaction.amount
        else:
            account.amount += transaction.amount
        self.transactions.append(transaction)
        return dataclasses.replace(
            transaction,
            transaction_id=str(len(self.transactions)),
            amount=account.amount,
        )


class FailingCustomerService:
    def get_all_customers(self, status=""):
        raise RuntimeError("boom")

    def get_customer_by_id(self, customer_id):
        raise RuntimeError("boom")


class NoneCustomerService:
    def get_all_customers(self, status=""):
        return None

    def get_customer_by_id(self, customer_id):
        return None


@pytest.fixture
def repo():
    return MemoryAccountRepository()


@pytest.fixture
def customer_service():
    return CustomerService(CustomerRepositoryStub())


@pytest.fixture
def client(customer_service, repo):
    app = create_app(customer_service, AccountService(repo))
    return app.test_client()


def _open_account(client, amount=6000):
    return client.post(
        "/customers/1001/account",
        data=json.dumps({"account_type": "saving", "amount": amount}),
        content_type="application/json",
    )


def test_get_all_customers_json(client, customer_service):
    resp = client.get("/customers")
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "application/json"
    body = resp.get_data(as_text=True)
    assert body.endswith("\n")
    expected = [c.as_dict() for c in customer_service.get_all_customers("")]
    assert json.loads(body) == expected
    assert json.loads(body)[0]["full_name"] == "Alice"


def test_get_all_customers_xml(client):
    resp = client.get("/customers", headers={"Content-Type": "application/xml"})
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "application/xml"
    body = resp.get_data(as_text=True)
    assert body.startswith("<Customer><id>1001</id><full_name>Alice</full_name>")
    assert body.count("<Customer>") == 2


def test_json_escapes_html_characters():
    stub = CustomerRepositoryStub([Customer("7", "A&B", "X", "1", "2000-01-01", "1")])
    app = create_app(CustomerService(stub), AccountService(MemoryAccountRepository()))
    body = app.test_client().get("/customers").get_data(as_text=True)
    assert "A\\u0026B" in body
    assert json.loads(body)[0]["full_name"] == "A&B"


def test_get_customer_by_id(client):
    resp = client.get("/customers/1002")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["id"] == "1002"
    assert data["full_name"] == "Bob"


def test_get_customer_not_found(client):
    resp = client.get("/customers/9999")
    assert resp.status_code == 404
    assert json.loads(resp.data) == {"message": "Customer not found", "code": 404}


def test_customer_id_must_be_digits(client):
    assert client.get("/customers/abc").status_code == 404


def test_customer_service_failure_is_500(repo):
    app = create_app(FailingCustomerService(), AccountService(repo))
    client = app.test_client()
    for url in ("/customers", "/customers/1"):
        resp = client.get(url)
        assert resp.status_code == 500
        assert json.loads(resp.data) == {"message": "Unexpected error occurred", "code": 500}


def test_no_customers_is_404(repo):
    app = create_app(NoneCustomerService(), AccountService(repo))
    resp = app.test_client().get("/customers")
    assert resp.status_code == 404
    assert json.loads(resp.data)["message"] == "Customers not found"


def test_create_account(client, repo):
    resp = _open_account(client)
    assert resp.status_code == 201
    data = json.loads(resp.data)
    assert set(data) == {"account_id"}
    stored = repo.accounts[data["account_id"]]
    assert stored.customer_id == "1001"
    assert stored.account_type == "saving"
    assert stored.status == "1"


def test_create_account_body_customer_id_overrides_path(client, repo):
    resp = client.post(
        "/customers/1001/account",
        data=json.dumps({"customer_id": "55", "account_type": "checking", "amount": 5000}),
    )
    assert resp.status_code == 201
    assert repo.accounts[json.loads(resp.data)["account_id"]].customer_id == "55"


def test_create_account_validation_error(client, repo):
    resp = _open_account(client, amount=100)
    assert resp.status_code == 422
    assert json.loads(resp.data) == "Minimum amount for account creation is 5000"
    assert repo.accounts == {}


def test_create_account_bad_json(client):
    resp = client.post("/customers/1001/account", data="{not json")
    assert resp.status_code == 400
    assert isinstance(json.loads(resp.data), str)


def test_create_account_empty_body(client):
    resp = client.post("/customers/1001/account", data="")
    assert resp.status_code == 400
    assert json.loads(resp.data) == "EOF"


def test_create_account_wrong_field_type(client):
    resp = client.post("/customers/1001/account", data=json.dumps({"amount": "lots"}))
    assert resp.status_code == 400
    assert "amount" in json.loads(resp.data)


def test_deposit(client, repo):
    account_id = json.loads(_open_account(client).data)["account_id"]
    resp = client.post(
        f"/customers/1001/account/{account_id}",
        data=json.dumps({"transaction_type": "deposit", "amount": 500}),
    )
    assert resp.status_code == 201
    data = json.loads(resp.data)
    assert data["account_id"] == account_id
    assert data["transaction_type"] == "deposit"
    assert data["amount"] == repo.accounts[account_id].amount
    assert data["transaction_id"] == str(len(repo.transactions))


def test_withdrawal_insufficient_balance(client, repo):
    account_id = json.loads(_open_account(client, amount=6000).data)["account_id"]
    resp = client.post(
        f"/customers/1001/account/{account_id}",
        data=json.dumps({"transaction_type": "withdrawal", "amount": 6000}),
    )
    assert resp.status_code == 422
    assert json.loads(resp.data) == "Insufficient balance in the account"
    assert repo.transactions == []


def test_transaction_invalid_type(client):
    account_id = json.loads(_open_account(client).data)["account_id"]
    resp = client.post(
        f"/customers/1001/account/{account_id}",
        data=json.dumps({"transaction_type": "transfer", "amount": 10}),
    )
    assert resp.status_code == 422
    assert json.loads(resp.data) == "Transaction type must be either 'withdrawal' or 'deposit'"


def test_transaction_route_rejects_get(client):
    assert client.get("/customers/1001/account/1").status_code == 405


@pytest.mark.parametrize(
    "config, message",
    [
        (Config("", "8000", "localhost"), "Database URI is not set in the environment variables"),
        (Config("dsn", "", "localhost"), "Server port is not set in the environment variables"),
        (Config("dsn", "8000", ""), "Server host is not set in the environment variables"),
    ],
)
def test_sanity_check_reports_missing(config, message):
    with pytest.raises(ConfigurationError) as info:
        sanity_check(config)
    assert str(info.value) == message


def test_parse_tcp_dsn():
    params = parse_mysql_dsn("user:password@tcp(localhost:3307)/banking?charset=utf8mb4")
    assert params == {
        "user": "user",
        "password": "password",
        "database": "banking",
        "host": "localhost",
        "port": 3307,
        "charset": "utf8mb4",
    }


def test_parse_dsn_defaults():
    params = parse_mysql_dsn("user@/banking")
    assert params["host"] == "127.0.0.1"
    assert params["port"] == 3306
    assert params["password"] == ""


def test_parse_unix_dsn():
    params = parse_mysql_dsn("user:password@unix(/var/run/mysqld.sock)/banking")
    assert params["unix_socket"] == "/var/run/mysqld.sock"
    assert "host" not in params


def test_parse_dsn_without_slash_fails():
    with pytest.raises(ValueError):
        parse_mysql_dsn("user:password@tcp(localhost:3306)")


def test_connect_database_rejects_bad_dsn():
    with pytest.raises(ValueError):
        connect_database(Config("nonsense", "8000", "localhost"))


def test_main_fails_without_configuration(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("DB_URI", "SERVER_PORT", "SERVER_HOST"):
        monkeypatch.delenv(name, raising=False)
    assert main([]) == 1