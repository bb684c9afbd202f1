# banking

A small REST service for a bank: it lists customers, looks a customer up by
id, opens accounts and records deposits and withdrawals. Data lives in a
MySQL database reached through PyMySQL; the HTTP side is a Flask
application.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings are read from the environment. On first use, a `.env` file in the
working directory is loaded if present; it does not override variables that
are already set. A missing `.env` file is logged as an error but is not fatal.

| Variable      | Meaning                                                              |
|---------------|----------------------------------------------------------------------|
| `DB_URI`      | MySQL data source, e.g. `user:password@tcp(localhost:3306)/banking`  |
| `SERVER_HOST` | Address to listen on, e.g. `localhost`                               |
| `SERVER_PORT` | Port to listen on, e.g. `8000`                                       |

All three are required: `banking.web.sanity_check` raises
`ConfigurationError` if any is empty, and the `banking` command then prints
the message and exits with status 1.

`DB_URI` has the form `user:password@net(address)/dbname?param=value`. The
network may be `tcp` (the default; address `host:port`, port 3306 if left
out) or `unix` (address is a socket path). Of the query parameters only
`charset` is used; `banking.web.parse_mysql_dsn` shows the keyword arguments
that will be passed to `pymysql.connect`.

## Running

```
banking
```

This logs a start-up line and serves the application with Flask's built-in
server on `SERVER_HOST:SERVER_PORT`. Log lines are JSON objects written to
standard error, with `level`, `timestamp`, `caller` and `msg` fields.

## Endpoints

| Method | Path                                                  | Purpose                    |
|--------|-------------------------------------------------------|----------------------------|
| GET    | `/customers`                                          | List customers             |
| GET    | `/customers/{customer_id}`                            | Fetch one customer         |
| POST   | `/customers/{customer_id}/account`                    | Open an account            |
| POST   | `/customers/{customer_id}/account/{account_id}`       | Deposit or withdraw        |

Ids in paths must be digits only; anything else answers `404`.

### Customers

`GET /customers` accepts `?status=active` or `?status=inactive`; any other
value lists everyone. A customer is presented as:

```json
{"id": "2000", "full_name": "Alice", "city": "Wonderland", "zip_code": "12345",
 "date_of_birth": "2000-01-01", "status": "active"}
```

where `status` is `inactive` for a stored status of `0` and `active`
otherwise. Customer endpoints answer in XML, one `<Customer>` element per
customer, when the request's `Content-Type` is `application/xml`, and in JSON
otherwise. An unknown customer answers `404` and a database failure `500`,
both with a body of the form `{"message": "...", "code": ...}`.

### Accounts

Opening an account takes a JSON body such as:

```json
{"account_type": "saving", "amount": 5000}
```

The account type must be `saving` or `checking` (in any letter case) and the
opening amount at least 5000. The response is `201` with
`{"account_id": "..."}`.

A transaction takes:

```json
{"transaction_type": "deposit", "amount": 250}
```

The type must be `deposit` or `withdrawal` and the amount greater than zero.
A withdrawal is refused when the balance does not exceed the amount. The
response is `201` with `transaction_id`, `account_id`, `transaction_type`,
`transaction_date`, and `amount` holding the balance after the change.

On the account endpoints, errors answer with the message alone as a JSON
string: validation failures `422`, malformed bodies `400`, and database
failures (including an unknown account) `500`.

## Using it as a library

- `banking.web.create_app(customer_service, account_service)` builds the
  Flask application from any services.
- `banking.service.CustomerService` and `banking.service.AccountService`
  hold the business rules; they take any repository with the methods of
  `banking.domain.CustomerRepository` or `banking.domain.AccountRepository`.
  Failures are raised as `banking.errors.AppError`, which carries a
  `message` and an HTTP `code`.
- `banking.repository.CustomerRepositoryDB` and
  `banking.repository.AccountRepositoryDB` take a function that opens a
  DB-API connection, and a parameter placeholder (`%s` by default).
- `banking.domain.CustomerRepositoryStub` is an in-memory customer
  repository with two sample customers; it does not filter by status.

## What it does not do

The package does not create or migrate the database: the `customers`,
`accounts` and `transactions` tables must already exist. It has no endpoints
for adding or changing customers, closing accounts or listing transactions,
and no authentication.