"""
Integration tests for the SimBank API
Tests end-to-end workflows using FastAPI TestClient
"""

import pytest
from fastapi.testclient import TestClient

from simbank.api import create_app
from simbank.api.deps import get_bank
from simbank.bank import Bank
from simbank.config import SimBankConfig
from simbank.storage import InMemorySnapshotStore


@pytest.fixture
def bank():
    """Bank backed by in-memory storage"""
    config = SimBankConfig(market_seed=5)
    return Bank.open(config, store=InMemorySnapshotStore(config=config))


@pytest.fixture
def client(bank):
    """Create a test client wired to the test bank"""
    app = create_app()
    app.dependency_overrides[get_bank] = lambda: bank
    return TestClient(app)


@pytest.fixture
def logged_in(client):
    """Client with Alice registered and logged in"""
    client.post("/session/register", json={"name": "Alice", "pin": 4321})
    client.post("/session/login", json={"name": "Alice", "pin": 4321})
    return client


class TestHealthEndpoints:
    """Test basic health and root endpoints"""

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert "endpoints" in r.json()


class TestSessionFlow:
    """Registration and login"""

    def test_register(self, client):
        r = client.post("/session/register", json={"name": "Alice", "pin": 4321})
        assert r.status_code == 201
        account = r.json()["account"]
        assert account["balance"] == 1000.0
        assert account["assets"] == {"crypto": 0.0, "gold": 0.0, "silver": 0.0}
        assert account["currencies"] == {"EUR": 0.0, "GBP": 0.0, "INR": 0.0}

    def test_register_duplicate(self, client):
        client.post("/session/register", json={"name": "Alice", "pin": 4321})
        r = client.post("/session/register", json={"name": "Bob", "pin": 4321})
        assert r.status_code == 409
        assert r.json()["detail"]["code"] == "DUPLICATE_ACCOUNT"

    def test_register_invalid_name(self, client):
        r = client.post("/session/register", json={"name": "Al1ce", "pin": 4321})
        assert r.status_code == 400
        assert r.json()["detail"]["code"] == "INVALID_INPUT"

    def test_login_logout(self, client):
        client.post("/session/register", json={"name": "Alice", "pin": 4321})

        r = client.post("/session/login", json={"name": "Alice", "pin": 4321})
        assert r.status_code == 200
        assert client.get("/session").json()["state"] == "authenticated"

        client.post("/session/logout")
        r = client.get("/session")
        assert r.json() == {"state": "unauthenticated", "account": None}

    def test_login_bad_credentials(self, client):
        client.post("/session/register", json={"name": "Alice", "pin": 4321})
        r = client.post("/session/login", json={"name": "Alice", "pin": 1111})
        assert r.status_code == 401
        assert r.json()["detail"]["code"] == "INVALID_CREDENTIAL"


class TestTransactionFlow:
    """Ledger operations over HTTP"""

    def test_requires_login(self, client):
        r = client.post("/transactions/deposit", json={"amount": 100.0})
        assert r.status_code == 401
        assert r.json()["detail"]["code"] == "NOT_AUTHENTICATED"

    def test_deposit_and_withdraw(self, logged_in):
        r = logged_in.post("/transactions/deposit", json={"amount": 200.0})
        assert r.status_code == 200
        assert r.json()["balance"] == 1200.0

        r = logged_in.post("/transactions/withdraw", json={"amount": 5000.0, "pin": 4321})
        assert r.status_code == 409
        assert r.json()["detail"]["code"] == "INSUFFICIENT_FUNDS"

        r = logged_in.post("/transactions/withdraw", json={"amount": 200.0, "pin": 1111})
        assert r.status_code == 401

        r = logged_in.post("/transactions/withdraw", json={"amount": 200.0, "pin": 4321})
        assert r.json()["balance"] == 1000.0

    def test_purchase_asset(self, logged_in):
        r = logged_in.post("/transactions/assets/purchase", json={"asset": "silver", "pin": 4321})
        assert r.status_code == 200
        data = r.json()
        assert data["units"] == pytest.approx(4.0)
        assert data["balance"] == 900.0

        r = logged_in.post("/transactions/assets/purchase", json={"asset": 7, "pin": 4321})
        assert r.status_code == 400

    def test_currency_conversion(self, logged_in):
        r = logged_in.post("/transactions/convert/to-foreign",
                           json={"currency": "GBP", "amount": 127.0})
        assert r.status_code == 200
        assert r.json()["converted"] == pytest.approx(100.0)

        r = logged_in.post("/transactions/convert/to-usd",
                           json={"currency": "GBP", "amount": 50.0})
        assert r.json()["converted"] == pytest.approx(63.5)

        r = logged_in.post("/transactions/convert/to-usd",
                           json={"currency": "GBP", "amount": 500.0})
        assert r.status_code == 409

    def test_interest(self, logged_in):
        r = logged_in.post("/transactions/interest")
        assert r.json()["balance"] == pytest.approx(1050.0)

    def test_loans(self, logged_in):
        r = logged_in.post("/loans/take", json={"pin": 4321})
        assert r.json() == {"action": "granted", "amount": 500.0, "loan": 500.0, "balance": 1500.0}

        r = logged_in.post("/loans/take", json={"pin": 4321})
        assert r.status_code == 400

        r = logged_in.post("/loans", json={"pin": 4321, "confirm": False})
        assert r.json()["action"] == "cancelled"

        r = logged_in.post("/loans/repay", json={"pin": 4321})
        assert r.json() == {"action": "repaid", "amount": 500.0, "loan": 0.0, "balance": 1000.0}


class TestMarketAndStatus:
    """Market queries and valuation"""

    def test_prices_and_rates(self, client):
        assert client.get("/market/prices").json() == {"crypto": 150.0, "gold": 60.0, "silver": 25.0}
        assert client.get("/market/rates").json() == {"EUR": 1.10, "GBP": 1.27, "INR": 0.012}

    def test_refresh(self, client):
        r = client.post("/market/refresh")
        assert r.status_code == 200
        data = r.json()
        assert set(data["changes"]) == {"crypto", "gold", "silver"}
        assert client.get("/market/prices").json() == data["prices"]

    def test_status(self, logged_in):
        logged_in.post("/transactions/assets/purchase", json={"asset": "gold", "pin": 4321})
        logged_in.post("/loans/take", json={"pin": 4321})

        data = logged_in.get("/status").json()
        assert data["name"] == "Alice"
        assert data["loan"] == 500.0
        assert data["assets"]["gold"]["value"] == pytest.approx(100.0)
        assert data["net_worth"] == pytest.approx(1400.0 + 100.0 - 500.0)

    def test_status_requires_login(self, client):
        assert client.get("/status").status_code == 401
