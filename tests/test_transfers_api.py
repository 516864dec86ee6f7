"""Tests for the /api/v1/remittance router."""

import pytest
from fastapi.testclient import TestClient

from remittance.api.endpoints import transfers
from remittance.api.main import app
from remittance.integrations.clients.mocks.drap import MockDrapRail
from remittance.integrations.contracts.interfaces import FlowStage

TRANSFER_BODY = {
    "sending_country_code": "AE",
    "sending_currency_code": "AED",
    "receiving_country_code": "PK",
    "receiving_currency_code": "PKR",
    "sending_amount": 100,
    "sender_customer_number": "1000001220000001",
    "receiver": {
        "mobile_number": "+919586741508",
        "first_name": "Anija",
        "last_name": "Lastname",
        "nationality": "IN",
    },
}


@pytest.fixture
def client_for(credentials):
    def _make(rail):
        app.dependency_overrides[transfers.get_rail] = lambda: rail
        app.dependency_overrides[transfers.get_credentials] = lambda: credentials
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def test_create_transfer_success(client_for):
    client = client_for(MockDrapRail())

    resp = client.post("/api/v1/remittance/transfers", json=TRANSFER_BODY)

    assert resp.status_code == 200
    data = resp.json()
    assert data["state"] == "CONFIRMED"
    assert data["quote_id"] == "Q1"
    assert data["transaction_ref_number"] == "T1"


def test_create_transfer_quote_failure_returns_502(client_for):
    rail = MockDrapRail(fail_at=FlowStage.QUOTE)
    client = client_for(rail)

    resp = client.post("/api/v1/remittance/transfers", json=TRANSFER_BODY)

    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["failed_stage"] == "QUOTE"
    assert detail["retryable"] is True
    assert detail["transaction_ref_number"] is None
    assert "open_transaction" not in rail.calls


def test_create_transfer_rejects_invalid_amount(client_for):
    client = client_for(MockDrapRail())
    body = dict(TRANSFER_BODY, sending_amount=0)

    resp = client.post("/api/v1/remittance/transfers", json=body)

    assert resp.status_code == 422


def test_get_transfer_after_create(client_for):
    client = client_for(MockDrapRail())
    client.post("/api/v1/remittance/transfers", json=TRANSFER_BODY)

    resp = client.get("/api/v1/remittance/transfers/T1")

    assert resp.status_code == 200
    assert resp.json() == {"transaction_ref_number": "T1", "state": "ACCEPTED", "sub_state": None}


def test_get_unknown_transfer_is_404(client_for):
    client = client_for(MockDrapRail())

    resp = client.get("/api/v1/remittance/transfers/T404")

    assert resp.status_code == 404


def test_get_rates(client_for):
    client = client_for(MockDrapRail())

    resp = client.get("/api/v1/remittance/rates")

    assert resp.status_code == 200
    rates = resp.json()["data"]["rates"]
    assert {"from_currency": "AED", "to_currency": "PKR", "rate": 75.62, "type": "SEND"} in rates


def test_get_rail_defaults_to_mock(monkeypatch):
    monkeypatch.setenv("INTEGRATIONS_MODE", "mock")
    assert isinstance(transfers.get_rail(), MockDrapRail)


def test_create_transfer_forwards_bank_details_and_address(client_for):
    opened = []

    class RecordingRail(MockDrapRail):
        async def open_transaction(self, token, request):
            opened.append(request.to_payload())
            return await super().open_transaction(token, request)

    client = client_for(RecordingRail())
    receiver = dict(
        TRANSFER_BODY["receiver"],
        bank_details={
            "account_type_code": "1",
            "account_number": "PK12ABCD0000001234567890",
            "routing_code": "HABBPKKA001",
            "correspondent_id": "RB",
            "correspondent_location_id": "5001",
        },
        receiver_address=[
            {"address_type": "PRESENT", "address_line": "12 Mall Road", "town_name": "Lahore", "country_code": "PK"}
        ],
    )

    resp = client.post("/api/v1/remittance/transfers", json=dict(TRANSFER_BODY, receiver=receiver))

    assert resp.status_code == 200
    sent = opened[0]["receiver"]
    assert sent["bank_details"] == receiver["bank_details"]
    assert sent["receiver_address"] == receiver["receiver_address"]


def test_bank_branch_lookup_chain(client_for):
    client = client_for(MockDrapRail())

    banks = client.get("/api/v1/remittance/banks", params={"receiving_mode": "BANK", "receiving_country_code": "PK"})
    bank = banks.json()["data"]["banks"][0]
    branches = client.get(
        f"/api/v1/remittance/banks/{bank['bank_id']}/branches",
        params={"correspondent": bank["correspondent"], "receiving_mode": "BANK", "receiving_country_code": "PK"},
    )

    assert banks.status_code == 200
    assert branches.status_code == 200
    assert branches.json()["data"]["branches"][0]["routing_code"] == "HABBPKKA001"


def test_banks_requires_mode_and_country(client_for):
    client = client_for(MockDrapRail())

    resp = client.get("/api/v1/remittance/banks", params={"receiving_mode": "BANK"})

    assert resp.status_code == 422


def test_codes_default_service_type_and_corridor(client_for):
    client = client_for(MockDrapRail())

    codes = client.get("/api/v1/remittance/codes")
    corridor = client.get("/api/v1/remittance/service-corridor")

    assert codes.status_code == 200
    assert codes.json()["data"]["service_type"] == "C2B"
    assert corridor.status_code == 200
    assert corridor.json()["data"]["corridors"]


def test_unknown_bank_branches_is_404(client_for):
    client = client_for(MockDrapRail())

    resp = client.get(
        "/api/v1/remittance/banks/9999/branches",
        params={"correspondent": "RB", "receiving_mode": "BANK", "receiving_country_code": "PK"},
    )

    assert resp.status_code == 404
