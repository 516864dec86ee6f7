"""Pytest fixtures for the remittance rail tests."""

import pytest

from remittance.integrations.clients.mocks.drap import MockDrapRail
from remittance.integrations.contracts.interfaces import (
    Credentials,
    QuoteRequest,
    Receiver,
    TransactionRequest,
)
from remittance.utils.config_loader import PartnerHeadersConfig, RemittanceConfig
from tests.rail_paths import BASE_URL


@pytest.fixture
def config():
    """Rail config pointed at a fake host, no retries."""
    return RemittanceConfig(
        base_url=BASE_URL,
        timeout_seconds=5,
        partner_headers=PartnerHeadersConfig(channel="Direct", company="784100"),
    )


@pytest.fixture
def retrying_config(config):
    return config.model_copy(update={"retry_attempts": 3, "retry_backoff_seconds": 0.0})


@pytest.fixture
def credentials():
    return Credentials(
        client_id="cdp_app",
        client_secret="s3cret-client",
        username="wallet-user",
        password="hunter2-password",
    )


@pytest.fixture
def quote_request():
    return QuoteRequest(
        sending_country_code="AE",
        sending_currency_code="AED",
        receiving_country_code="PK",
        receiving_currency_code="PKR",
        sending_amount=100,
    )


@pytest.fixture
def transaction_request():
    return TransactionRequest(
        sender_customer_number="1000001220000001",
        receiver=Receiver(
            mobile_number="+919586741508",
            first_name="Anija",
            last_name="Lastname",
            nationality="IN",
        ),
    )


@pytest.fixture
def mock_rail():
    return MockDrapRail()
