"""Tests for the quote stage against a mocked quote endpoint."""

import json

import httpx
import pytest
import respx

from remittance.integrations.clients.real_http.quotes import QuoteRequester
from remittance.integrations.contracts.errors import QuoteError
from remittance.integrations.contracts.interfaces import AccessToken
from tests.rail_paths import BASE_URL, QUOTE_PATH

TOKEN = AccessToken(value="abc123")

QUOTE_BODY = {
    "status": "success",
    "status_code": 200,
    "data": {
        "state": "INITIATED",
        "quote_id": "Q1",
        "receiving_amount": 7562.0,
        "expires_at_gmt": "2026-10-19T12:05:00Z",
    },
}


@pytest.mark.asyncio
async def test_request_quote_posts_corridor_with_bearer_token(config, quote_request):
    with respx.mock(base_url=BASE_URL) as rail:
        route = rail.post(QUOTE_PATH).mock(return_value=httpx.Response(200, json=QUOTE_BODY))

        quote = await QuoteRequester(config).request_quote(TOKEN, quote_request)

    assert quote.quote_id == "Q1"
    assert quote.receiving_amount == 7562.0
    assert quote.expires_at == "2026-10-19T12:05:00Z"
    assert quote.raw == QUOTE_BODY

    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer abc123"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["channel"] == "Direct"
    assert request.headers["company"] == "784100"
    assert "branch" not in request.headers
    assert json.loads(request.content) == {
        "sending_country_code": "AE",
        "sending_currency_code": "AED",
        "receiving_country_code": "PK",
        "receiving_currency_code": "PKR",
        "sending_amount": 100,
        "receiving_mode": "BANK",
        "type": "SEND",
        "instrument": "REMITTANCE",
    }


@pytest.mark.asyncio
async def test_quote_http_400_raises_quote_error_with_body(config, quote_request):
    error_body = {"status": "failure", "message": "Corridor not supported"}
    with respx.mock(base_url=BASE_URL) as rail:
        rail.post(QUOTE_PATH).mock(return_value=httpx.Response(400, json=error_body))

        with pytest.raises(QuoteError) as exc_info:
            await QuoteRequester(config).request_quote(TOKEN, quote_request)

    assert exc_info.value.status_code == 400
    assert exc_info.value.body == error_body
    assert "abc123" not in str(exc_info.value)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"status": "success"},
        {"data": {"state": "INITIATED"}},
        {"data": {"quote_id": "  "}},
        [],
    ],
)
async def test_quote_without_identifier_is_a_quote_error(config, quote_request, body):
    with respx.mock(base_url=BASE_URL) as rail:
        rail.post(QUOTE_PATH).mock(return_value=httpx.Response(200, json=body))

        with pytest.raises(QuoteError):
            await QuoteRequester(config).request_quote(TOKEN, quote_request)


@pytest.mark.asyncio
async def test_quote_with_epoch_expiry_still_succeeds(config, quote_request):
    body = {"status": "success", "data": {"quote_id": "Q1", "expires_at": 1760875500}}
    with respx.mock(base_url=BASE_URL) as rail:
        rail.post(QUOTE_PATH).mock(return_value=httpx.Response(200, json=body))

        quote = await QuoteRequester(config).request_quote(TOKEN, quote_request)

    assert quote.quote_id == "Q1"
    assert quote.expires_at == 1760875500
    assert quote.receiving_amount is None


@pytest.mark.asyncio
async def test_repeated_quote_requests_are_interchangeable(config, quote_request):
    """Quoting is safely repeatable: identical input, identical usable result."""
    with respx.mock(base_url=BASE_URL) as rail:
        route = rail.post(QUOTE_PATH).mock(return_value=httpx.Response(200, json=QUOTE_BODY))
        requester = QuoteRequester(config)

        first = await requester.request_quote(TOKEN, quote_request)
        second = await requester.request_quote(TOKEN, quote_request)

    assert route.call_count == 2
    assert first == second
    assert route.calls[0].request.content == route.calls[1].request.content


@pytest.mark.asyncio
async def test_quote_retries_server_errors_when_enabled(retrying_config, quote_request):
    with respx.mock(base_url=BASE_URL) as rail:
        route = rail.post(QUOTE_PATH).mock(
            side_effect=[
                httpx.Response(502),
                httpx.ReadTimeout("timed out"),
                httpx.Response(200, json=QUOTE_BODY),
            ]
        )

        quote = await QuoteRequester(retrying_config).request_quote(TOKEN, quote_request)

    assert quote.quote_id == "Q1"
    assert route.call_count == 3


@pytest.mark.asyncio
async def test_quote_client_errors_are_never_retried(retrying_config, quote_request):
    with respx.mock(base_url=BASE_URL) as rail:
        route = rail.post(QUOTE_PATH).mock(return_value=httpx.Response(400, json={"status": "failure"}))

        with pytest.raises(QuoteError):
            await QuoteRequester(retrying_config).request_quote(TOKEN, quote_request)

    assert route.call_count == 1
