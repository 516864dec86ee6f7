"""
Quote Requester.

Prices a transfer for one corridor and amount. The corridor fields are passed
through untouched; validation and FX are the rail's job.
"""

from __future__ import annotations

import logging

from remittance.integrations.clients.real_http.base import RailHttpClient
from remittance.integrations.contracts.errors import QuoteError
from remittance.integrations.contracts.interfaces import AccessToken, Quote, QuoteRequest
from remittance.integrations.policy.response_wrappers import normalize_quote_response

logger = logging.getLogger(__name__)


class QuoteRequester(RailHttpClient):
    async def request_quote(self, token: AccessToken, request: QuoteRequest) -> Quote:
        raw = await self._send(
            "POST",
            self.config.endpoints.quote,
            error_cls=QuoteError,
            retryable=True,
            json=request.to_payload(),
            headers=self.json_headers(token),
        )
        quote = normalize_quote_response(raw)
        logger.info(
            "Quote %s obtained for %s->%s %s",
            quote.quote_id,
            request.sending_currency_code,
            request.receiving_currency_code,
            request.sending_amount,
        )
        return Quote(
            quote_id=quote.quote_id,
            receiving_amount=quote.receiving_amount,
            expires_at=quote.expires_at,
            raw=quote.raw,
        )
