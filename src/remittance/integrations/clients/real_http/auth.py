"""
Credential Provider.

Exchanges static rail credentials for a short-lived bearer token using the
OAuth2 password grant. The token is returned to the caller and never cached
here; each flow run acquires its own.
"""

from __future__ import annotations

import logging

from remittance.integrations.clients.real_http.base import RailHttpClient
from remittance.integrations.contracts.errors import AuthenticationError
from remittance.integrations.contracts.interfaces import AccessToken, Credentials
from remittance.integrations.policy.response_wrappers import normalize_token_response

logger = logging.getLogger(__name__)


class CredentialProvider(RailHttpClient):
    async def acquire_token(self, credentials: Credentials) -> AccessToken:
        raw = await self._send(
            "POST",
            self.config.endpoints.token,
            error_cls=AuthenticationError,
            retryable=True,
            data=credentials.as_form(),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        token = normalize_token_response(raw)
        logger.info("Access token acquired (expires_in=%s)", token.expires_in)
        return AccessToken(value=token.access_token, expires_in=token.expires_in, token_type=token.token_type)
