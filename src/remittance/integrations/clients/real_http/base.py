"""
Shared transport for the real rail clients.

Every HTTP call to the rail goes through RailHttpClient._send so that status
handling, error wrapping and the (opt-in) retry policy live in one place.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Type

import httpx

from remittance.integrations.contracts.errors import RemittanceError
from remittance.integrations.contracts.interfaces import AccessToken
from remittance.utils.config_loader import RemittanceConfig, load_remittance_config

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = {429, 500, 502, 503, 504}
MAX_ERROR_BODY_CHARS = 2000


class RailHttpClient:
    def __init__(
        self,
        config: Optional[RemittanceConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or load_remittance_config()
        self._client = client

    def json_headers(self, token: AccessToken) -> Dict[str, str]:
        headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        headers.update(self.config.partner_headers.as_headers())
        headers.update(token.authorization_header())
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        error_cls: Type[RemittanceError],
        retryable: bool = False,
        **kwargs: Any,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Retries happen only when the caller marks the call retryable and
        config.retry_attempts > 1; transport errors and RETRYABLE_STATUSES are
        retried, anything else fails immediately.
        """
        url = self.config.url(path)
        attempts = self.config.retry_attempts if retryable else 1
        label = error_cls.stage.value.lower() if error_cls.stage else "lookup"

        for attempt in range(1, attempts + 1):
            try:
                response = await self._request(method, url, **kwargs)
            except httpx.HTTPError as exc:
                if attempt < attempts:
                    await self._backoff(label, attempt, f"{type(exc).__name__}")
                    continue
                raise error_cls(f"{label} request to {path} failed: {type(exc).__name__}") from exc

            if response.status_code in RETRYABLE_STATUSES and attempt < attempts:
                await self._backoff(label, attempt, f"HTTP {response.status_code}")
                continue

            return self._decode(response, path, label, error_cls)

        # Loop always returns or raises; kept for type checkers.
        raise error_cls(f"{label} request to {path} exhausted {attempts} attempts")

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, url, **kwargs)
        async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
            return await client.request(method, url, **kwargs)

    async def _backoff(self, label: str, attempt: int, reason: str) -> None:
        wait = self.config.retry_backoff_seconds * (2 ** (attempt - 1))
        logger.warning("%s attempt %d failed (%s), retrying in %.2fs", label, attempt, reason, wait)
        await asyncio.sleep(wait)

    @staticmethod
    def _decode(response: httpx.Response, path: str, label: str, error_cls: Type[RemittanceError]) -> Any:
        if not response.is_success:
            raise error_cls(
                f"{label} request to {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=_error_body(response),
            )
        try:
            return response.json() if response.content else {}
        except ValueError as exc:
            raise error_cls(
                f"{label} response from {path} is not valid JSON",
                status_code=response.status_code,
                body=response.text[:MAX_ERROR_BODY_CHARS],
            ) from exc


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:MAX_ERROR_BODY_CHARS]
