"""
Master data lookups.

Read-only reference data published by the rail: FX rates, code lists, the
service corridor and the bank/branch directory. Bank and branch entries carry
the routing_code, correspondent_id and correspondent_location_id a BANK-mode
receiver needs. Responses are returned as decoded JSON.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

from remittance.integrations.clients.real_http.base import RailHttpClient
from remittance.integrations.contracts.errors import EnquiryError
from remittance.integrations.contracts.interfaces import AccessToken


class MasterDataClient(RailHttpClient):
    async def get_rates(self, token: AccessToken) -> Dict[str, Any]:
        return await self._lookup(token, self.config.endpoints.rates)

    async def get_codes(self, token: AccessToken, service_type: str) -> Dict[str, Any]:
        return await self._lookup(token, self.config.endpoints.codes, {"service_type": service_type})

    async def get_service_corridor(self, token: AccessToken) -> Dict[str, Any]:
        return await self._lookup(token, self.config.endpoints.service_corridor)

    async def get_banks(self, token: AccessToken, receiving_mode: str, receiving_country_code: str) -> Dict[str, Any]:
        return await self._lookup(
            token,
            self.config.endpoints.banks,
            {"receiving_mode": receiving_mode, "receiving_country_code": receiving_country_code},
        )

    async def get_bank_branches(
        self,
        token: AccessToken,
        bank_id: str,
        correspondent: str,
        receiving_mode: str,
        receiving_country_code: str,
    ) -> Dict[str, Any]:
        path = f"{self.config.endpoints.banks.rstrip('/')}/{quote(bank_id, safe='')}/branches"
        return await self._lookup(
            token,
            path,
            {
                "correspondent": correspondent,
                "receiving_mode": receiving_mode,
                "receiving_country_code": receiving_country_code,
            },
        )

    async def _lookup(self, token: AccessToken, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headers": self.json_headers(token)}
        if params:
            kwargs["params"] = params
        return await self._send("GET", path, error_cls=EnquiryError, retryable=True, **kwargs)
