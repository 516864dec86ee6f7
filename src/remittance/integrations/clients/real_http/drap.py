"""
Real DRAP rail client.

Bundles the four stage components and the master data lookups behind the
RemittanceRail interface so the transfer flow can run against either this
client or the in-memory mock.

Important:
- Keep this package as the ONLY place where rail HTTP calls are made.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from remittance.integrations.clients.real_http.auth import CredentialProvider
from remittance.integrations.clients.real_http.masters import MasterDataClient
from remittance.integrations.clients.real_http.quotes import QuoteRequester
from remittance.integrations.clients.real_http.transactions import (
    TransactionConfirmer,
    TransactionOpener,
)
from remittance.integrations.contracts.interfaces import (
    AccessToken,
    ConfirmationResult,
    Credentials,
    Quote,
    QuoteRequest,
    RemittanceRail,
    Transaction,
    TransactionRequest,
    TransactionStatus,
)
from remittance.utils.config_loader import RemittanceConfig, load_remittance_config


class DrapRailClient(RemittanceRail):
    def __init__(
        self,
        config: Optional[RemittanceConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or load_remittance_config()
        self.credential_provider = CredentialProvider(self.config, client)
        self.quote_requester = QuoteRequester(self.config, client)
        self.transaction_opener = TransactionOpener(self.config, client)
        self.transaction_confirmer = TransactionConfirmer(self.config, client)
        self.master_data = MasterDataClient(self.config, client)

    async def acquire_token(self, credentials: Credentials) -> AccessToken:
        return await self.credential_provider.acquire_token(credentials)

    async def request_quote(self, token: AccessToken, request: QuoteRequest) -> Quote:
        return await self.quote_requester.request_quote(token, request)

    async def open_transaction(self, token: AccessToken, request: TransactionRequest) -> Transaction:
        return await self.transaction_opener.open_transaction(token, request)

    async def confirm_transaction(self, token: AccessToken, reference: str) -> ConfirmationResult:
        return await self.transaction_confirmer.confirm_transaction(token, reference)

    async def enquire_transaction(self, token: AccessToken, reference: str) -> TransactionStatus:
        return await self.transaction_confirmer.enquire_transaction(token, reference)

    async def get_rates(self, token: AccessToken) -> Dict[str, Any]:
        return await self.master_data.get_rates(token)

    async def get_codes(self, token: AccessToken, service_type: str) -> Dict[str, Any]:
        return await self.master_data.get_codes(token, service_type)

    async def get_service_corridor(self, token: AccessToken) -> Dict[str, Any]:
        return await self.master_data.get_service_corridor(token)

    async def get_banks(self, token: AccessToken, receiving_mode: str, receiving_country_code: str) -> Dict[str, Any]:
        return await self.master_data.get_banks(token, receiving_mode, receiving_country_code)

    async def get_bank_branches(
        self,
        token: AccessToken,
        bank_id: str,
        correspondent: str,
        receiving_mode: str,
        receiving_country_code: str,
    ) -> Dict[str, Any]:
        return await self.master_data.get_bank_branches(
            token, bank_id, correspondent, receiving_mode, receiving_country_code
        )
