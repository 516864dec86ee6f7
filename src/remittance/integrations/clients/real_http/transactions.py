"""
Transaction Opener and Confirmer.

Both calls change state on the remote ledger (open creates a pending
transaction, confirm moves funds), so neither is ever retried here. A caller
that needs safe resubmission sets TransactionRequest.idempotency_key.
"""

from __future__ import annotations

import logging

from remittance.integrations.clients.real_http.base import RailHttpClient
from remittance.integrations.contracts.errors import (
    ConfirmationError,
    EnquiryError,
    TransactionOpenError,
)
from remittance.integrations.contracts.interfaces import (
    AccessToken,
    ConfirmationResult,
    Transaction,
    TransactionRequest,
    TransactionStatus,
)
from remittance.integrations.policy.response_wrappers import (
    normalize_confirmation_response,
    normalize_enquiry_response,
    normalize_transaction_response,
)

logger = logging.getLogger(__name__)


class TransactionOpener(RailHttpClient):
    async def open_transaction(self, token: AccessToken, request: TransactionRequest) -> Transaction:
        if not request.quote_id:
            raise TransactionOpenError("Cannot open a transaction without a quote_id.")

        raw = await self._send(
            "POST",
            self.config.endpoints.create_transaction,
            error_cls=TransactionOpenError,
            json=request.to_payload(),
            headers=self.json_headers(token),
        )
        txn = normalize_transaction_response(raw)
        logger.info("Transaction %s opened against quote %s", txn.transaction_ref_number, request.quote_id)
        return Transaction(reference=txn.transaction_ref_number, state=txn.state, raw=txn.raw)


class TransactionConfirmer(RailHttpClient):
    async def confirm_transaction(self, token: AccessToken, reference: str) -> ConfirmationResult:
        if not reference:
            raise ConfirmationError("Cannot confirm a transaction without a reference.")

        raw = await self._send(
            "POST",
            self.config.endpoints.confirm_transaction,
            error_cls=ConfirmationError,
            json={"transaction_ref_number": reference},
            headers=self.json_headers(token),
        )
        confirmation = normalize_confirmation_response(raw, fallback_reference=reference)
        logger.info("Transaction %s confirmed (state=%s)", reference, confirmation.state)
        return ConfirmationResult(
            reference=confirmation.transaction_ref_number,
            state=confirmation.state,
            raw=confirmation.raw,
        )

    async def enquire_transaction(self, token: AccessToken, reference: str) -> TransactionStatus:
        raw = await self._send(
            "GET",
            self.config.endpoints.enquire_transaction,
            error_cls=EnquiryError,
            retryable=True,
            params={"transaction_ref_number": reference},
            headers=self.json_headers(token),
        )
        status = normalize_enquiry_response(raw, fallback_reference=reference)
        return TransactionStatus(
            reference=status.transaction_ref_number,
            state=status.state,
            sub_state=status.sub_state,
            raw=status.raw,
        )
