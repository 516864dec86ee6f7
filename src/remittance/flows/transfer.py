"""
Transfer flow - token -> quote -> open transaction -> confirm
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from remittance.integrations.contracts.errors import RemittanceError
from remittance.integrations.contracts.interfaces import (
    AccessToken,
    ConfirmationResult,
    Credentials,
    FlowStage,
    FlowState,
    Quote,
    QuoteRequest,
    RemittanceRail,
    Transaction,
    TransactionRequest,
)

logger = logging.getLogger(__name__)

# Stage attempted from each non-terminal state, and the state it leads to.
_TRANSITIONS = {
    FlowState.START: (FlowStage.AUTHENTICATION, FlowState.TOKEN_ACQUIRED),
    FlowState.TOKEN_ACQUIRED: (FlowStage.QUOTE, FlowState.QUOTE_OBTAINED),
    FlowState.QUOTE_OBTAINED: (FlowStage.TRANSACTION_OPEN, FlowState.TRANSACTION_OPENED),
    FlowState.TRANSACTION_OPENED: (FlowStage.CONFIRMATION, FlowState.CONFIRMED),
}


@dataclass
class FlowResult:
    """Terminal outcome of one transfer flow run. Never holds the token."""

    state: FlowState
    stage: Optional[FlowStage] = None
    cause: Optional[BaseException] = None
    quote: Optional[Quote] = None
    transaction: Optional[Transaction] = None
    confirmation: Optional[ConfirmationResult] = None
    history: List[FlowState] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state is FlowState.CONFIRMED

    @property
    def reference(self) -> Optional[str]:
        return self.transaction.reference if self.transaction else None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "state": self.state.value,
            "history": [s.value for s in self.history],
            "quote_id": self.quote.quote_id if self.quote else None,
            "transaction_ref_number": self.reference,
        }
        if self.confirmation is not None:
            out["confirmation"] = self.confirmation.raw or {"state": self.confirmation.state}
        if self.state is FlowState.FAILED:
            out["failed_stage"] = self.stage.value if self.stage else None
            if isinstance(self.cause, RemittanceError):
                out["error"] = self.cause.to_dict()
            elif self.cause is not None:
                out["error"] = {"message": str(self.cause)}
        return out


class TransferFlow:
    """
    Runs one remittance transfer as an explicit state machine.

    START -> TOKEN_ACQUIRED -> QUOTE_OBTAINED -> TRANSACTION_OPENED -> CONFIRMED,
    with FAILED(stage, cause) reachable from every non-terminal state. The
    first stage error ends the run; nothing is retried or compensated here.
    """

    def __init__(self, rail: RemittanceRail):
        self.rail = rail

    async def run(
        self,
        credentials: Credentials,
        quote_request: QuoteRequest,
        transaction_request: TransactionRequest,
    ) -> FlowResult:
        result = FlowResult(state=FlowState.START, history=[FlowState.START])
        token: Optional[AccessToken] = None

        while result.state in _TRANSITIONS:
            stage, next_state = _TRANSITIONS[result.state]
            try:
                if stage is FlowStage.AUTHENTICATION:
                    token = await self.rail.acquire_token(credentials)
                elif stage is FlowStage.QUOTE:
                    result.quote = await self.rail.request_quote(token, quote_request)
                elif stage is FlowStage.TRANSACTION_OPEN:
                    bound = transaction_request.with_quote(result.quote.quote_id)
                    result.transaction = await self.rail.open_transaction(token, bound)
                else:
                    result.confirmation = await self.rail.confirm_transaction(token, result.transaction.reference)
            except asyncio.CancelledError:
                if result.transaction is not None:
                    logger.warning(
                        "Transfer abandoned after opening transaction %s; it is pending on the rail and must be reconciled",
                        result.transaction.reference,
                    )
                elif stage is FlowStage.TRANSACTION_OPEN:
                    logger.warning(
                        "Transfer cancelled while opening a transaction for quote %s (agent ref %s); "
                        "the rail may hold a pending transaction that must be reconciled",
                        result.quote.quote_id,
                        transaction_request.idempotency_key,
                    )
                raise
            except RemittanceError as exc:
                return self._fail(result, stage, exc)
            except Exception as exc:
                logger.error("Unexpected error in %s stage", stage.value, exc_info=True)
                return self._fail(result, stage, exc)

            result.state = next_state
            result.history.append(next_state)
            logger.info("Transfer flow -> %s", next_state.value)

        logger.info("Transfer %s confirmed", result.reference)
        return result

    @staticmethod
    def _fail(result: FlowResult, stage: FlowStage, cause: BaseException) -> FlowResult:
        result.state = FlowState.FAILED
        result.stage = stage
        result.cause = cause
        result.history.append(FlowState.FAILED)
        if result.transaction is not None:
            logger.warning(
                "Transfer failed at %s; transaction %s remains pending on the rail",
                stage.value,
                result.transaction.reference,
            )
        else:
            logger.warning("Transfer failed at %s: %s", stage.value, cause)
        return result
