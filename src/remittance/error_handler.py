"""Error handling helpers for the remittance transfer flow."""
from typing import Any, Dict
import logging

from remittance.flows.transfer import FlowResult
from remittance.integrations.contracts.errors import RemittanceError
from remittance.integrations.contracts.interfaces import FlowStage

logger = logging.getLogger(__name__)

_STAGE_MESSAGES = {
    FlowStage.AUTHENTICATION: "We could not sign in to the payment rail. No transfer was started.",
    FlowStage.QUOTE: "We could not get a price for this transfer. No transfer was started.",
    FlowStage.TRANSACTION_OPEN: "The transfer could not be created. You have not been charged.",
    FlowStage.CONFIRMATION: "The transfer was created but could not be confirmed. Please check its status before retrying.",
}

# The open request may have reached the rail when no HTTP status came back.
_OPEN_UNKNOWN_MESSAGE = "We could not tell whether the transfer was created. Please check its status before retrying."


class ErrorHandler:
    def handle_flow_failure(self, result: FlowResult) -> Dict[str, Any]:
        stage = result.stage
        cause = result.cause
        logger.error("Transfer flow failed at %s: %s", stage.value if stage else "unknown", cause)
        status_code = cause.status_code if isinstance(cause, RemittanceError) else None
        if stage is FlowStage.TRANSACTION_OPEN and status_code is None:
            message = _OPEN_UNKNOWN_MESSAGE
        else:
            message = _STAGE_MESSAGES.get(stage, "The transfer could not be completed. Please try again later.")
        return {
            "message": message,
            "failed_stage": stage.value if stage else None,
            "transaction_ref_number": result.reference,
            "retryable": stage in (FlowStage.AUTHENTICATION, FlowStage.QUOTE),
            "metadata": {
                "status_code": status_code,
                "error": str(cause) if cause is not None else None,
            },
        }

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in remittance API: %s", exc, exc_info=True)
        return {
            "message": "An internal error occurred while processing your request. Please try again later.",
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }
