"""
Integrations layer.
This package contains all code used to communicate with the remittance rail:
- token acquisition (OAuth2 password grant)
- quoting, transaction open and confirmation
- transaction enquiry and published rates

Key rule:
- Flows MUST NOT call the rail directly.
- Flows call a RemittanceRail (real HTTP client or the in-memory mock).

Switching implementations:
- The selection of mock vs real rail happens in ONE place (remittance.api.endpoints.transfers.get_rail).
"""

from .contracts.errors import (
    AuthenticationError,
    ConfirmationError,
    EnquiryError,
    QuoteError,
    RemittanceError,
    TransactionOpenError,
)
from .contracts.interfaces import (
    AccessToken,
    BankDetails,
    ConfirmationResult,
    Credentials,
    FlowStage,
    FlowState,
    Quote,
    QuoteRequest,
    Receiver,
    ReceiverAddress,
    RemittanceRail,
    Transaction,
    TransactionRequest,
    TransactionStatus,
)

__all__ = [
    # interfaces
    "AccessToken", "BankDetails", "ConfirmationResult", "Credentials",
    "FlowStage", "FlowState", "Quote", "QuoteRequest", "Receiver",
    "ReceiverAddress", "RemittanceRail", "Transaction", "TransactionRequest",
    "TransactionStatus",
    # errors
    "AuthenticationError", "ConfirmationError", "EnquiryError", "QuoteError",
    "RemittanceError", "TransactionOpenError",
]
