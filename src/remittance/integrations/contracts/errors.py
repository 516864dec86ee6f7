"""
Remittance error taxonomy.

One exception per pipeline stage. Each carries the HTTP status and the
response body (when the remote system answered) so callers can diagnose a
failure without re-running it. Messages never contain credentials or tokens.
"""

from __future__ import annotations

from typing import Any, Optional

from .interfaces import FlowStage


class RemittanceError(Exception):
    stage: Optional[FlowStage] = None

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def to_dict(self) -> dict:
        return {
            "stage": self.stage.value if self.stage else None,
            "message": str(self),
            "status_code": self.status_code,
            "body": self.body,
        }


class AuthenticationError(RemittanceError):
    stage = FlowStage.AUTHENTICATION


class QuoteError(RemittanceError):
    stage = FlowStage.QUOTE


class TransactionOpenError(RemittanceError):
    stage = FlowStage.TRANSACTION_OPEN


class ConfirmationError(RemittanceError):
    stage = FlowStage.CONFIRMATION


class EnquiryError(RemittanceError):
    """Raised by read-only lookups (transaction enquiry, rates)."""
