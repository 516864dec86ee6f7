from __future__ import annotations

from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, Field, ValidationError

from remittance.integrations.contracts.errors import (
    AuthenticationError,
    ConfirmationError,
    EnquiryError,
    QuoteError,
    RemittanceError,
    TransactionOpenError,
)


class TokenResponseModel(BaseModel):
    access_token: str = Field(min_length=1)
    expires_in: Optional[int] = None
    token_type: str = "Bearer"


class QuoteResponseModel(BaseModel):
    # Pricing fields are passed through as the rail sent them.
    quote_id: str = Field(min_length=1)
    state: Any = None
    receiving_amount: Any = None
    expires_at: Any = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class TransactionResponseModel(BaseModel):
    transaction_ref_number: str = Field(min_length=1)
    state: Optional[str] = None
    sub_state: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


def normalize_token_response(raw: Any) -> TokenResponseModel:
    if not isinstance(raw, dict):
        raise AuthenticationError("Token response is not a JSON object.", body=raw)
    token = raw.get("access_token")
    if not isinstance(token, str) or not token.strip():
        raise AuthenticationError("Token response has no access_token.", body=raw)
    return TokenResponseModel(
        access_token=token,
        expires_in=_lenient_int(raw.get("expires_in")),
        token_type=str(raw.get("token_type") or "Bearer"),
    )


def normalize_quote_response(raw: Any) -> QuoteResponseModel:
    data = _data_section(raw, QuoteError)
    return _build_model(
        QuoteResponseModel,
        {
            "quote_id": _required_str(data, "quote_id", QuoteError, raw),
            "state": data.get("state"),
            "receiving_amount": data.get("receiving_amount"),
            "expires_at": data.get("expires_at_gmt") or data.get("expires_at"),
            "raw": raw,
        },
        raw,
        QuoteError,
    )


def normalize_transaction_response(raw: Any, *, error_cls: Type[RemittanceError] = TransactionOpenError) -> TransactionResponseModel:
    data = _data_section(raw, error_cls)
    return _build_model(
        TransactionResponseModel,
        {
            "transaction_ref_number": _required_str(data, "transaction_ref_number", error_cls, raw),
            "state": data.get("state"),
            "sub_state": data.get("sub_state"),
            "raw": raw,
        },
        raw,
        error_cls,
    )


def normalize_confirmation_response(raw: Any, *, fallback_reference: str) -> TransactionResponseModel:
    """Confirmation payloads are not guaranteed to echo the reference."""
    if not isinstance(raw, dict):
        raise ConfirmationError("Confirmation response is not a JSON object.", body=raw)
    data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
    reference = data.get("transaction_ref_number") or fallback_reference
    state = data.get("state") or raw.get("status")
    return _build_model(
        TransactionResponseModel,
        {
            "transaction_ref_number": str(reference),
            "state": str(state) if state is not None else None,
            "sub_state": data.get("sub_state"),
            "raw": raw,
        },
        raw,
        ConfirmationError,
    )


def normalize_enquiry_response(raw: Any, *, fallback_reference: str) -> TransactionResponseModel:
    data = _data_section(raw, EnquiryError)
    transaction = data.get("transaction") if isinstance(data.get("transaction"), dict) else {}
    reference = transaction.get("transaction_ref_number") or data.get("transaction_ref_number") or fallback_reference
    return _build_model(
        TransactionResponseModel,
        {
            "transaction_ref_number": str(reference),
            "state": data.get("state"),
            "sub_state": data.get("sub_state"),
            "raw": raw,
        },
        raw,
        EnquiryError,
    )


def _data_section(raw: Any, error_cls: Type[RemittanceError]) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise error_cls("Response is not a JSON object.", body=raw)
    data = raw.get("data")
    if not isinstance(data, dict):
        raise error_cls("Response has no 'data' object.", body=raw)
    return data


def _required_str(data: Dict[str, Any], key: str, error_cls: Type[RemittanceError], raw: Any) -> str:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise error_cls(f"Missing required field '{key}'.", body=raw)
    return str(value)


def _build_model(model_type, payload: Dict[str, Any], raw: Any, error_cls: Type[RemittanceError]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise error_cls(f"Response validation failed: {exc}", body=raw) from exc


def _lenient_int(value: Any) -> Optional[int]:
    """Optional numeric fields that don't parse are dropped, not fatal."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
