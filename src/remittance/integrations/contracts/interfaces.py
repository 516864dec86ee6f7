from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FlowState(str, Enum):
    START = "START"
    TOKEN_ACQUIRED = "TOKEN_ACQUIRED"
    QUOTE_OBTAINED = "QUOTE_OBTAINED"
    TRANSACTION_OPENED = "TRANSACTION_OPENED"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class FlowStage(str, Enum):
    AUTHENTICATION = "AUTHENTICATION"
    QUOTE = "QUOTE"
    TRANSACTION_OPEN = "TRANSACTION_OPEN"
    CONFIRMATION = "CONFIRMATION"


# ---------------------------------------------------------------------------
# Secrets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str = field(repr=False)
    username: str
    password: str = field(repr=False)

    def as_form(self) -> Dict[str, str]:
        """Password-grant form parameters for the token endpoint."""
        return {
            "grant_type": "password",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "username": self.username,
            "password": self.password,
        }


@dataclass(frozen=True)
class AccessToken:
    value: str = field(repr=False)
    expires_in: Optional[int] = None
    token_type: str = "Bearer"

    def authorization_header(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.value}"}


# ---------------------------------------------------------------------------
# Quote
# ---------------------------------------------------------------------------

@dataclass
class QuoteRequest:
    sending_country_code: str
    sending_currency_code: str
    receiving_country_code: str
    receiving_currency_code: str
    sending_amount: float
    receiving_mode: str = "BANK"
    type: str = "SEND"
    instrument: str = "REMITTANCE"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "sending_country_code": self.sending_country_code,
            "sending_currency_code": self.sending_currency_code,
            "receiving_country_code": self.receiving_country_code,
            "receiving_currency_code": self.receiving_currency_code,
            "sending_amount": self.sending_amount,
            "receiving_mode": self.receiving_mode,
            "type": self.type,
            "instrument": self.instrument,
        }


@dataclass
class Quote:
    quote_id: str
    receiving_amount: Any = None
    expires_at: Any = None
    raw: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Transaction
# ---------------------------------------------------------------------------

@dataclass
class BankDetails:
    account_type_code: str
    account_number: str
    routing_code: str
    correspondent_id: Optional[str] = None
    correspondent_location_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "account_type_code": self.account_type_code,
            "account_number": self.account_number,
            "routing_code": self.routing_code,
        }
        if self.correspondent_id:
            payload["correspondent_id"] = self.correspondent_id
        if self.correspondent_location_id:
            payload["correspondent_location_id"] = self.correspondent_location_id
        return payload


@dataclass
class ReceiverAddress:
    address_type: str
    address_line: str
    town_name: str
    country_code: str
    street_name: Optional[str] = None
    building_number: Optional[str] = None
    post_code: Optional[str] = None
    pobox: Optional[str] = None
    country_subdivision: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {key: value for key, value in self.__dict__.items() if value is not None}


@dataclass
class Receiver:
    mobile_number: str
    first_name: str
    last_name: str
    nationality: str
    relation_code: Optional[str] = None
    bank_details: Optional[BankDetails] = None
    addresses: List[ReceiverAddress] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "mobile_number": self.mobile_number,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "nationality": self.nationality,
        }
        if self.relation_code:
            payload["relation_code"] = self.relation_code
        if self.addresses:
            payload["receiver_address"] = [address.to_payload() for address in self.addresses]
        if self.bank_details is not None:
            payload["bank_details"] = self.bank_details.to_payload()
        return payload


@dataclass
class TransactionRequest:
    sender_customer_number: str
    receiver: Receiver
    quote_id: str = ""
    source_of_income: str = "SLRY"
    purpose_of_txn: str = "SAVG"
    type: str = "SEND"
    instrument: str = "REMITTANCE"
    message: Optional[str] = None
    idempotency_key: Optional[str] = None

    def with_quote(self, quote_id: str) -> "TransactionRequest":
        return replace(self, quote_id=quote_id)

    def to_payload(self) -> Dict[str, Any]:
        if not self.quote_id:
            raise ValueError("TransactionRequest is not bound to a quote.")

        transaction: Dict[str, Any] = {"quote_id": self.quote_id}
        if self.idempotency_key:
            transaction["agent_transaction_ref_number"] = self.idempotency_key

        payload: Dict[str, Any] = {
            "type": self.type,
            "source_of_income": self.source_of_income,
            "purpose_of_txn": self.purpose_of_txn,
            "instrument": self.instrument,
            "sender": {"customer_number": self.sender_customer_number},
            "receiver": self.receiver.to_payload(),
            "transaction": transaction,
        }
        if self.message:
            payload["message"] = self.message
        return payload


@dataclass
class Transaction:
    reference: str
    state: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ConfirmationResult:
    reference: str
    state: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TransactionStatus:
    reference: str
    state: Optional[str] = None
    sub_state: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Abstract rail interface
# ---------------------------------------------------------------------------

class RemittanceRail(ABC):
    """Every payment-rail client (real or mock) must implement this interface."""

    @abstractmethod
    async def acquire_token(self, credentials: Credentials) -> AccessToken:
        """Exchange static credentials for a short-lived bearer token."""

    @abstractmethod
    async def request_quote(self, token: AccessToken, request: QuoteRequest) -> Quote:
        """Price a transfer for one corridor and amount."""

    @abstractmethod
    async def open_transaction(self, token: AccessToken, request: TransactionRequest) -> Transaction:
        """Open a pending transaction against a quote."""

    @abstractmethod
    async def confirm_transaction(self, token: AccessToken, reference: str) -> ConfirmationResult:
        """Finalize a pending transaction. Moves funds; never retried."""

    @abstractmethod
    async def enquire_transaction(self, token: AccessToken, reference: str) -> TransactionStatus:
        """Look up the remote state of a transaction."""

    @abstractmethod
    async def get_rates(self, token: AccessToken) -> Dict[str, Any]:
        """Fetch the published FX rate table."""

    @abstractmethod
    async def get_codes(self, token: AccessToken, service_type: str) -> Dict[str, Any]:
        """Fetch a code list (e.g. relation or purpose codes) for one service type."""

    @abstractmethod
    async def get_service_corridor(self, token: AccessToken) -> Dict[str, Any]:
        """Fetch the corridors and receiving modes the partner may use."""

    @abstractmethod
    async def get_banks(self, token: AccessToken, receiving_mode: str, receiving_country_code: str) -> Dict[str, Any]:
        """List receiving banks for a mode and country."""

    @abstractmethod
    async def get_bank_branches(
        self,
        token: AccessToken,
        bank_id: str,
        correspondent: str,
        receiving_mode: str,
        receiving_country_code: str,
    ) -> Dict[str, Any]:
        """List branches of one bank, with their routing codes."""
