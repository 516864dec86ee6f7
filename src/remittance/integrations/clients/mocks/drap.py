"""
DRAP remittance rail - MOCK client.

⚠️  This is a mock implementation for development and testing.
    It makes no network calls. Quote ids and transaction references are
    deterministic (Q1, Q2, ... / T1, T2, ...) and any stage can be made to
    fail via the constructor, which is how the flow's failure handling is
    exercised without a sandbox.
"""

import logging
import secrets
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple, Type

from remittance.integrations.contracts.errors import (
    AuthenticationError,
    ConfirmationError,
    EnquiryError,
    QuoteError,
    RemittanceError,
    TransactionOpenError,
)
from remittance.integrations.contracts.interfaces import (
    AccessToken,
    ConfirmationResult,
    Credentials,
    FlowStage,
    Quote,
    QuoteRequest,
    RemittanceRail,
    Transaction,
    TransactionRequest,
    TransactionStatus,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_MOCK_RATES: Dict[Tuple[str, str], float] = {
    ("AED", "PKR"): 75.62,
    ("AED", "INR"): 22.71,
    ("AED", "PHP"): 15.34,
    ("AED", "BDT"): 32.48,
}

_MOCK_CODES: Dict[str, Dict[str, List[Dict[str, str]]]] = {
    "C2C": {
        "relationship": [{"code": "REL001", "name": "Brother"}, {"code": "REL002", "name": "Sister"}],
        "source_of_income": [{"code": "SLRY", "name": "Salary"}, {"code": "BUSN", "name": "Business"}],
        "purpose_of_transaction": [{"code": "SAVG", "name": "Savings"}, {"code": "FAMI", "name": "Family support"}],
    },
}
_MOCK_CODES["C2B"] = _MOCK_CODES["C2C"]

_MOCK_CORRIDORS: List[Dict[str, Any]] = [
    {"sending_country_code": "AE", "receiving_country_code": dst, "receiving_currency_code": ccy,
     "receiving_modes": ["BANK", "CASHPICKUP"]}
    for dst, ccy in (("PK", "PKR"), ("IN", "INR"), ("PH", "PHP"), ("BD", "BDT"))
]

# (receiving_mode, receiving_country_code) -> banks
_MOCK_BANKS: Dict[Tuple[str, str], List[Dict[str, str]]] = {
    ("BANK", "PK"): [
        {"bank_id": "1001", "bank_name": "Habib Bank Limited", "correspondent": "RB"},
        {"bank_id": "1002", "bank_name": "Meezan Bank", "correspondent": "RB"},
    ],
    ("BANK", "IN"): [
        {"bank_id": "2001", "bank_name": "State Bank of India", "correspondent": "RB"},
    ],
}

_MOCK_BRANCHES: Dict[str, List[Dict[str, str]]] = {
    "1001": [
        {"branch_id": "100101", "branch_name": "Karachi Main", "routing_code": "HABBPKKA001",
         "correspondent_id": "RB", "correspondent_location_id": "5001"},
    ],
    "1002": [
        {"branch_id": "100201", "branch_name": "Lahore Gulberg", "routing_code": "MEZNPKKA002",
         "correspondent_id": "RB", "correspondent_location_id": "5002"},
    ],
    "2001": [
        {"branch_id": "200101", "branch_name": "Mumbai Fort", "routing_code": "SBIN0000300",
         "correspondent_id": "RB", "correspondent_location_id": "6001"},
    ],
}

_STAGE_ERRORS = {
    FlowStage.AUTHENTICATION: AuthenticationError,
    FlowStage.QUOTE: QuoteError,
    FlowStage.TRANSACTION_OPEN: TransactionOpenError,
    FlowStage.CONFIRMATION: ConfirmationError,
}


# ---------------------------------------------------------------------------
# Mock client
# ---------------------------------------------------------------------------

class MockDrapRail(RemittanceRail):
    """
    Mock DRAP rail.

    Parameters
    ----------
    fail_at : FlowStage, optional
        Stage that answers with an error instead of succeeding.
    failure_status : int
        HTTP status carried by the injected error. Default 400.
    valid_credentials : Credentials, optional
        When given, acquire_token rejects any other credentials.
    max_entries : int
        Upper bound on each in-memory store (tokens, quotes, transactions,
        idempotency keys). The oldest entry is dropped once it is reached.
    """

    def __init__(
        self,
        fail_at: Optional[FlowStage] = None,
        failure_status: int = 400,
        valid_credentials: Optional[Credentials] = None,
        max_entries: int = 1000,
    ):
        self._fail_at = fail_at
        self._failure_status = failure_status
        self._valid_credentials = valid_credentials
        self._max_entries = max_entries

        # In-memory stores (reset on restart, bounded by max_entries)
        self._tokens: "OrderedDict[str, None]" = OrderedDict()
        self._quotes: "OrderedDict[str, QuoteRequest]" = OrderedDict()
        self._transactions: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self._open_by_key: "OrderedDict[str, str]" = OrderedDict()
        self._quote_seq = 0
        self._transaction_seq = 0
        self.calls: List[str] = []

        logger.info("[DRAP MOCK] Client initialised (fail_at=%s)", fail_at.value if fail_at else None)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def acquire_token(self, credentials: Credentials) -> AccessToken:
        self.calls.append("acquire_token")
        self._maybe_fail(FlowStage.AUTHENTICATION)
        if self._valid_credentials is not None and credentials != self._valid_credentials:
            raise AuthenticationError(
                "authentication request returned HTTP 401",
                status_code=401,
                body={"error": "invalid_grant", "error_description": "Invalid user credentials"},
            )
        token = secrets.token_urlsafe(16)
        self._remember(self._tokens, token, None)
        return AccessToken(value=token, expires_in=300)

    async def request_quote(self, token: AccessToken, request: QuoteRequest) -> Quote:
        self.calls.append("request_quote")
        self._check_token(token, QuoteError)
        self._maybe_fail(FlowStage.QUOTE)

        rate = _MOCK_RATES.get((request.sending_currency_code, request.receiving_currency_code), 1.0)
        self._quote_seq += 1
        quote_id = f"Q{self._quote_seq}"
        self._remember(self._quotes, quote_id, request)
        receiving_amount = round(float(request.sending_amount) * rate, 2)
        logger.info("[DRAP MOCK] Quote %s: %s %s -> %s %s", quote_id, request.sending_amount,
                    request.sending_currency_code, receiving_amount, request.receiving_currency_code)
        return Quote(
            quote_id=quote_id,
            receiving_amount=receiving_amount,
            raw={"status": "success", "data": {"quote_id": quote_id, "state": "INITIATED",
                                               "receiving_amount": receiving_amount}},
        )

    async def open_transaction(self, token: AccessToken, request: TransactionRequest) -> Transaction:
        self.calls.append("open_transaction")
        self._check_token(token, TransactionOpenError)
        self._maybe_fail(FlowStage.TRANSACTION_OPEN)

        if request.quote_id not in self._quotes:
            raise TransactionOpenError(
                "transaction_open request returned HTTP 400",
                status_code=400,
                body={"status": "failure", "message": f"Unknown quote_id '{request.quote_id}'"},
            )

        # Same idempotency key => same pending transaction.
        existing = self._open_by_key.get(request.idempotency_key) if request.idempotency_key else None
        if existing in self._transactions:
            return Transaction(reference=existing, state=self._transactions[existing]["state"])

        self._transaction_seq += 1
        reference = f"T{self._transaction_seq}"
        self._remember(self._transactions, reference, {"quote_id": request.quote_id, "state": "CREATED"})
        if request.idempotency_key:
            self._remember(self._open_by_key, request.idempotency_key, reference)
        return Transaction(reference=reference, state="CREATED",
                           raw={"data": {"transaction_ref_number": reference, "state": "CREATED"}})

    async def confirm_transaction(self, token: AccessToken, reference: str) -> ConfirmationResult:
        self.calls.append("confirm_transaction")
        self._check_token(token, ConfirmationError)
        self._maybe_fail(FlowStage.CONFIRMATION)

        txn = self._transactions.get(reference)
        if txn is None:
            raise ConfirmationError(
                "confirmation request returned HTTP 404",
                status_code=404,
                body={"status": "failure", "message": f"Unknown transaction '{reference}'"},
            )
        txn["state"] = "ACCEPTED"
        return ConfirmationResult(reference=reference, state="ACCEPTED",
                                  raw={"status": "success", "data": {"transaction_ref_number": reference,
                                                                     "state": "ACCEPTED"}})

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def enquire_transaction(self, token: AccessToken, reference: str) -> TransactionStatus:
        self.calls.append("enquire_transaction")
        self._check_token(token, EnquiryError)
        txn = self._transactions.get(reference)
        if txn is None:
            raise EnquiryError(f"Unknown transaction '{reference}'", status_code=404)
        return TransactionStatus(reference=reference, state=txn["state"])

    async def get_rates(self, token: AccessToken) -> Dict[str, Any]:
        self.calls.append("get_rates")
        self._check_token(token, EnquiryError)
        return _success({
            "rates": [
                {"from_currency": src, "to_currency": dst, "rate": rate, "type": "SEND"}
                for (src, dst), rate in _MOCK_RATES.items()
            ]
        })

    async def get_codes(self, token: AccessToken, service_type: str) -> Dict[str, Any]:
        self.calls.append("get_codes")
        self._check_token(token, EnquiryError)
        codes = _MOCK_CODES.get(service_type)
        if codes is None:
            raise EnquiryError(f"Unknown service_type '{service_type}'", status_code=400)
        return _success({"service_type": service_type, **codes})

    async def get_service_corridor(self, token: AccessToken) -> Dict[str, Any]:
        self.calls.append("get_service_corridor")
        self._check_token(token, EnquiryError)
        return _success({"corridors": _MOCK_CORRIDORS})

    async def get_banks(self, token: AccessToken, receiving_mode: str, receiving_country_code: str) -> Dict[str, Any]:
        self.calls.append("get_banks")
        self._check_token(token, EnquiryError)
        return _success({"banks": _MOCK_BANKS.get((receiving_mode, receiving_country_code), [])})

    async def get_bank_branches(
        self,
        token: AccessToken,
        bank_id: str,
        correspondent: str,
        receiving_mode: str,
        receiving_country_code: str,
    ) -> Dict[str, Any]:
        self.calls.append("get_bank_branches")
        self._check_token(token, EnquiryError)
        banks = _MOCK_BANKS.get((receiving_mode, receiving_country_code), [])
        if not any(bank["bank_id"] == bank_id and bank["correspondent"] == correspondent for bank in banks):
            raise EnquiryError(f"Unknown bank '{bank_id}'", status_code=404)
        return _success({"bank_id": bank_id, "branches": _MOCK_BRANCHES.get(bank_id, [])})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _maybe_fail(self, stage: FlowStage) -> None:
        if self._fail_at is stage:
            error_cls = _STAGE_ERRORS[stage]
            raise error_cls(
                f"{stage.value.lower()} request returned HTTP {self._failure_status}",
                status_code=self._failure_status,
                body={"status": "failure", "message": "Simulated failure"},
            )

    def _check_token(self, token: AccessToken, error_cls: Type[RemittanceError]) -> None:
        if token.value not in self._tokens:
            raise error_cls("Bearer token rejected", status_code=401)

    def _remember(self, store: "OrderedDict[str, Any]", key: str, value: Any) -> None:
        store[key] = value
        while len(store) > self._max_entries:
            store.popitem(last=False)


def _success(data: Dict[str, Any]) -> Dict[str, Any]:
    return {"status": "success", "status_code": 200, "data": data}
