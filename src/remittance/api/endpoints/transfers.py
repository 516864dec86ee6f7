import logging
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from remittance.error_handler import ErrorHandler
from remittance.flows.transfer import TransferFlow
from remittance.integrations.clients.mocks.drap import MockDrapRail
from remittance.integrations.clients.real_http.drap import DrapRailClient
from remittance.integrations.contracts.errors import AuthenticationError, EnquiryError
from remittance.integrations.contracts.interfaces import (
    AccessToken,
    BankDetails,
    Credentials,
    QuoteRequest,
    Receiver,
    ReceiverAddress,
    RemittanceRail,
    TransactionRequest,
)
from remittance.utils.config_loader import load_credentials, load_remittance_config

logger = logging.getLogger(__name__)

api = APIRouter()
transfers_api = api

error_handler = ErrorHandler()


class BankDetailsBody(BaseModel):
    account_type_code: str
    account_number: str
    routing_code: str = Field(..., description="From GET /banks or /banks/{bank_id}/branches")
    correspondent_id: Optional[str] = None
    correspondent_location_id: Optional[str] = None


class ReceiverAddressBody(BaseModel):
    address_type: str
    address_line: str
    town_name: str
    country_code: str = Field(..., min_length=2, max_length=2)
    street_name: Optional[str] = None
    building_number: Optional[str] = None
    post_code: Optional[str] = None
    pobox: Optional[str] = None
    country_subdivision: Optional[str] = None


class ReceiverBody(BaseModel):
    mobile_number: str
    first_name: str
    last_name: str
    nationality: str
    relation_code: Optional[str] = None
    bank_details: Optional[BankDetailsBody] = None
    receiver_address: List[ReceiverAddressBody] = Field(default_factory=list)

    def to_receiver(self) -> Receiver:
        return Receiver(
            mobile_number=self.mobile_number,
            first_name=self.first_name,
            last_name=self.last_name,
            nationality=self.nationality,
            relation_code=self.relation_code,
            bank_details=BankDetails(**self.bank_details.model_dump()) if self.bank_details else None,
            addresses=[ReceiverAddress(**address.model_dump()) for address in self.receiver_address],
        )


class TransferRequestBody(BaseModel):
    sending_country_code: str = Field(..., min_length=2, max_length=2)
    sending_currency_code: str = Field(..., min_length=3, max_length=3)
    receiving_country_code: str = Field(..., min_length=2, max_length=2)
    receiving_currency_code: str = Field(..., min_length=3, max_length=3)
    sending_amount: float = Field(..., gt=0)
    receiving_mode: str = "BANK"
    sender_customer_number: str = Field(..., description="Rail customer number of the sender")
    receiver: ReceiverBody
    source_of_income: str = "SLRY"
    purpose_of_txn: str = "SAVG"
    message: Optional[str] = None
    idempotency_key: Optional[str] = Field(default=None, description="Sent as agent_transaction_ref_number")

    def quote_request(self) -> QuoteRequest:
        return QuoteRequest(
            sending_country_code=self.sending_country_code,
            sending_currency_code=self.sending_currency_code,
            receiving_country_code=self.receiving_country_code,
            receiving_currency_code=self.receiving_currency_code,
            sending_amount=self.sending_amount,
            receiving_mode=self.receiving_mode,
        )

    def transaction_request(self) -> TransactionRequest:
        return TransactionRequest(
            sender_customer_number=self.sender_customer_number,
            receiver=self.receiver.to_receiver(),
            source_of_income=self.source_of_income,
            purpose_of_txn=self.purpose_of_txn,
            message=self.message,
            idempotency_key=self.idempotency_key,
        )


@lru_cache(maxsize=1)
def _mock_rail() -> MockDrapRail:
    return MockDrapRail()


def get_rail() -> RemittanceRail:
    config = load_remittance_config()
    if config.use_real_rail:
        return DrapRailClient(config)
    return _mock_rail()


def get_credentials() -> Credentials:
    config = load_remittance_config()
    if config.use_real_rail:
        return load_credentials()
    try:
        return load_credentials()
    except ValueError:
        return Credentials(client_id="mock", client_secret="mock", username="mock", password="mock")


@api.post("/transfers", tags=["Remittance"])
async def create_transfer(
    request: TransferRequestBody,
    rail: RemittanceRail = Depends(get_rail),
    credentials: Credentials = Depends(get_credentials),
):
    result = await TransferFlow(rail).run(credentials, request.quote_request(), request.transaction_request())
    if not result.succeeded:
        raise HTTPException(status_code=502, detail=error_handler.handle_flow_failure(result))
    return result.to_dict()


@api.get("/transfers/{reference}", tags=["Remittance"])
async def get_transfer(
    reference: str,
    rail: RemittanceRail = Depends(get_rail),
    credentials: Credentials = Depends(get_credentials),
) -> Dict[str, Any]:
    try:
        token = await rail.acquire_token(credentials)
        status = await rail.enquire_transaction(token, reference)
    except AuthenticationError as exc:
        raise HTTPException(status_code=502, detail=exc.to_dict())
    except EnquiryError as exc:
        raise HTTPException(status_code=404 if exc.status_code == 404 else 502, detail=exc.to_dict())

    return {
        "transaction_ref_number": status.reference,
        "state": status.state,
        "sub_state": status.sub_state,
    }


@api.get("/rates", tags=["Master data"])
async def get_rates(
    rail: RemittanceRail = Depends(get_rail),
    credentials: Credentials = Depends(get_credentials),
) -> Dict[str, Any]:
    return await _lookup(rail, credentials, lambda token: rail.get_rates(token))


@api.get("/codes", tags=["Master data"])
async def get_codes(
    service_type: str = Query("C2B"),
    rail: RemittanceRail = Depends(get_rail),
    credentials: Credentials = Depends(get_credentials),
) -> Dict[str, Any]:
    return await _lookup(rail, credentials, lambda token: rail.get_codes(token, service_type))


@api.get("/service-corridor", tags=["Master data"])
async def get_service_corridor(
    rail: RemittanceRail = Depends(get_rail),
    credentials: Credentials = Depends(get_credentials),
) -> Dict[str, Any]:
    return await _lookup(rail, credentials, lambda token: rail.get_service_corridor(token))


@api.get("/banks", tags=["Master data"])
async def get_banks(
    receiving_mode: str = Query(...),
    receiving_country_code: str = Query(..., min_length=2, max_length=2),
    rail: RemittanceRail = Depends(get_rail),
    credentials: Credentials = Depends(get_credentials),
) -> Dict[str, Any]:
    return await _lookup(
        rail, credentials, lambda token: rail.get_banks(token, receiving_mode, receiving_country_code)
    )


@api.get("/banks/{bank_id}/branches", tags=["Master data"])
async def get_bank_branches(
    bank_id: str,
    correspondent: str = Query(...),
    receiving_mode: str = Query(...),
    receiving_country_code: str = Query(..., min_length=2, max_length=2),
    rail: RemittanceRail = Depends(get_rail),
    credentials: Credentials = Depends(get_credentials),
) -> Dict[str, Any]:
    return await _lookup(
        rail,
        credentials,
        lambda token: rail.get_bank_branches(token, bank_id, correspondent, receiving_mode, receiving_country_code),
    )


async def _lookup(
    rail: RemittanceRail,
    credentials: Credentials,
    fetch: Callable[[AccessToken], Awaitable[Dict[str, Any]]],
) -> Dict[str, Any]:
    try:
        token = await rail.acquire_token(credentials)
        return await fetch(token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=502, detail=exc.to_dict())
    except EnquiryError as exc:
        status = exc.status_code if exc.status_code in (400, 404) else 502
        raise HTTPException(status_code=status, detail=exc.to_dict())
