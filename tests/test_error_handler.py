from remittance.error_handler import ErrorHandler
from remittance.flows.transfer import FlowResult
from remittance.integrations.contracts.errors import ConfirmationError, QuoteError, TransactionOpenError
from remittance.integrations.contracts.interfaces import FlowStage, FlowState, Transaction


def test_handle_exception_returns_payload():
    eh = ErrorHandler()
    out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert out["fallback"] is True
    assert "internal error" in out["message"].lower()
    assert "boom" in out["metadata"]["error"]


def test_quote_failure_is_retryable_and_has_no_reference():
    result = FlowResult(state=FlowState.FAILED, stage=FlowStage.QUOTE, cause=QuoteError("quote failed", status_code=400))
    out = ErrorHandler().handle_flow_failure(result)
    assert out["failed_stage"] == "QUOTE"
    assert out["retryable"] is True
    assert out["transaction_ref_number"] is None
    assert out["metadata"]["status_code"] == 400


def test_confirmation_failure_reports_pending_reference():
    result = FlowResult(
        state=FlowState.FAILED,
        stage=FlowStage.CONFIRMATION,
        cause=ConfirmationError("confirmation failed", status_code=500),
        transaction=Transaction(reference="T1"),
    )
    out = ErrorHandler().handle_flow_failure(result)
    assert out["retryable"] is False
    assert out["transaction_ref_number"] == "T1"
    assert "check its status" in out["message"]


def test_open_transport_failure_does_not_claim_nothing_happened():
    result = FlowResult(
        state=FlowState.FAILED,
        stage=FlowStage.TRANSACTION_OPEN,
        cause=TransactionOpenError("transaction_open request to /createtransaction failed: ReadTimeout"),
    )
    out = ErrorHandler().handle_flow_failure(result)
    assert out["retryable"] is False
    assert out["metadata"]["status_code"] is None
    assert "not been charged" not in out["message"]
    assert "check its status" in out["message"]


def test_open_rejected_by_rail_reports_no_charge():
    result = FlowResult(
        state=FlowState.FAILED,
        stage=FlowStage.TRANSACTION_OPEN,
        cause=TransactionOpenError("transaction_open request returned HTTP 400", status_code=400),
    )
    out = ErrorHandler().handle_flow_failure(result)
    assert "not been charged" in out["message"]
