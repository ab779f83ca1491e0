"""Tests for pt_common.errors and pt_common.response."""

from src.pt_common.errors import (
    AccountNotFoundError,
    AccountSuspendedError,
    AppError,
    FailedPreconditionError,
    InsufficientBalanceError,
    InvalidArgumentError,
    LedgerEntryExistsError,
    StaleSnapshotError,
    TransactionAbortedError,
    UnauthenticatedError,
)
from src.pt_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert err.kind == "internal"

    def test_is_exception(self) -> None:
        err = AppError(code=1001, message="test")
        assert isinstance(err, Exception)
        assert str(err) == "test"


class TestErrorTaxonomy:
    def test_unauthenticated(self) -> None:
        err = UnauthenticatedError()
        assert err.code == 1001
        assert err.http_status == 401
        assert err.kind == "unauthenticated"
        assert err.message == "Authentication required"

    def test_invalid_argument_keeps_message(self) -> None:
        err = InvalidArgumentError("referenceId is required")
        assert err.code == 2001
        assert err.http_status == 400
        assert err.kind == "invalid-argument"
        assert err.message == "referenceId is required"

    def test_not_found(self) -> None:
        err = AccountNotFoundError()
        assert err.kind == "not-found"
        assert err.http_status == 404
        assert err.message == "Account not found"

    def test_suspended_is_failed_precondition(self) -> None:
        err = AccountSuspendedError("Cannot debit suspended account")
        assert isinstance(err, FailedPreconditionError)
        assert err.kind == "failed-precondition"
        assert err.code == 3002
        assert err.message == "Cannot debit suspended account"

    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=1000, available=70)
        assert isinstance(err, FailedPreconditionError)
        assert err.code == 3003
        assert err.http_status == 422
        assert err.message == "Insufficient balance"
        assert (err.required, err.available) == (1000, 70)

    def test_ledger_entry_exists(self) -> None:
        err = LedgerEntryExistsError("u1_ref1")
        assert err.kind == "already-exists"
        assert err.http_status == 409
        assert err.ledger_id == "u1_ref1"

    def test_concurrency_errors_are_aborted(self) -> None:
        assert StaleSnapshotError("u1", 4).kind == "aborted"
        aborted = TransactionAbortedError(5)
        assert aborted.kind == "aborted"
        assert "5 attempts" in aborted.message


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"status": "OK"})
        assert resp.code == 0
        assert resp.kind == "ok"
        assert resp.data == {"status": "OK"}

    def test_error(self) -> None:
        resp = error_response(3003, "Insufficient balance", "failed-precondition")
        assert resp.code == 3003
        assert resp.kind == "failed-precondition"
        assert resp.message == "Insufficient balance"
        assert resp.data is None

    def test_serialization(self) -> None:
        d = ApiResponse().model_dump()
        assert set(d) == {"code", "kind", "message", "data", "timestamp", "request_id"}
        assert d["request_id"].startswith("req_")
