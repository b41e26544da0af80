"""Tests for tablespine.ops.result."""

from tablespine.core.errors import InvalidIdentifierError
from tablespine.ops.result import OperationResult, start_timer


class TestOperationResult:
    def test_ok(self):
        result = OperationResult.ok({"a": 1}, elapsed_ms=1.234)
        assert result.success
        assert result.to_dict() == {"success": True, "data": {"a": 1}, "elapsed_ms": 1.23}

    def test_fail(self):
        result = OperationResult.fail("EXECUTION_FAILED", "no such table: x")
        assert not result.success
        assert result.error_message == "no such table: x"
        assert result.to_dict()["error"]["code"] == "EXECUTION_FAILED"

    def test_from_error_carries_identifier(self):
        result = OperationResult.from_error(InvalidIdentifierError("x y", kind="column"))
        assert result.error.code == "INVALID_IDENTIFIER"
        assert result.error.message == "Invalid column: 'x y'"
        assert result.error.details["identifier"] == "x y"
        assert result.error.retryable is False


class TestTimer:
    def test_elapsed_is_non_negative(self):
        assert start_timer().elapsed_ms >= 0
