"""Tests for ConditionResult."""

import pydantic
import pytest

from condkit.conditions import ConditionResult


class TestConditionResult:
    """Test ConditionResult construction and semantics."""

    def test_to_success(self):
        """Test building a successful result."""
        result = ConditionResult.to_success(42, "ok")
        assert result.success is True
        assert result.result == 42
        assert result.message == "ok"
        assert result.passed is True

    def test_to_failure(self):
        """Test building a failed result."""
        result = ConditionResult.to_failure("x", "Id is missing")
        assert result.success is False
        assert result.result == "x"
        assert result.message == "Id is missing"
        assert result.passed is False

    def test_to_error_carries_only_message(self):
        """Test that to_error has no result value."""
        result = ConditionResult.to_error("boom")
        assert result.success is False
        assert result.result is None
        assert result.message == "boom"

    def test_unknown_success_is_not_a_pass(self):
        """Test that a tri-state None counts as failure."""
        result = ConditionResult(success=None, message="unsure")
        assert result.passed is False

    def test_defaults(self):
        """Test default field values."""
        result = ConditionResult()
        assert result.success is None
        assert result.result is None
        assert result.message == ""

    def test_results_are_immutable(self):
        """Test that results cannot be changed after creation."""
        result = ConditionResult.to_success()
        with pytest.raises(pydantic.ValidationError):
            result.success = False

    def test_result_can_hold_arbitrary_objects(self):
        """Test that any value can be stored as the examined result."""

        class Subject:
            pass

        subject = Subject()
        assert ConditionResult.to_success(subject).result is subject

    def test_str(self):
        """Test the diagnostic string form."""
        result = ConditionResult.to_failure(None, "Id is missing")
        assert str(result) == "Success: False, Message: Id is missing, Result: None"
