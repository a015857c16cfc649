"""Tests for oracle models: outcomes, sentinels and prompt context."""

from datetime import date

import pytest
from pydantic import ValidationError

from askdb.models.oracle import (
    EMPTY_QUESTION_SENTINEL,
    UNEXPECTED_ERROR_SENTINEL,
    UNSAFE_QUERY_SENTINEL,
    FailureKind,
    Outcome,
    PotentiallyUnsafeQuery,
    PromptContext,
    is_valid_answer,
)


class TestOutcome:
    def test_success_renders_value(self):
        outcome = Outcome.success("SELECT 1")

        assert outcome.ok is True
        assert outcome.render() == "SELECT 1"

    def test_service_failure_renders_prefixed_message(self):
        outcome = Outcome.fail(FailureKind.SERVICE, "Rate limit reached")

        assert outcome.ok is False
        assert outcome.render() == "Error processing request with OpenAI: Rate limit reached"

    @pytest.mark.parametrize(
        ("kind", "sentinel"),
        [
            (FailureKind.UNEXPECTED, UNEXPECTED_ERROR_SENTINEL),
            (FailureKind.UNSAFE_QUERY, UNSAFE_QUERY_SENTINEL),
            (FailureKind.INVALID_QUESTION, EMPTY_QUESTION_SENTINEL),
        ],
    )
    def test_fixed_sentinels(self, kind, sentinel):
        assert Outcome.fail(kind, "detail").render() == sentinel

    def test_every_failure_renders_invalid_answer(self):
        for kind in FailureKind:
            assert is_valid_answer(Outcome.fail(kind, "x").render()) is False

    def test_outcome_is_frozen(self):
        outcome = Outcome.success("x")

        with pytest.raises(ValidationError):
            outcome.value = "y"


class TestIsValidAnswer:
    def test_none_is_invalid(self):
        assert is_valid_answer(None) is False

    def test_empty_string_is_valid(self):
        assert is_valid_answer("") is True

    def test_plain_answer_is_valid(self):
        assert is_valid_answer("There were 37 transactions.") is True

    def test_prefix_only_checked_at_start(self):
        assert is_valid_answer("Note: Error processing request") is True


class TestPromptContext:
    def test_final_answer_requires_query_and_result(self):
        base = {"question": "q", "dialect": "SQLite", "current_date": date(2024, 1, 1)}

        assert PromptContext(**base).is_final_answer is False
        assert PromptContext(**base, query="SELECT 1").is_final_answer is False
        assert PromptContext(**base, query="SELECT 1", result="{}").is_final_answer is True


def test_potentially_unsafe_query_message():
    error = PotentiallyUnsafeQuery.from_query("drop table x", reason="contains drop")

    assert "contains drop" in str(error)
    assert error.query == "drop table x"
