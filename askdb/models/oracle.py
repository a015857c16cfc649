"""
Oracle Models

Prompt inputs, the internal result type, and oracle errors.

Failures travel through the pipeline as ``Outcome`` values. Sentinel strings
are only produced by ``Outcome.render()`` at the public boundary, because
callers of ``ask``/``get_query`` detect failure by string prefix.
"""

from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from askdb.connectors.base import TableInfo

SERVICE_ERROR_PREFIX = "Error processing request with OpenAI: "
UNEXPECTED_ERROR_SENTINEL = "Error processing request."
EMPTY_QUESTION_SENTINEL = "Error processing request: question must not be empty."
UNSAFE_QUERY_SENTINEL = "Generated query was deemed potentially unsafe."

INVALID_ANSWER_PREFIXES = (
    "Error processing request",
    "Generated query was deemed potentially unsafe",
)


class FailureKind(StrEnum):
    """Why a pipeline step did not produce a value."""

    SERVICE = "service"
    UNEXPECTED = "unexpected"
    UNSAFE_QUERY = "unsafe_query"
    INVALID_QUESTION = "invalid_question"


class Failure(BaseModel):
    """Typed failure with kind and detail message."""

    kind: FailureKind = Field(..., description="Failure category")
    message: str = Field(default="", description="Detail for logs and service errors")

    model_config = ConfigDict(frozen=True)

    def to_sentinel(self) -> str:
        if self.kind == FailureKind.SERVICE:
            return f"{SERVICE_ERROR_PREFIX}{self.message}"
        if self.kind == FailureKind.UNSAFE_QUERY:
            return UNSAFE_QUERY_SENTINEL
        if self.kind == FailureKind.INVALID_QUESTION:
            return EMPTY_QUESTION_SENTINEL
        return UNEXPECTED_ERROR_SENTINEL


class Outcome(BaseModel):
    """Either a text value or a failure."""

    value: str | None = None
    failure: Failure | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def success(cls, value: str) -> "Outcome":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: FailureKind, message: str = "") -> "Outcome":
        return cls(failure=Failure(kind=kind, message=message))

    @property
    def ok(self) -> bool:
        return self.failure is None

    def render(self) -> str:
        """Plain string form: the value, or the failure's sentinel."""
        if self.failure is not None:
            return self.failure.to_sentinel()
        return self.value or ""


def is_valid_answer(text: str | None) -> bool:
    """False for missing text or text carrying a failure sentinel prefix."""
    return text is not None and not text.startswith(INVALID_ANSWER_PREFIXES)


class PromptContext(BaseModel):
    """Everything the query and answer prompts are built from."""

    question: str = Field(..., description="Natural-language question")
    dialect: str = Field(..., description="Dialect label, e.g. 'PostgreSQL'")
    tables: list[TableInfo] = Field(default_factory=list, description="Tables in scope")
    current_date: date = Field(default_factory=date.today, description="Date for relative questions")
    transaction_types: list[Any] = Field(
        default_factory=list, description="Distinct transactions.transaction_type values"
    )
    query: str | None = Field(None, description="Generated query (answer prompt only)")
    result: str | None = Field(None, description="Serialized query result (answer prompt only)")

    @property
    def is_final_answer(self) -> bool:
        return self.query is not None and self.result is not None


class PotentiallyUnsafeQuery(Exception):
    """Generated SQL contains a data-mutating statement."""

    def __init__(self, query: str, reason: str = "forbidden keyword"):
        self.query = query
        self.reason = reason
        super().__init__(f"Query is potentially unsafe ({reason}): {query}")

    @classmethod
    def from_query(cls, query: str, reason: str = "forbidden keyword") -> "PotentiallyUnsafeQuery":
        return cls(query, reason)
