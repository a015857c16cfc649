"""
AskDB Models Module

Pydantic models shared across the oracle pipeline.

Available Models:
    - PromptContext: Inputs for query and answer prompts
    - Outcome / Failure / FailureKind: Internal result type
    - PotentiallyUnsafeQuery: Raised by the safety gate
"""

from askdb.models.oracle import (
    EMPTY_QUESTION_SENTINEL,
    SERVICE_ERROR_PREFIX,
    UNEXPECTED_ERROR_SENTINEL,
    UNSAFE_QUERY_SENTINEL,
    Failure,
    FailureKind,
    Outcome,
    PotentiallyUnsafeQuery,
    PromptContext,
    is_valid_answer,
)

__all__ = [
    "PromptContext",
    "Outcome",
    "Failure",
    "FailureKind",
    "PotentiallyUnsafeQuery",
    "is_valid_answer",
    "SERVICE_ERROR_PREFIX",
    "UNEXPECTED_ERROR_SENTINEL",
    "EMPTY_QUESTION_SENTINEL",
    "UNSAFE_QUERY_SENTINEL",
]
