"""Unit tests for the completion client adapter."""

import httpx
import openai
import pytest

from askdb.models.oracle import FailureKind
from askdb.oracle.completion import CompletionClient


def _connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )


@pytest.mark.asyncio
async def test_returns_first_choice_content(scripted_provider):
    provider = scripted_provider("SELECT 1")
    client = CompletionClient(provider)

    outcome = await client.query_completion("prompt text", stop="\nSQLResult:", temperature=0.0)

    assert outcome.ok
    assert outcome.value == "SELECT 1"
    request = provider.requests[0]
    assert request.messages[0].role == "user"
    assert request.messages[0].content == "prompt text"
    assert request.stop == "\nSQLResult:"
    assert request.temperature == 0.0


@pytest.mark.asyncio
async def test_empty_stop_is_dropped(scripted_provider):
    provider = scripted_provider("ok")

    await CompletionClient(provider).query_completion("prompt", stop="", temperature=0.7)

    assert provider.requests[0].stop is None
    assert provider.requests[0].temperature == 0.7


@pytest.mark.asyncio
async def test_empty_content_is_success(scripted_provider):
    outcome = await CompletionClient(scripted_provider("")).query_completion("prompt")

    assert outcome.ok
    assert outcome.render() == ""


@pytest.mark.asyncio
async def test_api_error_becomes_service_failure(scripted_provider):
    outcome = await CompletionClient(scripted_provider(_connection_error())).query_completion(
        "prompt"
    )

    assert outcome.failure.kind == FailureKind.SERVICE
    assert outcome.render() == "Error processing request with OpenAI: Connection error."


@pytest.mark.asyncio
async def test_other_error_becomes_unexpected_failure(scripted_provider):
    outcome = await CompletionClient(scripted_provider(RuntimeError("boom"))).query_completion(
        "prompt"
    )

    assert outcome.failure.kind == FailureKind.UNEXPECTED
    assert outcome.failure.message == "boom"
    assert outcome.render() == "Error processing request."
