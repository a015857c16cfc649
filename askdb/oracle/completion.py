"""
Completion client adapter.

Wraps a single request to the completion provider and translates every
failure into an ``Outcome`` instead of an exception.
"""

import logging

import openai

from askdb.llm.base import BaseLLMProvider
from askdb.llm.models import LLMRequest
from askdb.models.oracle import FailureKind, Outcome

logger = logging.getLogger(__name__)


class CompletionClient:
    """Single-turn completion requests with uniform error translation."""

    def __init__(self, provider: BaseLLMProvider):
        self.provider = provider

    async def query_completion(
        self,
        prompt: str,
        stop: str | None = None,
        temperature: float = 0.0,
    ) -> Outcome:
        """
        Send ``prompt`` as one user message.

        Args:
            prompt: Full prompt text
            stop: Optional stop sequence (dropped from the request when empty)
            temperature: Sampling temperature

        Returns:
            Outcome with the first choice's content, or a failure of kind
            ``service`` (provider API error) or ``unexpected``.
        """
        request = LLMRequest.from_prompt(prompt, temperature=temperature, stop=stop or None)

        try:
            response = await self.provider.generate(request)
        except openai.APIError as e:
            logger.error(
                "Completion service error",
                extra={"error": str(e), "code": getattr(e, "code", None)},
            )
            return Outcome.fail(FailureKind.SERVICE, str(e))
        except Exception as e:
            logger.error(
                "Completion request failed unexpectedly",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return Outcome.fail(FailureKind.UNEXPECTED, str(e))

        return Outcome.success(response.content or "")
