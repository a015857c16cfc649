"""
OpenAI LLM Provider

Implementation of BaseLLMProvider for OpenAI chat completions, and for
OpenAI-compatible servers reachable through ``base_url``.
"""

import logging

import openai
from openai import AsyncOpenAI

from askdb.llm.base import BaseLLMProvider
from askdb.llm.models import LLMRequest, LLMResponse, LLMUsage

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """
    OpenAI LLM provider implementation.

    Uses the official openai Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        temperature: float = 0.0,
        max_tokens: int = 250,
        timeout: int = 30,
        base_url: str | None = None,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            temperature: Default temperature
            max_tokens: Default max tokens
            timeout: Request timeout
            base_url: Optional endpoint override
        """
        super().__init__(
            provider_name="openai",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=float(timeout),
        )

    def build_params(self, request: LLMRequest) -> dict:
        """Translate a request into chat.completions.create keyword arguments."""
        params = {
            "model": self.model,
            "messages": [{"role": msg.role, "content": msg.content} for msg in request.messages],
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        # Empty stop sequences are never sent.
        if request.stop:
            params["stop"] = request.stop
        return params

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Generate completion using OpenAI API.

        Raises:
            openai.APIError: On API errors (including timeouts and connection errors)
        """
        request = self._apply_defaults(request)
        self._log_request(request)

        try:
            response = await self.client.chat.completions.create(**self.build_params(request))
        except openai.APITimeoutError as e:
            logger.error(f"OpenAI API timeout: {e}")
            raise
        except openai.APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        content = ""
        finish_reason = None
        if response.choices:
            choice = response.choices[0]
            message = getattr(choice, "message", None)
            content = (getattr(message, "content", None) or "") if message else ""
            finish_reason = choice.finish_reason

        usage = None
        if response.usage is not None:
            usage = LLMUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        llm_response = LLMResponse(
            content=content,
            model=response.model or self.model,
            usage=usage,
            finish_reason=self._map_finish_reason(finish_reason),
            provider="openai",
        )

        self._log_response(llm_response)
        return llm_response

    def _map_finish_reason(self, reason: str | None) -> str:
        """Map OpenAI finish reason to our standard format."""
        if reason in ("stop", "length", "content_filter"):
            return reason
        return "stop"
