"""
LLM Provider Module

Completion service abstraction used by the oracle.

Usage:
    from askdb.llm import LLMProviderFactory, LLMRequest
    from askdb.config import get_settings

    provider = LLMProviderFactory.create_provider(get_settings().llm)

    request = LLMRequest.from_prompt("Hello!", temperature=0.0)
    response = await provider.generate(request)
    print(response.content)
"""

from askdb.llm.base import BaseLLMProvider
from askdb.llm.factory import LLMProviderFactory
from askdb.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from askdb.llm.openai import OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    "LLMProviderFactory",
    "OpenAIProvider",
]
