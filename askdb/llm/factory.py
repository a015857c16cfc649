"""
LLM Provider Factory

Creates the completion provider described by LLMSettings.
"""

import logging

from askdb.config import LLMSettings
from askdb.llm.base import BaseLLMProvider
from askdb.llm.openai import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """Factory for creating LLM provider instances."""

    @staticmethod
    def create_provider(config: LLMSettings) -> BaseLLMProvider:
        """
        Create the configured provider.

        Raises:
            ValueError: If the API key is not configured
        """
        if not config.openai_api_key:
            raise ValueError("OpenAI API key is required but not configured")

        logger.info(
            "Creating openai provider",
            extra={"model": config.openai_model, "base_url": config.openai_base_url},
        )

        return OpenAIProvider(
            api_key=config.openai_api_key,
            model=config.openai_model,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
            base_url=config.openai_base_url,
        )
