"""
Completion request and response models.

A request is a short chat transcript plus the three sampling knobs the
oracle varies per call: temperature, token budget and stop sequence.
Anything unset falls back to the provider's configured defaults.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, NonNegativeInt

FinishReason = Literal["stop", "length", "content_filter", "error"]


class LLMMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str = Field(..., min_length=1)


class LLMRequest(BaseModel):
    """One completion call."""

    messages: List[LLMMessage] = Field(..., min_length=1)
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0)
    # Empty stop sequences are dropped before reaching the provider.
    stop: Optional[str] = None

    @classmethod
    def from_prompt(
        cls,
        prompt: str,
        temperature: Optional[float] = None,
        stop: Optional[str] = None,
    ) -> "LLMRequest":
        """Wrap a rendered prompt as a single user message."""
        return cls(
            messages=[LLMMessage(role="user", content=prompt)],
            temperature=temperature,
            stop=stop,
        )


class LLMUsage(BaseModel):
    prompt_tokens: NonNegativeInt
    completion_tokens: NonNegativeInt
    total_tokens: NonNegativeInt


class LLMResponse(BaseModel):
    """Completion text plus what the provider reported about producing it."""

    content: str
    model: str
    provider: str
    usage: Optional[LLMUsage] = None
    finish_reason: FinishReason = "stop"
