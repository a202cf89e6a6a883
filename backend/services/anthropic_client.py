"""
Anthropic client.

Connects to Anthropic Messages API and returns the text of one complete
response. Usage stats of the most recent call are kept for reporting.
"""

from __future__ import annotations

import logging
from typing import Any

import anthropic

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Sends one-shot requests to Anthropic Messages API."""

    def __init__(self, api_key: str):
        """
        Initialize Anthropic client.

        Args:
            api_key: Anthropic API key
        """
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self._last_usage: dict[str, int] | None = None

    async def complete(
        self,
        messages: list[dict[str, Any]],
        system: str,
        model: str,
        max_tokens: int = 8192,
        temperature: float | None = None,
    ) -> str:
        """
        Run a single completion.

        Args:
            messages: Messages array for the conversation
            system: System prompt
            model: Model identifier
            max_tokens: Maximum tokens to generate
            temperature: Optional sampling temperature

        Returns:
            Concatenated text blocks of the response

        Raises:
            anthropic.APIError: on transport or API failure
        """
        kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "system": system,
            "messages": messages,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        message = await self.client.messages.create(**kwargs)

        usage = getattr(message, "usage", None)
        if usage is not None:
            self._last_usage = {
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            }
        logger.debug("Anthropic response: stop_reason=%s usage=%s", message.stop_reason, self._last_usage)

        return "".join(block.text for block in message.content if getattr(block, "type", None) == "text")

    async def get_usage_stats(self) -> dict[str, int] | None:
        """
        Get usage statistics from the most recent API call.

        Returns:
            Dictionary with token counts or None if not available
        """
        return self._last_usage
