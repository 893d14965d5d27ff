"""OpenAI chat completion client with retry classification."""

from __future__ import annotations

import logging
from typing import Final

import httpx
import openai
from openai import AsyncOpenAI

from app.ai.errors import FatalGenerationError, RetryableGenerationError

logger = logging.getLogger(__name__)


class OpenAIChatModel:
  """Chat completion model that maps upstream failures onto generation error kinds."""

  _DEFAULT_MODEL: Final[str] = "gpt-4o"

  def __init__(self, api_key: str, *, name: str | None = None, base_url: str | None = None, temperature: float = 0.7, max_tokens: int = 3000, http_client: httpx.AsyncClient | None = None) -> None:
    if not api_key:
      raise ValueError("OPENAI_API_KEY is required")

    self.name: str = name or self._DEFAULT_MODEL
    self.temperature = temperature
    self.max_tokens = max_tokens
    # The SDK's own retries are disabled so the backoff policy owns the attempt budget.
    self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0, http_client=http_client)

  async def complete(self, *, system: str, prompt: str) -> str:
    """Return the assistant text for one system+user exchange."""
    try:
      response = await self._client.chat.completions.create(
        model=self.name, messages=[{"role": "system", "content": system}, {"role": "user", "content": prompt}], temperature=self.temperature, max_tokens=self.max_tokens
      )
    except openai.APIStatusError as exc:
      status_code = exc.status_code
      body = exc.response.text
      logger.error("OpenAI API error status=%s body=%s", status_code, body)
      # Only rate limits and server errors are worth another attempt.
      if status_code == 429 or status_code >= 500:
        raise RetryableGenerationError(f"OpenAI service error: {status_code}") from exc
      raise FatalGenerationError(f"OpenAI API error: {status_code} - {body}") from exc
    except openai.APIConnectionError as exc:
      logger.warning("OpenAI connection failed: %s", exc)
      raise RetryableGenerationError(f"OpenAI connection error: {exc}") from exc

    choice = response.choices[0] if response.choices else None
    content = (choice.message.content or "").strip() if choice and choice.message else ""
    if not content:
      raise FatalGenerationError("Invalid response structure from OpenAI API")

    logger.info("OpenAI response received model=%s length=%d", self.name, len(content))
    if response.usage:
      logger.debug("OpenAI usage prompt_tokens=%s completion_tokens=%s", response.usage.prompt_tokens, response.usage.completion_tokens)
    return content
