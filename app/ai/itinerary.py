"""Itinerary generation: prompt, completion, extraction, validation, retries."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from pydantic import ValidationError

from app.ai.backoff import retry_with_backoff
from app.ai.errors import RetryableGenerationError
from app.ai.json_parser import extract_json_array, parse_json_with_fallback
from app.ai.prompts import SYSTEM_INSTRUCTION, build_itinerary_prompt
from app.ai.providers.openai_chat import OpenAIChatModel
from app.config import Settings
from app.schema.itinerary import Day, validate_itinerary

logger = logging.getLogger(__name__)


class ChatModel(Protocol):
  """Text completion seam used by the generator."""

  async def complete(self, *, system: str, prompt: str) -> str:
    """Return the model's reply text."""


def parse_itinerary(content: str, *, expected_days: int | None = None) -> list[Day]:
  """Extract, parse and validate the itinerary embedded in model output.

  Every failure here means the model produced a bad answer, so all of them are
  raised as ``RetryableGenerationError``.
  """
  candidate = extract_json_array(content)
  if candidate is None:
    logger.error("Could not find JSON array in LLM response (length=%d)", len(content))
    raise RetryableGenerationError("LLM response did not contain a valid JSON array.")

  try:
    data = parse_json_with_fallback(candidate)
  except json.JSONDecodeError as exc:
    logger.error("Failed to parse extracted JSON: %s", exc)
    raise RetryableGenerationError("LLM returned invalid JSON format even after cleaning.") from exc

  try:
    days = validate_itinerary(data, expected_days=expected_days)
  except ValidationError as exc:
    logger.error("Itinerary validation failed: %s", exc)
    raise RetryableGenerationError(f"Generated itinerary doesn't match required format: {exc}") from exc

  logger.info("Itinerary validated successfully: %d days", len(days))
  return days


class ItineraryGenerator:
  """Generate validated itineraries, retrying malformed or transient failures."""

  def __init__(self, model: ChatModel, *, max_retries: int = 3, base_delay: float = 2.0, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
    self._model = model
    self._max_retries = max_retries
    self._base_delay = base_delay
    self._sleep = sleep

  async def generate(self, destination: str, duration_days: int) -> list[Day]:
    """Return ``duration_days`` validated days for ``destination``."""
    logger.info("Generating itinerary for: %s, %d days", destination, duration_days)
    prompt = build_itinerary_prompt(destination, duration_days)

    async def _attempt() -> list[Day]:
      content = await self._model.complete(system=SYSTEM_INSTRUCTION, prompt=prompt)
      return parse_itinerary(content, expected_days=duration_days)

    return await retry_with_backoff(_attempt, max_retries=self._max_retries, base_delay=self._base_delay, sleep=self._sleep)


def build_itinerary_generator(settings: Settings) -> ItineraryGenerator:
  """Build the generator configured for this deployment."""
  model = OpenAIChatModel(
    settings.openai_api_key or "", name=settings.openai_model, base_url=settings.openai_base_url, temperature=settings.generation_temperature, max_tokens=settings.generation_max_tokens
  )
  return ItineraryGenerator(model, max_retries=settings.generation_max_retries, base_delay=settings.generation_base_delay_seconds)
