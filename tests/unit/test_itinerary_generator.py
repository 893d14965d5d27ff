"""Unit tests for itinerary parsing and the retrying generator."""

from __future__ import annotations

import pytest

from app.ai.errors import FatalGenerationError, RetryableGenerationError
from app.ai.itinerary import ItineraryGenerator, build_itinerary_generator, parse_itinerary
from app.ai.prompts import SYSTEM_INSTRUCTION
from tests.support import RecordingSleep, ScriptedChatModel, itinerary_reply


def test_parse_itinerary_accepts_fenced_reply() -> None:
  days = parse_itinerary(itinerary_reply(4), expected_days=4)
  assert [day.day for day in days] == [1, 2, 3, 4]


@pytest.mark.parametrize(
  ("content", "message"),
  [
    ("Sorry, I cannot help with that.", "did not contain a valid JSON array"),
    ("[{day: 1}]", "invalid JSON format"),
    ('[{"day": 1, "theme": "x", "activities": []}]', "doesn't match required format"),
  ],
)
def test_parse_itinerary_failures_are_retryable(content: str, message: str) -> None:
  with pytest.raises(RetryableGenerationError, match=message):
    parse_itinerary(content)


def test_parse_itinerary_rejects_wrong_day_count() -> None:
  with pytest.raises(RetryableGenerationError, match="Expected 4 days"):
    parse_itinerary(itinerary_reply(3), expected_days=4)


@pytest.mark.anyio
async def test_generate_sends_prompt_for_destination() -> None:
  model = ScriptedChatModel([itinerary_reply(2, "Lisbon")])

  days = await ItineraryGenerator(model, sleep=RecordingSleep()).generate("Lisbon", 2)

  assert len(days) == 2
  assert model.calls[0]["system"] == SYSTEM_INSTRUCTION
  assert "2-day travel itinerary for Lisbon" in model.calls[0]["prompt"]


@pytest.mark.anyio
async def test_generate_retries_malformed_output() -> None:
  model = ScriptedChatModel(["no json", "[1, 2,", itinerary_reply(3)])
  sleep = RecordingSleep()

  days = await ItineraryGenerator(model, max_retries=3, base_delay=2.0, sleep=sleep).generate("Kyoto", 3)

  assert len(days) == 3
  assert len(model.calls) == 3
  assert sleep.delays == [2.0, 4.0]


@pytest.mark.anyio
async def test_generate_gives_up_after_budget() -> None:
  model = ScriptedChatModel([RetryableGenerationError("OpenAI service error: 503")])
  sleep = RecordingSleep()

  with pytest.raises(RetryableGenerationError, match="503"):
    await ItineraryGenerator(model, max_retries=2, base_delay=1.0, sleep=sleep).generate("Kyoto", 1)

  assert len(model.calls) == 3
  assert sleep.delays == [1.0, 2.0]


@pytest.mark.anyio
async def test_generate_does_not_retry_fatal_errors() -> None:
  model = ScriptedChatModel([FatalGenerationError("OpenAI API error: 401 - unauthorized")])

  with pytest.raises(FatalGenerationError):
    await ItineraryGenerator(model, sleep=RecordingSleep()).generate("Kyoto", 1)

  assert len(model.calls) == 1


def test_build_itinerary_generator_uses_settings(settings) -> None:
  generator = build_itinerary_generator(settings)
  assert generator._max_retries == settings.generation_max_retries
  assert generator._base_delay == settings.generation_base_delay_seconds
  assert generator._model.name == "gpt-4o"
