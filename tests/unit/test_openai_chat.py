"""Unit tests for OpenAI error classification."""

from __future__ import annotations

import json

import httpx
import pytest

from app.ai.errors import FatalGenerationError, RetryableGenerationError
from app.ai.providers.openai_chat import OpenAIChatModel

BASE_URL = "https://llm.test/v1"


def _completion(content: str | None) -> dict:
  return {
    "id": "chatcmpl-test",
    "object": "chat.completion",
    "created": 0,
    "model": "gpt-4o",
    "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
  }


def _model(handler) -> OpenAIChatModel:
  http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
  return OpenAIChatModel("sk-test", base_url=BASE_URL, temperature=0.7, max_tokens=3000, http_client=http_client)


@pytest.mark.anyio
async def test_complete_sends_system_and_user_messages() -> None:
  captured: dict = {}

  def handler(request: httpx.Request) -> httpx.Response:
    captured["url"] = str(request.url)
    captured["auth"] = request.headers["Authorization"]
    captured["body"] = json.loads(request.content)
    return httpx.Response(200, json=_completion("  [ ]  "))

  content = await _model(handler).complete(system="be terse", prompt="plan Kyoto")

  assert content == "[ ]"
  assert captured["url"] == f"{BASE_URL}/chat/completions"
  assert captured["auth"] == "Bearer sk-test"
  assert captured["body"]["model"] == "gpt-4o"
  assert captured["body"]["temperature"] == 0.7
  assert captured["body"]["max_tokens"] == 3000
  assert captured["body"]["messages"] == [{"role": "system", "content": "be terse"}, {"role": "user", "content": "plan Kyoto"}]


@pytest.mark.anyio
@pytest.mark.parametrize("status_code", [429, 500, 503])
async def test_rate_limits_and_server_errors_are_retryable(status_code: int) -> None:
  model = _model(lambda request: httpx.Response(status_code, json={"error": {"message": "busy"}}))

  with pytest.raises(RetryableGenerationError, match=f"OpenAI service error: {status_code}"):
    await model.complete(system="s", prompt="p")


@pytest.mark.anyio
@pytest.mark.parametrize("status_code", [400, 401, 403])
async def test_client_errors_are_fatal_and_include_body(status_code: int) -> None:
  model = _model(lambda request: httpx.Response(status_code, json={"error": {"message": "bad key"}}))

  with pytest.raises(FatalGenerationError, match=f"OpenAI API error: {status_code} - .*bad key"):
    await model.complete(system="s", prompt="p")


@pytest.mark.anyio
async def test_connection_errors_are_retryable() -> None:
  def handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("unreachable", request=request)

  with pytest.raises(RetryableGenerationError, match="connection error"):
    await _model(handler).complete(system="s", prompt="p")


@pytest.mark.anyio
@pytest.mark.parametrize("content", [None, "   "])
async def test_empty_content_is_fatal(content: str | None) -> None:
  model = _model(lambda request: httpx.Response(200, json=_completion(content)))

  with pytest.raises(FatalGenerationError, match="Invalid response structure"):
    await model.complete(system="s", prompt="p")


def test_api_key_is_required() -> None:
  with pytest.raises(ValueError):
    OpenAIChatModel("")
