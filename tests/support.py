"""Test doubles: an in-memory Firestore and a scripted chat model."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

import httpx

from app.storage.firestore_client import FirestoreClient, documents_base_url

PROJECT_ID = "test-project"


class FakeFirestore:
  """In-memory stand-in for the Firestore documents REST endpoints.

  Stores raw wire ``fields`` so the codec runs in both directions. Set
  ``fail_with`` to a ``{method: status}`` map to force errors.
  """

  def __init__(self) -> None:
    self.documents: dict[str, dict[str, Any]] = {}
    self.requests: list[httpx.Request] = []
    self.fail_with: dict[str, int] = {}

  def _doc_path(self, request: httpx.Request) -> str:
    return request.url.path.split("/documents", 1)[1].strip("/")

  def _document(self, path: str) -> dict[str, Any]:
    return {"name": f"projects/{PROJECT_ID}/databases/(default)/documents/{path}", "fields": self.documents[path]}

  def handler(self, request: httpx.Request) -> httpx.Response:
    self.requests.append(request)
    forced = self.fail_with.get(request.method)
    if forced is not None:
      return httpx.Response(forced, json={"error": {"code": forced, "message": "forced failure"}})

    path = self._doc_path(request)
    if request.method == "POST":
      doc_path = f"{path}/{request.url.params['documentId']}"
      if doc_path in self.documents:
        return httpx.Response(409, json={"error": {"code": 409, "status": "ALREADY_EXISTS"}})
      self.documents[doc_path] = json.loads(request.content)["fields"]
      return httpx.Response(200, json=self._document(doc_path))

    if path not in self.documents:
      return httpx.Response(404, json={"error": {"code": 404, "status": "NOT_FOUND"}})

    if request.method == "GET":
      return httpx.Response(200, json=self._document(path))

    if request.method == "PATCH":
      assert request.url.params.get("currentDocument.exists") == "true"
      body_fields = json.loads(request.content).get("fields", {})
      stored = self.documents[path]
      for field in request.url.params.get_list("updateMask.fieldPaths"):
        if field in body_fields:
          stored[field] = body_fields[field]
        else:
          stored.pop(field, None)
      return httpx.Response(200, json=self._document(path))

    return httpx.Response(405)

  def transport(self) -> httpx.MockTransport:
    return httpx.MockTransport(self.handler)

  def client(self) -> FirestoreClient:
    return FirestoreClient(PROJECT_ID, "test-token", base_url=documents_base_url(PROJECT_ID), transport=self.transport())


def make_itinerary(duration_days: int, destination: str = "Kyoto") -> list[dict[str, Any]]:
  return [
    {
      "day": number,
      "theme": f"{destination} day {number}",
      "activities": [
        {"time": "Morning", "description": f"Temple walk {number}", "location": f"{destination} east"},
        {"time": "Afternoon", "description": f"Market lunch {number}", "location": f"{destination} center"},
        {"time": "Evening", "description": f"Dinner {number}", "location": f"{destination} river"},
      ],
    }
    for number in range(1, duration_days + 1)
  ]


def itinerary_reply(duration_days: int, destination: str = "Kyoto") -> str:
  """Render a model reply wrapping the itinerary in a markdown fence."""
  return f"Here is your plan:\n```json\n{json.dumps(make_itinerary(duration_days, destination))}\n```"


class ScriptedChatModel:
  """Chat model returning queued replies; exceptions in the script are raised."""

  def __init__(self, script: Iterable[str | Exception]) -> None:
    self._script = list(script)
    self.calls: list[dict[str, str]] = []

  async def complete(self, *, system: str, prompt: str) -> str:
    self.calls.append({"system": system, "prompt": prompt})
    step = self._script.pop(0) if len(self._script) > 1 else self._script[0]
    if isinstance(step, Exception):
      raise step
    return step


class RecordingSleep:
  def __init__(self) -> None:
    self.delays: list[float] = []

  async def __call__(self, delay: float) -> None:
    self.delays.append(delay)
