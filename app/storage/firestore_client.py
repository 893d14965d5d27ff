"""Minimal Firestore REST client for document create/patch/get."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from app.storage.firestore_codec import decode_fields, encode_fields

logger = logging.getLogger(__name__)

FIRESTORE_API_ROOT = "https://firestore.googleapis.com/v1"
EMULATOR_ACCESS_TOKEN = "owner"

_SIMPLE_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*$")


class StoreError(RuntimeError):
  """Raised when the document store rejects a request."""

  def __init__(self, operation: str, status_code: int | None, body: str) -> None:
    self.operation = operation
    self.status_code = status_code
    self.body = body
    if status_code is None:
      super().__init__(f"Firestore {operation} error: {body}")
    else:
      super().__init__(f"Firestore {operation} error: {status_code} - {body}")


def documents_base_url(project_id: str, *, emulator_host: str | None = None) -> str:
  """Return the documents root for a project's default database."""
  root = f"http://{emulator_host}/v1" if emulator_host else FIRESTORE_API_ROOT
  return f"{root}/projects/{project_id}/databases/(default)/documents"


def field_path(name: str) -> str:
  """Quote a top-level field name for use in an update mask."""
  if _SIMPLE_FIELD_RE.match(name):
    return name
  escaped = name.replace("\\", "\\\\").replace("`", "\\`")
  return f"`{escaped}`"


class FirestoreClient:
  """Issue authenticated document requests against the Firestore REST API."""

  def __init__(self, project_id: str, access_token: str, *, base_url: str | None = None, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
    self.project_id = project_id
    self._access_token = access_token
    self.base_url = (base_url or documents_base_url(project_id)).rstrip("/")
    self._timeout = timeout
    self._transport = transport

  def _build_client(self) -> httpx.AsyncClient:
    headers = {"Authorization": f"Bearer {self._access_token}"}
    return httpx.AsyncClient(transport=self._transport, headers=headers, timeout=self._timeout, trust_env=False)

  def _document_url(self, collection: str, doc_id: str) -> str:
    return f"{self.base_url}/{quote(collection, safe='/')}/{quote(doc_id, safe='')}"

  async def _send(self, operation: str, method: str, url: str, *, params: list[tuple[str, str]] | None = None, json: dict[str, Any] | None = None) -> httpx.Response:
    try:
      async with self._build_client() as client:
        return await client.request(method, url, params=params, json=json)
    except httpx.RequestError as exc:
      logger.error("Firestore %s request failed: %s", operation, exc)
      raise StoreError(operation, None, str(exc)) from exc

  def _raise_for_status(self, operation: str, response: httpx.Response) -> None:
    if response.is_success:
      return
    logger.error("Firestore %s error status=%s body=%s", operation, response.status_code, response.text)
    raise StoreError(operation, response.status_code, response.text)

  async def create_document(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> dict[str, Any]:
    """Create a document with the given id; the store rejects an existing id with 409."""
    url = f"{self.base_url}/{quote(collection, safe='/')}"
    logger.info("Creating Firestore document: %s/%s", collection, doc_id)
    response = await self._send("create", "POST", url, params=[("documentId", doc_id)], json={"fields": encode_fields(fields)})
    self._raise_for_status("create", response)
    logger.info("Firestore document created: %s/%s", collection, doc_id)
    return response.json()

  async def update_document(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> dict[str, Any]:
    """Patch only the named fields of an existing document, leaving the rest untouched."""
    if not fields:
      raise ValueError("update_document requires at least one field.")

    # The mask names exactly the written keys; the precondition stops PATCH from upserting.
    params = [("updateMask.fieldPaths", field_path(key)) for key in fields]
    params.append(("currentDocument.exists", "true"))
    logger.info("Updating Firestore document: %s/%s fields=%s", collection, doc_id, ",".join(fields))
    response = await self._send("update", "PATCH", self._document_url(collection, doc_id), params=params, json={"fields": encode_fields(fields)})
    self._raise_for_status("update", response)
    logger.info("Firestore document updated: %s/%s", collection, doc_id)
    return response.json()

  async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
    """Return the decoded fields of a document, or None when it does not exist."""
    response = await self._send("get", "GET", self._document_url(collection, doc_id))
    if response.status_code == 404:
      return None
    self._raise_for_status("get", response)
    return decode_fields(response.json().get("fields"))
