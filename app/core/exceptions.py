import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.core.cors import cors_headers
from app.core.credentials import CredentialError
from app.core.env_contract import EnvContractError
from app.storage.firestore_client import StoreError

logger = logging.getLogger("uvicorn.error")

# Core errors whose messages are diagnostics the caller may see.
EXPOSED_ERRORS: tuple[type[Exception], ...] = (StoreError, CredentialError, EnvContractError)


def _error_payload(error: str, *, details: str | None = None, request_id: str | None = None) -> dict[str, Any]:
  """Build the ``{error, details?}`` body shared by every failure response."""
  payload: dict[str, Any] = {"error": error}
  if details:
    payload["details"] = details
  # Attach a request id so support can correlate client reports to server logs.
  if request_id:
    payload["requestId"] = request_id
  return payload


def _format_location(loc: Any) -> str:
  # Drop the leading "body" segment so messages name the payload field.
  parts = [str(part) for part in (loc or ()) if part != "body"]
  return ".".join(parts) or "body"


def format_validation_errors(errors: list[dict[str, Any]]) -> str:
  """Render pydantic errors as ``field: message`` pairs without echoing input values."""
  return ", ".join(f"{_format_location(error.get('loc'))}: {error.get('msg', 'invalid value')}" for error in errors)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
  """Answer invalid request bodies with 400; no job is created."""
  request_id = getattr(request.state, "request_id", None)
  errors = list(exc.errors())
  if any(error.get("type") == "json_invalid" for error in errors):
    logger.warning("Invalid JSON body request_id=%s path=%s", request_id, request.url.path)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_payload("Invalid JSON in request body", request_id=request_id))

  message = format_validation_errors(errors)
  logger.warning("Request validation failed request_id=%s path=%s errors=%s", request_id, request.url.path, message)
  return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_payload(f"Invalid request: {message}", request_id=request_id))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
  """Render HTTPExceptions (404, 405, ...) in the shared error shape."""
  from app.config import get_settings

  settings = get_settings()
  request_id = getattr(request.state, "request_id", None)
  if exc.status_code >= 500:
    logger.error("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=_error_payload("Internal server error occurred", request_id=request_id))

  if settings.log_http_4xx:
    logger.warning("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail)

  return JSONResponse(status_code=exc.status_code, content=_error_payload(str(exc.detail), request_id=request_id), headers=getattr(exc, "headers", None))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Global exception handler to catch unhandled errors."""
  from app.config import get_settings

  settings = get_settings()
  request_id = getattr(request.state, "request_id", None)
  logger.error("Global exception request_id=%s path=%s error_type=%s", request_id, request.url.path, type(exc).__name__, exc_info=True)
  # Only known core errors carry messages meant for callers; anything else stays opaque outside debug.
  details = str(exc) if isinstance(exc, EXPOSED_ERRORS) or settings.debug else None
  # This response is built outside the CORS middleware, so it carries the headers itself.
  headers = cors_headers(settings, request.headers.get("origin"))
  return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_payload("Internal server error occurred", details=details, request_id=request_id), headers=headers)
