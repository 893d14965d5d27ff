"""CORS headers shared by the middleware, the OPTIONS route and error responses."""

from __future__ import annotations

from app.config import Settings

CORS_ALLOW_METHODS: tuple[str, ...] = ("GET", "POST", "OPTIONS")
CORS_ALLOW_HEADERS: tuple[str, ...] = ("Content-Type",)


def cors_headers(settings: Settings, origin: str | None = None) -> dict[str, str]:
  """Return the CORS headers for a response to ``origin``.

  A wildcard configuration answers every caller with ``*``. Otherwise only a
  listed origin is echoed back; anything else gets no allow-origin header.
  """
  headers = {"Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS), "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS)}
  if "*" in settings.allowed_origins:
    headers["Access-Control-Allow-Origin"] = "*"
  elif origin and origin in settings.allowed_origins:
    headers["Access-Control-Allow-Origin"] = origin
    headers["Vary"] = "Origin"
  return headers
