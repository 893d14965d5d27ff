"""Error kinds for itinerary generation."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
  """Whether a failed generation attempt is worth repeating."""

  RETRYABLE = "retryable"
  FATAL = "fatal"


class GenerationError(RuntimeError):
  """Base class for generation failures; ``kind`` drives the retry policy."""

  kind: ErrorKind = ErrorKind.FATAL


class RetryableGenerationError(GenerationError):
  """Transient upstream failure or malformed model output."""

  kind = ErrorKind.RETRYABLE


class FatalGenerationError(GenerationError):
  """Authorization or permanent upstream failure."""

  kind = ErrorKind.FATAL


def error_kind(exc: BaseException) -> ErrorKind:
  """Return the declared kind of an error, treating unknown errors as fatal."""
  kind = getattr(exc, "kind", None)
  if isinstance(kind, ErrorKind):
    return kind
  return ErrorKind.FATAL
