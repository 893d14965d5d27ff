"""Retry logic with exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from app.ai.errors import ErrorKind, error_kind

T = TypeVar("T")
logger = logging.getLogger(__name__)


def is_retryable_error(exc: BaseException) -> bool:
  """Return True when the error declares itself retryable."""
  return error_kind(exc) is ErrorKind.RETRYABLE


async def retry_with_backoff(
  operation: Callable[[], Awaitable[T]],
  *,
  max_retries: int = 3,
  base_delay: float = 1.0,
  is_retryable: Callable[[BaseException], bool] = is_retryable_error,
  sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
  """
  Run an async operation, retrying retryable failures.

  Waits ``base_delay * 2**attempt`` seconds after failed attempt ``attempt``
  (counting from 0), so persistent retryable failure results in
  ``max_retries + 1`` calls. Non-retryable errors and the last retryable
  error propagate unchanged.
  """
  if max_retries < 0:
    raise ValueError("max_retries must be zero or a positive integer.")

  attempt = 0
  while True:
    try:
      return await operation()
    except Exception as exc:
      if not is_retryable(exc):
        raise

      if attempt >= max_retries:
        logger.error("Retry budget exhausted after %d attempts: %s", attempt + 1, exc)
        raise

      delay = base_delay * (2**attempt)
      logger.warning("Attempt %d/%d failed with retryable error, retrying in %.2fs: %s", attempt + 1, max_retries + 1, delay, exc)
      await sleep(delay)
      attempt += 1
