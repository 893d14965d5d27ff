import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.env_contract import missing_runtime_env
from app.core.logging import _initialize_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging after uvicorn starts and report missing configuration."""
  from app.config import get_settings

  settings = get_settings()
  logger = logging.getLogger("app.core.lifespan")

  try:
    _initialize_logging(settings)
    logger.info("Startup complete - logging verified. environment=%s", settings.environment)
  except Exception:  # noqa: BLE001
    # Log initialization failures but allow the app to continue starting.
    logger.warning("Initial logging setup failed; continuing with default handlers.", exc_info=True)

  # Requests that need the missing keys fail with 500; the service itself still starts.
  missing = missing_runtime_env(settings)
  if missing:
    logger.error("Missing required environment variables: %s", ", ".join(missing))

  yield

  logger.info("Shutdown complete.")
