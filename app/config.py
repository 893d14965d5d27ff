"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_ENV_FILE = Path(__file__).resolve().parents[1] / ".env"


def load_local_env(path: Path = DEFAULT_ENV_FILE) -> bool:
  """Load a local .env file for development; variables already set in the environment win."""
  return load_dotenv(path, override=False)


load_local_env()


@dataclass(frozen=True)
class Settings:
  """Typed settings for the itinerary service."""

  environment: str
  debug: bool
  allowed_origins: tuple[str, ...]
  log_dir: str | None
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  firebase_project_id: str | None
  firebase_service_account: str | None
  firebase_service_account_json_path: str | None
  firestore_emulator_host: str | None
  jobs_collection: str
  store_timeout_seconds: float
  openai_api_key: str | None
  openai_model: str
  openai_base_url: str | None
  generation_temperature: float
  generation_max_tokens: int
  generation_max_retries: int
  generation_base_delay_seconds: float

  def load_service_account(self) -> str | None:
    """Return the raw service-account JSON from the env value or the configured file."""
    if self.firebase_service_account:
      return self.firebase_service_account

    if not self.firebase_service_account_json_path:
      return None

    with open(self.firebase_service_account_json_path, encoding="utf-8") as handle:
      return handle.read()


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  # Default to a permissive origin list; the service is called from a static browser app.
  if not raw:
    return ("*",)

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("ITINERARY_ALLOWED_ORIGINS must include at least one origin.")

  return tuple(origins)


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _parse_positive_int(name: str, default: str) -> int:
  value = int(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive integer.")
  return value


def _parse_positive_float(name: str, default: str) -> float:
  value = float(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive number.")
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("ITINERARY_ENV", "development").lower()

  # Toggle verbose error output in non-production environments.
  debug = _parse_bool(os.getenv("ITINERARY_DEBUG"))

  log_max_bytes = _parse_positive_int("ITINERARY_LOG_MAX_BYTES", "5242880")  # 5MB default

  log_backup_count = int(os.getenv("ITINERARY_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("ITINERARY_LOG_BACKUP_COUNT must be zero or a positive integer.")

  # Allow opt-in logging of 4xx HTTPExceptions for diagnostics.
  log_http_4xx = _parse_bool(os.getenv("ITINERARY_LOG_HTTP_4XX"))

  temperature = float(os.getenv("ITINERARY_TEMPERATURE", "0.7"))
  if not 0 <= temperature <= 2:
    raise ValueError("ITINERARY_TEMPERATURE must be between 0 and 2.")

  # Retry budget counts re-attempts, so zero means a single call.
  max_retries = int(os.getenv("ITINERARY_MAX_RETRIES", "3"))
  if max_retries < 0:
    raise ValueError("ITINERARY_MAX_RETRIES must be zero or a positive integer.")

  return Settings(
    environment=environment,
    debug=debug,
    allowed_origins=_parse_origins(os.getenv("ITINERARY_ALLOWED_ORIGINS")),
    log_dir=_optional_str(os.getenv("ITINERARY_LOG_DIR")),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=log_http_4xx,
    firebase_project_id=_optional_str(os.getenv("FIREBASE_PROJECT_ID")),
    firebase_service_account=_optional_str(os.getenv("FIREBASE_SERVICE_ACCOUNT")),
    firebase_service_account_json_path=_optional_str(os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON_PATH")),
    firestore_emulator_host=_optional_str(os.getenv("FIRESTORE_EMULATOR_HOST")),
    jobs_collection=(os.getenv("ITINERARY_COLLECTION") or "itineraries").strip(),
    store_timeout_seconds=_parse_positive_float("ITINERARY_STORE_TIMEOUT_SECONDS", "30"),
    openai_api_key=_optional_str(os.getenv("OPENAI_API_KEY")),
    openai_model=(os.getenv("OPENAI_MODEL") or "gpt-4o").strip(),
    openai_base_url=_optional_str(os.getenv("OPENAI_BASE_URL")),
    generation_temperature=temperature,
    generation_max_tokens=_parse_positive_int("ITINERARY_MAX_TOKENS", "3000"),
    generation_max_retries=max_retries,
    generation_base_delay_seconds=_parse_positive_float("ITINERARY_RETRY_BASE_DELAY_SECONDS", "2.0"),
  )


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value
