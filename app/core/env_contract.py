"""Runtime environment contract checks for the job path.

The service can boot without every secret (health checks, CORS preflight), but
creating a job needs the store and the model credentials. The same check runs
at startup, where it only logs, and before each job, where it fails the request.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from app.config import Settings


class EnvContractError(RuntimeError):
  """Raised when required runtime environment keys are missing or invalid."""

  def __init__(self, missing: list[str]) -> None:
    self.missing = missing
    super().__init__(f"Missing required environment variables: {', '.join(missing)}")


@dataclass(frozen=True)
class EnvVarDefinition:
  """Describe one required setting and how to tell whether it is satisfied."""

  name: str
  is_satisfied: Callable[[Settings], bool]


REQUIRED_ENV_REGISTRY: tuple[EnvVarDefinition, ...] = (
  EnvVarDefinition(name="FIREBASE_PROJECT_ID", is_satisfied=lambda s: bool(s.firebase_project_id)),
  # The emulator needs no credential; otherwise either the JSON or a path to it.
  EnvVarDefinition(name="FIREBASE_SERVICE_ACCOUNT", is_satisfied=lambda s: bool(s.firestore_emulator_host or s.firebase_service_account or s.firebase_service_account_json_path)),
  EnvVarDefinition(name="OPENAI_API_KEY", is_satisfied=lambda s: bool(s.openai_api_key)),
)


def missing_runtime_env(settings: Settings) -> list[str]:
  """Return the names of required settings that are not configured."""
  return [definition.name for definition in REQUIRED_ENV_REGISTRY if not definition.is_satisfied(settings)]


def validate_runtime_env_or_raise(settings: Settings, *, logger: logging.Logger | None = None) -> None:
  """Raise EnvContractError listing every missing setting."""
  missing = missing_runtime_env(settings)
  if not missing:
    return

  if logger is not None:
    logger.error("Environment contract failed; missing=%s", ",".join(missing))
  raise EnvContractError(missing)
