"""Domain models for asynchronous itinerary generation jobs."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any, Literal

JobStatus = Literal["processing", "completed", "failed"]
TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "failed"})


class InvalidJobTransitionError(RuntimeError):
  """Raised when a job that already reached a terminal state is transitioned again."""


def utc_now() -> datetime:
  return datetime.now(UTC)


@dataclass
class JobRecord:
  """Represents a background itinerary generation job.

  A job starts in ``processing`` and moves exactly once to ``completed`` or
  ``failed``. ``itinerary`` is set only when completed and ``error`` only when
  failed.
  """

  job_id: str
  destination: str
  duration_days: int
  created_at: datetime
  status: JobStatus = "processing"
  completed_at: datetime | None = None
  itinerary: list[dict[str, Any]] | None = None
  error: str | None = None

  @property
  def is_terminal(self) -> bool:
    return self.status in TERMINAL_STATUSES

  def _ensure_processing(self, target: JobStatus) -> None:
    if self.status != "processing":
      raise InvalidJobTransitionError(f"Job {self.job_id} cannot move from {self.status} to {target}")

  def complete(self, itinerary: list[dict[str, Any]], *, now: datetime | None = None) -> JobRecord:
    """Return the ``completed`` successor of this processing job."""
    self._ensure_processing("completed")
    return replace(self, status="completed", completed_at=now or utc_now(), itinerary=itinerary, error=None)

  def fail(self, error: str, *, now: datetime | None = None) -> JobRecord:
    """Return the ``failed`` successor of this processing job."""
    self._ensure_processing("failed")
    # Keep a non-empty diagnostic even for exceptions without a message.
    return replace(self, status="failed", completed_at=now or utc_now(), itinerary=None, error=error or "Unknown error")

  def terminal_fields(self) -> dict[str, Any]:
    """Return the document fields written by the terminal transition."""
    if self.status == "completed":
      return {"status": self.status, "completedAt": self.completed_at, "itinerary": self.itinerary, "error": None}
    if self.status == "failed":
      # Clear any itinerary a completion write may have left behind.
      return {"status": self.status, "completedAt": self.completed_at, "itinerary": None, "error": self.error}
    raise InvalidJobTransitionError(f"Job {self.job_id} is still {self.status}")

  def to_document(self) -> dict[str, Any]:
    """Return the full stored document for this job."""
    return {
      "status": self.status,
      "destination": self.destination,
      "durationDays": self.duration_days,
      "createdAt": self.created_at,
      "completedAt": self.completed_at,
      "itinerary": self.itinerary,
      "error": self.error,
    }

  @classmethod
  def from_document(cls, job_id: str, document: dict[str, Any]) -> JobRecord:
    """Build a record from decoded document fields."""
    status = document.get("status")
    if status not in {"processing", "completed", "failed"}:
      raise ValueError(f"Job {job_id} has unknown status {status!r}")
    created_at = document.get("createdAt")
    if not isinstance(created_at, datetime):
      raise ValueError(f"Job {job_id} is missing createdAt")
    destination = document.get("destination")
    if not isinstance(destination, str) or not destination:
      raise ValueError(f"Job {job_id} is missing destination")
    duration_days = document.get("durationDays")
    if isinstance(duration_days, bool) or not isinstance(duration_days, int) or duration_days <= 0:
      raise ValueError(f"Job {job_id} has invalid durationDays {duration_days!r}")
    return cls(
      job_id=job_id,
      destination=destination,
      duration_days=duration_days,
      created_at=created_at,
      status=status,
      completed_at=document.get("completedAt"),
      itinerary=document.get("itinerary"),
      error=document.get("error"),
    )
