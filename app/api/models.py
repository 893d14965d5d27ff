from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from app.jobs.models import JobRecord, JobStatus
from app.schema.itinerary import Day

MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 30


class ItineraryRequest(BaseModel):
  """Request payload for itinerary generation."""

  destination: StrictStr = Field(min_length=1, description="Travel destination.", examples=["Kyoto, Japan"])
  duration_days: StrictInt = Field(alias="durationDays", ge=MIN_DURATION_DAYS, le=MAX_DURATION_DAYS, description="Trip length in days (1-30).", examples=[4])
  model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

  @field_validator("duration_days", mode="before")
  @classmethod
  def accept_whole_number_floats(cls, value: Any) -> Any:
    # JSON clients may send 4.0; strings, booleans and fractions still fail strict validation.
    if isinstance(value, float) and value.is_integer():
      return int(value)
    return value


class JobCreateResponse(BaseModel):
  """Response returned when a job is accepted."""

  job_id: str = Field(alias="jobId")
  model_config = ConfigDict(populate_by_name=True)


class JobStatusResponse(BaseModel):
  """Current state of an itinerary job."""

  job_id: str = Field(alias="jobId")
  status: JobStatus
  destination: str
  duration_days: int = Field(alias="durationDays")
  created_at: datetime = Field(alias="createdAt")
  completed_at: datetime | None = Field(default=None, alias="completedAt")
  itinerary: list[Day] | None = None
  error: str | None = None
  model_config = ConfigDict(populate_by_name=True)

  @classmethod
  def from_record(cls, record: JobRecord) -> JobStatusResponse:
    return cls(
      job_id=record.job_id,
      status=record.status,
      destination=record.destination,
      duration_days=record.duration_days,
      created_at=record.created_at,
      completed_at=record.completed_at,
      itinerary=record.itinerary,
      error=record.error,
    )


class ErrorResponse(BaseModel):
  """Error body for every non-2xx response."""

  error: str
  details: str | None = None
  request_id: str | None = Field(default=None, alias="requestId")
  model_config = ConfigDict(populate_by_name=True)
