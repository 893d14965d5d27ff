"""Job orchestration: create, run in the background, settle in a terminal state."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from fastapi import BackgroundTasks, HTTPException, status

from app.api.models import ItineraryRequest, JobCreateResponse, JobStatusResponse
from app.config import Settings
from app.core.env_contract import validate_runtime_env_or_raise
from app.jobs.models import JobRecord, utc_now
from app.schema.itinerary import Day, dump_itinerary
from app.storage.jobs_repo import JobsRepository
from app.utils.ids import generate_job_id

logger = logging.getLogger(__name__)

_JOB_NOT_FOUND_MSG = "Job not found."


class ItineraryGeneratorLike(Protocol):
  async def generate(self, destination: str, duration_days: int) -> list[Day]: ...


JobsRepoFactory = Callable[[], Awaitable[JobsRepository]]
GeneratorFactory = Callable[[], ItineraryGeneratorLike]


async def create_job(request: ItineraryRequest, settings: Settings, background_tasks: BackgroundTasks, *, repo_factory: JobsRepoFactory, generator_factory: GeneratorFactory) -> JobCreateResponse:
  """Persist a new ``processing`` job and schedule its generation after the response."""
  validate_runtime_env_or_raise(settings, logger=logger)

  job_id = generate_job_id()
  logger.info("Creating job %s for %s, %d days", job_id, request.destination, request.duration_days)

  # Build collaborators before writing so a misconfiguration never leaves an orphaned document.
  repo = await repo_factory()
  generator = generator_factory()

  record = JobRecord(job_id=job_id, destination=request.destination, duration_days=request.duration_days, created_at=utc_now())
  await repo.create_job(record)
  logger.info("Initial document created for job %s, starting background processing", job_id)

  background_tasks.add_task(process_job, record, repo, generator)
  return JobCreateResponse(job_id=job_id)


async def process_job(job: JobRecord, repo: JobsRepository, generator: ItineraryGeneratorLike) -> JobRecord:
  """Run generation for a job and record its terminal state.

  Never raises: generation or persistence failures become a ``failed`` job, and
  a failure to record even that is logged and dropped.
  """
  logger.info("Starting background processing for job %s", job.job_id)
  try:
    days = await generator.generate(job.destination, job.duration_days)
    completed = job.complete(dump_itinerary(days))
    await repo.update_job(job.job_id, completed.terminal_fields())
    logger.info("Job %s completed with %d days", job.job_id, len(days))
    return completed
  except Exception as exc:  # noqa: BLE001
    logger.error("Background processing failed for job %s: %s", job.job_id, exc, exc_info=True)
    message = str(exc) or type(exc).__name__

  try:
    failed = job.fail(message)
    await repo.update_job(job.job_id, failed.terminal_fields())
    logger.info("Error status recorded for job %s", job.job_id)
    return failed
  except Exception:  # noqa: BLE001
    # Nothing further can be escalated from a background task.
    logger.error("Failed to record error status for job %s", job.job_id, exc_info=True)
  return job


async def get_job_status(job_id: str, repo: JobsRepository) -> JobStatusResponse:
  """Fetch the current state of a job."""
  record = await repo.get_job(job_id)
  if record is None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_JOB_NOT_FOUND_MSG)
  return JobStatusResponse.from_record(record)
