"""Storage interfaces for itinerary jobs."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from app.jobs.models import JobRecord
from app.storage.firestore_client import FirestoreClient

logger = logging.getLogger(__name__)


class JobsRepository(Protocol):
  """Repository contract for job persistence."""

  async def create_job(self, record: JobRecord) -> None:
    """Persist an initial job record."""

  async def get_job(self, job_id: str) -> JobRecord | None:
    """Fetch a job by identifier."""

  async def update_job(self, job_id: str, fields: dict[str, Any]) -> None:
    """Apply a partial update naming only the changed document fields."""


class FirestoreJobsRepository:
  """Jobs stored as one Firestore document per job, keyed by job id."""

  def __init__(self, client: FirestoreClient, *, collection: str = "itineraries") -> None:
    self._client = client
    self.collection = collection

  async def create_job(self, record: JobRecord) -> None:
    await self._client.create_document(self.collection, record.job_id, record.to_document())

  async def get_job(self, job_id: str) -> JobRecord | None:
    document = await self._client.get_document(self.collection, job_id)
    if document is None:
      return None
    return JobRecord.from_document(job_id, document)

  async def update_job(self, job_id: str, fields: dict[str, Any]) -> None:
    await self._client.update_document(self.collection, job_id, fields)
