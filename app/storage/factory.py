from __future__ import annotations

import logging

from app.config import Settings
from app.core.credentials import get_access_token
from app.storage.firestore_client import EMULATOR_ACCESS_TOKEN, FirestoreClient, documents_base_url
from app.storage.jobs_repo import FirestoreJobsRepository, JobsRepository

logger = logging.getLogger(__name__)


async def build_firestore_client(settings: Settings) -> FirestoreClient:
  """Return a Firestore client holding a freshly exchanged access token."""
  if not settings.firebase_project_id:
    raise ValueError("FIREBASE_PROJECT_ID must be set to enable Firestore persistence.")

  # The emulator accepts any bearer token, so skip the exchange entirely.
  if settings.firestore_emulator_host:
    base_url = documents_base_url(settings.firebase_project_id, emulator_host=settings.firestore_emulator_host)
    logger.info("Using Firestore emulator at %s", settings.firestore_emulator_host)
    return FirestoreClient(settings.firebase_project_id, EMULATOR_ACCESS_TOKEN, base_url=base_url, timeout=settings.store_timeout_seconds)

  access_token = await get_access_token(settings.load_service_account(), timeout=settings.store_timeout_seconds)
  return FirestoreClient(settings.firebase_project_id, access_token, timeout=settings.store_timeout_seconds)


async def build_jobs_repo(settings: Settings) -> JobsRepository:
  """Return the active jobs repository, authenticated for one request."""
  client = await build_firestore_client(settings)
  return FirestoreJobsRepository(client, collection=settings.jobs_collection)
