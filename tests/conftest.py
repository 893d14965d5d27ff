"""Shared fixtures for settings and the in-memory job store."""

from __future__ import annotations

import pytest

from app.config import Settings
from app.storage.jobs_repo import FirestoreJobsRepository
from tests.support import PROJECT_ID, FakeFirestore


@pytest.fixture
def anyio_backend() -> str:
  return "asyncio"


@pytest.fixture
def settings() -> Settings:
  return Settings(
    environment="test",
    debug=False,
    allowed_origins=("*",),
    log_dir=None,
    log_max_bytes=5242880,
    log_backup_count=10,
    log_http_4xx=False,
    firebase_project_id=PROJECT_ID,
    firebase_service_account=None,
    firebase_service_account_json_path=None,
    firestore_emulator_host="localhost:8080",
    jobs_collection="itineraries",
    store_timeout_seconds=5.0,
    openai_api_key="sk-test",
    openai_model="gpt-4o",
    openai_base_url=None,
    generation_temperature=0.7,
    generation_max_tokens=3000,
    generation_max_retries=3,
    generation_base_delay_seconds=2.0,
  )


@pytest.fixture
def fake_firestore() -> FakeFirestore:
  return FakeFirestore()


@pytest.fixture
def jobs_repo(fake_firestore: FakeFirestore) -> FirestoreJobsRepository:
  return FirestoreJobsRepository(fake_firestore.client(), collection="itineraries")
