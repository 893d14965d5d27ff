"""Shared FastAPI dependencies for the job store and the generator."""

from __future__ import annotations

from functools import partial

from fastapi import Depends

from app.ai.itinerary import build_itinerary_generator
from app.config import Settings, get_settings
from app.services.jobs import GeneratorFactory, JobsRepoFactory
from app.storage.factory import build_jobs_repo


def get_jobs_repo_factory(settings: Settings = Depends(get_settings)) -> JobsRepoFactory:  # noqa: B008
  """Return a factory that authenticates and builds a repository on demand."""
  return partial(build_jobs_repo, settings)


def get_generator_factory(settings: Settings = Depends(get_settings)) -> GeneratorFactory:  # noqa: B008
  return partial(build_itinerary_generator, settings)
