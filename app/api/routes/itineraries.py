import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, status

from app.api.deps import get_generator_factory, get_jobs_repo_factory
from app.api.models import ErrorResponse, ItineraryRequest, JobCreateResponse, JobStatusResponse
from app.config import Settings, get_settings
from app.core.cors import cors_headers
from app.services import jobs as job_service
from app.services.jobs import GeneratorFactory, JobsRepoFactory

router = APIRouter()
logger = logging.getLogger("app.api.routes.itineraries")

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post("/", status_code=status.HTTP_202_ACCEPTED, response_model=JobCreateResponse, responses=_ERROR_RESPONSES)
async def create_itinerary_job(  # noqa: B008
  request: ItineraryRequest,
  background_tasks: BackgroundTasks,
  settings: Settings = Depends(get_settings),  # noqa: B008
  repo_factory: JobsRepoFactory = Depends(get_jobs_repo_factory),  # noqa: B008
  generator_factory: GeneratorFactory = Depends(get_generator_factory),  # noqa: B008
) -> JobCreateResponse:
  """Accept an itinerary request and generate it after responding."""
  return await job_service.create_job(request, settings, background_tasks, repo_factory=repo_factory, generator_factory=generator_factory)


@router.get("/{job_id}", response_model=JobStatusResponse, responses={404: {"model": ErrorResponse}})
async def get_itinerary_job(  # noqa: B008
  job_id: str,
  repo_factory: JobsRepoFactory = Depends(get_jobs_repo_factory),  # noqa: B008
) -> JobStatusResponse:
  """Fetch the status and result of an itinerary job."""
  repo = await repo_factory()
  return await job_service.get_job_status(job_id, repo)


@router.options("/", include_in_schema=False)
@router.options("/{job_id}", include_in_schema=False)
async def itinerary_options(
  request: Request,
  settings: Settings = Depends(get_settings),  # noqa: B008
) -> Response:
  """Answer any OPTIONS request, preflight or not, with the CORS headers."""
  return Response(status_code=status.HTTP_200_OK, headers=cors_headers(settings, request.headers.get("origin")))
