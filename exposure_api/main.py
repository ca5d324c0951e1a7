"""
Exposure Tracker - FastAPI Application

Query endpoints over the exposure core:
- Test snapshot listing
- Per-test chemicals, category classification, insights and summary
- Longitudinal compound / category series
- Category trends and banded exposure trends
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from exposure_api import __version__
from exposure_api.config import settings
from exposure_api.core.classification import ExposureLevel
from exposure_api.core.longitudinal import BandMode
from exposure_api.core.records import format_test_date
from exposure_api.models import (
    CategoryLongitudinalResponse,
    CompoundLongitudinalResponse,
    HealthResponse,
    InsightsResponse,
    SnapshotInfo,
)
from exposure_api.services import ExposureService
from exposure_api.utils import (
    ExposureTrackerError,
    NoSnapshotsError,
    SnapshotNotFoundError,
    get_logger,
    setup_logging,
)

setup_logging(settings.log_level, settings.log_file)
logger = get_logger(__name__)

START_TIME = datetime.now()

_exposure_service = ExposureService(config=settings)


def get_exposure_service() -> ExposureService:
    return _exposure_service


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.exposure_service = _exposure_service
    logger.info(f"Exposure Tracker API ready (data_dir={settings.data_dir})")
    yield
    logger.info("Exposure Tracker API shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title="Exposure Tracker API",
    description="Biomarker exposure classification and longitudinal trends across test snapshots",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Error Handling ----

_STATUS_FOR_ERROR = {
    NoSnapshotsError: 503,
    SnapshotNotFoundError: 404,
}


@app.exception_handler(ExposureTrackerError)
async def exposure_error_handler(request: Request, exc: ExposureTrackerError):
    status_code = _STATUS_FOR_ERROR.get(type(exc), 500)
    if status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.code} {exc.message}")
    else:
        logger.info(f"{request.url.path}: {exc.code} {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def _require(value: Optional[str], name: str) -> str:
    if value is None or not value.strip():
        raise HTTPException(status_code=400, detail=f"{name} name is required")
    return value


def _exposure_filter(value: Optional[str]) -> Optional[ExposureLevel]:
    """``all`` or no value means unfiltered; anything else must name a band."""
    if value is None or value.strip().lower() in ("", "all"):
        return None
    try:
        return ExposureLevel.from_filter(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown exposure filter: {value}")


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root(service: ExposureService = Depends(get_exposure_service)):
    """API root - health check."""
    tests = await service.list_tests()
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
        snapshots_available=len(tests),
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(service: ExposureService = Depends(get_exposure_service)):
    """Health check endpoint."""
    return await root(service)


@app.get("/api/v1/tests", response_model=List[SnapshotInfo], tags=["Tests"])
async def list_tests(service: ExposureService = Depends(get_exposure_service)):
    """Available test snapshots with raw and display dates."""
    tests = await service.list_tests()
    return [SnapshotInfo(**t.to_dict(), display_date=format_test_date(t.date)) for t in tests]


@app.get("/api/v1/chemicals", tags=["Chemicals"])
async def get_chemicals(
    test_id: Optional[int] = Query(None, alias="testId"),
    exposure: Optional[str] = Query(None),
    service: ExposureService = Depends(get_exposure_service),
):
    """Chemicals of one test with their individual classification, optionally filtered by band."""
    return await service.chemicals(test_id, _exposure_filter(exposure))


@app.get(
    "/api/v1/chemicals/longitudinal",
    response_model=CompoundLongitudinalResponse,
    tags=["Longitudinal"],
)
async def get_chemical_longitudinal(
    chemical: Optional[str] = Query(None),
    service: ExposureService = Depends(get_exposure_service),
):
    """One chemical across every test, gap-filled for tests that did not report it."""
    return await service.compound_longitudinal(_require(chemical, "Chemical"))


@app.get(
    "/api/v1/chemicals/longitudinal/category",
    response_model=CategoryLongitudinalResponse,
    tags=["Longitudinal"],
)
async def get_category_longitudinal(
    category: Optional[str] = Query(None),
    service: ExposureService = Depends(get_exposure_service),
):
    """Detection counts and mean percentile of one category across tests."""
    return await service.category_longitudinal(_require(category, "Category"))


@app.get("/api/v1/categories", tags=["Categories"])
async def get_categories(
    test_id: Optional[int] = Query(None, alias="testId"),
    service: ExposureService = Depends(get_exposure_service),
):
    """Stats and classification for every category of one test."""
    return await service.categories(test_id)


@app.get("/api/v1/categories/insights", response_model=InsightsResponse, tags=["Categories"])
async def get_insights(
    category: Optional[str] = Query(None),
    test_id: Optional[int] = Query(None, alias="testId"),
    service: ExposureService = Depends(get_exposure_service),
):
    """Insights for one category, or for the whole test when no category is given."""
    return await service.insights(category, test_id)


@app.get("/api/v1/summary", tags=["Summary"])
async def get_summary(
    test_id: Optional[int] = Query(None, alias="testId"),
    service: ExposureService = Depends(get_exposure_service),
):
    """Detection summary, exposure distribution and priority chemicals."""
    return await service.summary(test_id)


@app.get("/api/v1/trends", tags=["Trends"])
async def get_trends(
    test_id: Optional[int] = Query(None, alias="testId"),
    service: ExposureService = Depends(get_exposure_service),
):
    """Category detection trends since the previous test."""
    return await service.trends(test_id)


@app.get("/api/v1/trends/bands", tags=["Trends"])
async def get_trend_bands(
    mode: BandMode = Query(BandMode.OVERALL),
    periods: Optional[int] = Query(None, ge=1),
    service: ExposureService = Depends(get_exposure_service),
):
    """Low / Med / High exposure band per test."""
    return await service.trend_bands(mode, periods)
