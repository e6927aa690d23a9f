# odds_service/api.py

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime

import httpx
import structlog
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .core.exceptions import OddsServiceError
from .fetcher import OddsFetcher
from .logging_config import configure_logging
from .middleware.error_handler import UserFriendlyException
from .middleware.error_handler import service_exception_handler
from .middleware.error_handler import user_friendly_exception_handler
from .middleware.error_handler import validation_exception_handler
from .models import AlertsResponse
from .models import FetchRequest
from .models import FetchResponse
from .quality.anomaly_detector import AnomalyDetector
from .scheduler import OddsScrapingScheduler
from .sink import SqliteOddsSink
from .sync_service import OddsSyncService

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    log.info("Starting odds service.")

    http_client = httpx.AsyncClient(follow_redirects=True)
    fetcher = OddsFetcher(
        http_client=http_client,
        timeout=settings.HTTP_TIMEOUT,
        max_attempts=settings.HTTP_MAX_ATTEMPTS,
    )
    sync_service = OddsSyncService(
        fetcher=fetcher,
        sink=SqliteOddsSink(settings.DATABASE_PATH),
        detector=AnomalyDetector(),
    )
    scheduler = OddsScrapingScheduler(
        sync_service,
        target_urls=settings.TARGET_URLS,
        interval_seconds=settings.SCRAPE_INTERVAL_SECONDS,
    )
    app.state.sync_service = sync_service
    app.state.scheduler = scheduler

    scheduler_task = None
    if settings.SCHEDULER_ENABLED and settings.TARGET_URLS:
        scheduler_task = asyncio.create_task(scheduler.run_forever())
        log.info("Background scheduler started.", url_count=len(settings.TARGET_URLS))

    yield

    # --- Shutdown Sequence ---
    log.info("Server shutdown sequence initiated.")
    if scheduler_task is not None:
        scheduler.stop()
        await scheduler_task
    await http_client.aclose()
    log.info("Server shutdown sequence complete.")


app = FastAPI(
    title="OddsAlchemist API",
    version="1.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(UserFriendlyException, user_friendly_exception_handler)
app.add_exception_handler(OddsServiceError, service_exception_handler)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


def get_sync_service(request: Request) -> OddsSyncService:
    return request.app.state.sync_service


@app.get("/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now().isoformat()}


@app.post("/api/odds/fetch", response_model=FetchResponse)
async def fetch_odds(payload: FetchRequest, service: OddsSyncService = Depends(get_sync_service)):
    url = str(payload.url)
    log.info("Fetch requested by client", url=url)
    try:
        saved_count = await service.fetch_and_save_odds(url, require_rows=True)
    except OddsServiceError as e:
        raise UserFriendlyException.from_service_error(e)

    return FetchResponse(message=f"Saved {saved_count} odds rows.", saved_count=saved_count)


@app.get("/api/odds/alerts", response_model=AlertsResponse)
async def get_latest_alerts(service: OddsSyncService = Depends(get_sync_service)):
    return AlertsResponse(alerts=service.detector.get_latest_alerts())
