import logging
import time
import uuid
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from starlette.responses import JSONResponse, Response

from jobsweep.config import get_settings

settings = get_settings()
if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        traces_sample_rate=0.1,
        environment=settings.environment or "production",
    )

from slowapi import _rate_limit_exceeded_handler  # noqa: E402
from slowapi.errors import RateLimitExceeded  # noqa: E402

from jobsweep.database import get_db  # noqa: E402
from jobsweep.dependencies import limiter  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    from .scheduler import start_scheduler, stop_scheduler

    if settings.scheduler_enabled:
        start_scheduler()

    yield

    if settings.scheduler_enabled:
        stop_scheduler()


app = FastAPI(
    title="Job Cache Cleanup API",
    description="""
## Job Cache Cleanup

Garbage collection for the shared cache of scraped job postings:

- **Expired jobs** are deleted, along with their search links
- **Stale search terms** have their popularity counter reset
- **Orphaned search terms** (no linked jobs, not searched in 60 days) are deleted
- **Legacy cache** rows from `job_search_cache` are expired while it still exists
""",
    version="1.0.0",
    lifespan=lifespan,
    redirect_slashes=False,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    # Preflight is answered here, before routing, with no body.
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = str(uuid.uuid4())[:8]
    start_time = time.time()

    logger.info("[%s] %s %s", request_id, request.method, request.url.path)

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info("[%s] %d (%.2fs)", request_id, response.status_code, duration)

    response.headers["X-Request-ID"] = request_id
    return response


from .routers import cleanup  # noqa: E402

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(cleanup.router, tags=["Cleanup"])

app.include_router(api_v1)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    """Log unhandled exceptions and return a JSON 500."""
    if isinstance(exc, HTTPException):
        raise exc
    logger.exception("Unhandled exception: %s (path=%s)", exc, request.url.path)
    message = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(status_code=500, content={"message": message}, headers=CORS_HEADERS)


@app.get("/health", status_code=200)
async def health_check(db=Depends(get_db)):
    """
    Deep health check with database connectivity.

    **Response:** {status: "ok"|"degraded", checks: {database: "ok"|"error: ..."}}
    """
    from sqlalchemy import text

    health: dict = {"status": "ok", "checks": {}}

    try:
        await db.execute(text("SELECT 1"))
        health["checks"]["database"] = "ok"
    except Exception as e:
        health["checks"]["database"] = f"error: {e}"
        health["status"] = "degraded"

    return health
