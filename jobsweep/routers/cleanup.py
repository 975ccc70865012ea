"""Cleanup trigger endpoint."""
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from jobsweep.config import get_settings
from jobsweep.database import get_db
from jobsweep.dependencies import limiter
from jobsweep.schemas.cleanup import CleanupSummaryOut, ErrorOut
from jobsweep.services.sweep_service import run_sweep
from jobsweep.store import SweepStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cleanup"])


@router.api_route("/cleanup-jobs", methods=["GET", "POST"])
@limiter.limit(lambda: get_settings().cleanup_rate_limit)
async def cleanup_jobs(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Run one cleanup sweep over the job cache.

    **Response:** summary counts (camelCase) with `currentStats`, or `{message}` with 500
    when expired jobs could not be deleted.
    """
    settings = get_settings()
    outcome = await run_sweep(
        SweepStore(db, chunk_size=settings.orphan_batch_size),
        decay_after_days=settings.decay_after_days,
        orphan_after_days=settings.orphan_after_days,
    )
    if not outcome.ok:
        return JSONResponse(status_code=500, content=ErrorOut(message=outcome.error).model_dump())

    body = CleanupSummaryOut.from_summary(outcome.summary)
    return JSONResponse(content=body.model_dump(by_alias=True))
