"""Health check endpoint with optional database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from stagefront.core.context import AppContext, get_context
from stagefront.core.database import check_db_connected, get_db
from stagefront.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def get_health(
    ctx: Annotated[AppContext, Depends(get_context)],
    db: Annotated[Session, Depends(get_db)],
) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    connected = await run_in_threadpool(check_db_connected, db)
    return HealthResponse(
        status="ok",
        environment=ctx.settings.APP_ENV,
        database="connected" if connected else "disconnected",
    )
