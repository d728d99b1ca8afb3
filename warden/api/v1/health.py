"""Health check endpoint; public, probes the user store."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from warden.core.config import settings
from warden.core.database import check_db_connected, get_db
from warden.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Used by load balancers; stays 200 so a store outage is reported, not hidden."""
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
    )
