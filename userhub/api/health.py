"""Health check endpoint with database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from userhub.core.database import check_db_connected, get_db
from userhub.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> HealthResponse:
    """Return service status and whether the user store is reachable."""
    db_status = "connected" if check_db_connected(db) else "disconnected"
    return HealthResponse(
        environment=request.app.state.settings.APP_ENV,
        database=db_status,
    )
