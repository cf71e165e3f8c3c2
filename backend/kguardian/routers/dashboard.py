import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from kguardian.core.database import get_db
from kguardian.models.incident import Incident
from kguardian.routers.auth import CurrentUser, get_current_user
from kguardian.schemas.dashboard import DashboardSummary
from kguardian.schemas.incident import TimeRange
from kguardian.services.analytics import build_dashboard

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)

@router.get("/", response_model=DashboardSummary)
async def get_dashboard(
    time_range: TimeRange = Query(TimeRange.all, alias="range"),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Campus-wide analytics over every reported incident"""
    try:
        result = await db.execute(select(Incident))
    except SQLAlchemyError as e:
        logger.error("Error fetching incidents for dashboard: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load dashboard data",
        )
    incidents = result.scalars().all()
    return build_dashboard(incidents, time_range)
