import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from kguardian.core.database import get_db
from kguardian.core.events import IncidentPublisher, get_publisher
from kguardian.core.storage import MediaStorage, get_media_storage
from kguardian.models.incident import Incident, STATUS_PENDING
from kguardian.routers.auth import CurrentUser, get_current_user, get_optional_user
from kguardian.schemas.incident import (
    INCIDENT_TYPES,
    LOCATIONS,
    CategoryOption,
    IncidentCreate,
    IncidentCreated,
    IncidentListResponse,
    IncidentResponse,
    IncidentSummary,
    MediaUploadResponse,
    ReportOptions,
)
from kguardian.services.validation import MAX_MEDIA_BYTES, ensure_valid_report, validate_media

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/incidents",
    tags=["incidents"],
    responses={404: {"description": "Not found"}},
)

ALL_STATUSES = "All"

def failure_reason(error: SQLAlchemyError) -> str:
    # the driver message, without the statement and parameters SQLAlchemy appends
    return str(getattr(error, "orig", None) or error)

def describe_listing(count: int, status_filter: Optional[str], q: Optional[str]) -> str:
    noun = "incident" if count == 1 else "incidents"
    summary = f"Showing {count} {noun}"
    if status_filter:
        summary += f' with status "{status_filter}"'
    if q:
        summary += f' matching "{q}"'
    return summary

@router.get("/options", response_model=ReportOptions)
async def get_report_options():
    """Choices offered by the report form"""
    return ReportOptions(
        incident_types=[CategoryOption(value=value, label=label) for value, label in INCIDENT_TYPES.items()],
        locations=LOCATIONS,
        max_media_bytes=MAX_MEDIA_BYTES,
    )

@router.post("/", response_model=IncidentCreated, status_code=status.HTTP_201_CREATED)
async def create_incident(
    report: IncidentCreate,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
    publisher: IncidentPublisher = Depends(get_publisher),
):
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You must be logged in to report an incident.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    ensure_valid_report(report.title, report.description, report.incident_type, report.location)

    incident = Incident(
        title=report.title,
        description=report.description,
        incident_type=report.incident_type,
        location=report.location,
        media_url=report.media_url,
        status=STATUS_PENDING,
        reported_by=user.id,
    )
    try:
        db.add(incident)
        await db.commit()
        await db.refresh(incident)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error submitting report for %s: %s", user.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error submitting report: {failure_reason(e)}",
        )

    logger.info("Incident %s reported by %s", incident.id, user.id)
    await publisher.incident_reported(incident)

    return IncidentCreated(
        message="Incident reported successfully!",
        incident=IncidentResponse.model_validate(incident),
    )

@router.post("/media", response_model=MediaUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_user),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Upload one evidence photo or video; the returned URL goes into the report"""
    # one byte past the cap is enough to know the file is too large
    data = await file.read(MAX_MEDIA_BYTES + 1)
    validate_media(file.content_type, len(data))

    media_url = await storage.upload(file.filename, data, file.content_type)
    return MediaUploadResponse(
        media_url=media_url,
        filename=file.filename or "",
        size=len(data),
        content_type=file.content_type,
    )

@router.get("/", response_model=IncidentListResponse)
async def get_my_incidents(
    q: Optional[str] = Query(None, description="Case-insensitive match on title"),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Incidents reported by the current user, newest first"""
    if status_filter == ALL_STATUSES:
        status_filter = None

    query = select(
        Incident.id,
        Incident.title,
        Incident.incident_type,
        Incident.location,
        Incident.status,
        Incident.created_at,
    ).where(Incident.reported_by == current_user.id)
    if q:
        query = query.where(func.lower(Incident.title).contains(q.lower(), autoescape=True))
    if status_filter:
        query = query.where(Incident.status == status_filter)
    query = query.order_by(Incident.created_at.desc())

    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.error("Error fetching incidents for %s: %s", current_user.id, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load incidents",
        )
    incidents = [IncidentSummary.model_validate(row) for row in result.all()]

    return IncidentListResponse(
        count=len(incidents),
        summary=describe_listing(len(incidents), status_filter, q),
        incidents=incidents,
    )

@router.get("/{incident_id}", response_model=IncidentResponse)
async def get_incident(
    incident_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        result = await db.execute(select(Incident).where(Incident.id == incident_id))
    except SQLAlchemyError as e:
        logger.error("Error fetching incident %s: %s", incident_id, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load incident",
        )
    incident = result.scalar_one_or_none()
    if not incident:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Incident not found",
        )
    return incident
