from pydantic import BaseModel, Field, computed_field
from typing import Dict, List, Optional
from datetime import datetime
from enum import Enum

# value -> label, in the order the report form lists them
INCIDENT_TYPES: Dict[str, str] = {
    "unauthorized-entry": "Unauthorized Entry",
    "suspicious-activity": "Suspicious Activity",
    "theft": "Theft",
    "physical-altercation": "Physical Altercation",
    "fire-incident": "Fire Incident",
    "road-accident": "Road Accident",
}

LOCATIONS: List[str] = [
    "Main Gate",
    "Library",
    "PGP Auditorium",
    "D Landing",
    "Phase V",
    "Hostel Block",
    "Academic Block",
    "H-Mess",
    "Sports Complex",
    "Faculty Area",
    "Parking Lot",
    "Other (not mentioned)",
]

class TimeRange(str, Enum):
    week = "week"
    month = "month"
    all = "all"

class IncidentCreate(BaseModel):
    # length and catalogue rules: services.validation.validate_report
    title: Optional[str] = None
    description: Optional[str] = None
    incident_type: Optional[str] = None
    location: Optional[str] = None
    media_url: Optional[str] = None

class IncidentSummary(BaseModel):
    id: str
    title: str
    incident_type: str
    location: str
    status: str
    created_at: datetime

    @computed_field
    @property
    def short_id(self) -> str:
        return self.id[:8]

    class Config:
        from_attributes = True

class IncidentResponse(IncidentSummary):
    description: str
    media_url: Optional[str]
    reported_by: str

class IncidentCreated(BaseModel):
    message: str
    incident: IncidentResponse

class IncidentListResponse(BaseModel):
    count: int
    summary: str
    incidents: List[IncidentSummary]

class MediaUploadResponse(BaseModel):
    media_url: str
    filename: str
    size: int
    content_type: str

class CategoryOption(BaseModel):
    value: str
    label: str

class ReportOptions(BaseModel):
    incident_types: List[CategoryOption]
    locations: List[str]
    max_media_bytes: int = Field(..., description="Largest accepted evidence file")
