import uuid
from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
from kguardian.core.database import Base

STATUS_PENDING = "Pending"
STATUS_UNDER_INVESTIGATION = "Under Investigation"
STATUS_RESOLVED = "Resolved"

KNOWN_STATUSES = (STATUS_PENDING, STATUS_UNDER_INVESTIGATION, STATUS_RESOLVED)

def _new_id() -> str:
    return str(uuid.uuid4())

class Incident(Base):
    __tablename__ = "incidents"

    id = Column(String(36), primary_key=True, index=True, default=_new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    incident_type = Column(String, nullable=False)
    location = Column(String, nullable=False)
    media_url = Column(String, nullable=True)
    status = Column(String, nullable=False, default=STATUS_PENDING)  # Pending, Under Investigation, Resolved
    reported_by = Column(String, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
