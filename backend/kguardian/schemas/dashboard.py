from pydantic import BaseModel
from typing import List

from kguardian.schemas.incident import IncidentSummary, TimeRange

class ChartPoint(BaseModel):
    name: str
    value: int

class StatusSlice(ChartPoint):
    color: str
    percent: float

class TrendPoint(BaseModel):
    date: str  # YYYY-MM-DD, UTC
    count: int

class DashboardSummary(BaseModel):
    time_range: TimeRange
    total_incidents: int
    pending_incidents: int
    under_investigation_incidents: int
    resolved_incidents: int
    pending_percent: float
    under_investigation_percent: float
    resolved_percent: float
    status_breakdown: List[StatusSlice]
    type_distribution: List[ChartPoint]
    top_locations: List[ChartPoint]
    trend: List[TrendPoint]
    recent_incidents: List[IncidentSummary]
