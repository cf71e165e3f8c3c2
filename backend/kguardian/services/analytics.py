"""
Dashboard aggregation over a fetched snapshot of incidents.

Every function here is pure: it takes a sequence of objects exposing the
Incident attributes (ORM rows or schema instances) and returns chart-ready
data. Nothing is cached; the dashboard is re-derived on each request.
"""

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from kguardian.models.incident import (
    KNOWN_STATUSES,
    STATUS_PENDING,
    STATUS_RESOLVED,
    STATUS_UNDER_INVESTIGATION,
)
from kguardian.schemas.dashboard import ChartPoint, DashboardSummary, StatusSlice, TrendPoint
from kguardian.schemas.incident import IncidentSummary, TimeRange

STATUS_COLORS = {
    STATUS_PENDING: "#FBBF24",
    STATUS_UNDER_INVESTIGATION: "#38BDF8",
    STATUS_RESOLVED: "#34D399",
}

TOP_LOCATIONS_LIMIT = 5
RECENT_INCIDENTS_LIMIT = 5

RANGE_WINDOWS = {
    TimeRange.week: timedelta(days=7),
    TimeRange.month: timedelta(days=30),
}


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; the store writes them in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def percentage(part: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(part / total * 100, 1)


def count_statuses(incidents: Iterable) -> Dict[str, int]:
    counts = {name: 0 for name in KNOWN_STATUSES}
    for incident in incidents:
        if incident.status in counts:
            counts[incident.status] += 1
    return counts


def status_breakdown(incidents: Sequence) -> List[StatusSlice]:
    """Pie slices for the recognised statuses; empty slices are dropped."""
    total = len(incidents)
    counts = count_statuses(incidents)
    return [
        StatusSlice(
            name=name,
            value=counts[name],
            color=STATUS_COLORS[name],
            percent=percentage(counts[name], total),
        )
        for name in KNOWN_STATUSES
        if counts[name] > 0
    ]


def type_distribution(incidents: Iterable) -> List[ChartPoint]:
    counts = Counter(incident.incident_type for incident in incidents)
    return [ChartPoint(name=name, value=value) for name, value in counts.items()]


def top_locations(incidents: Iterable, limit: int = TOP_LOCATIONS_LIMIT) -> List[ChartPoint]:
    counts = Counter(incident.location for incident in incidents)
    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [ChartPoint(name=name, value=value) for name, value in ranked[:limit]]


def filter_by_range(incidents: Iterable, time_range: TimeRange, now: Optional[datetime] = None) -> list:
    time_range = TimeRange(time_range)
    if time_range == TimeRange.all:
        return list(incidents)

    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    cutoff = now - RANGE_WINDOWS[time_range]
    return [incident for incident in incidents if as_utc(incident.created_at) >= cutoff]


def trend_series(incidents: Iterable) -> List[TrendPoint]:
    counts = Counter(as_utc(incident.created_at).date().isoformat() for incident in incidents)
    return [TrendPoint(date=day, count=counts[day]) for day in sorted(counts)]


def recent_incidents(incidents: Iterable, limit: int = RECENT_INCIDENTS_LIMIT) -> List[IncidentSummary]:
    newest = sorted(incidents, key=lambda incident: as_utc(incident.created_at), reverse=True)
    return [IncidentSummary.model_validate(incident) for incident in newest[:limit]]


def build_dashboard(incidents: Sequence, time_range: TimeRange = TimeRange.all,
                    now: Optional[datetime] = None) -> DashboardSummary:
    """
    Assemble every dashboard dataset from one snapshot.

    Only the trend series is restricted to ``time_range``; the counters and
    breakdowns always describe the whole snapshot.
    """
    incidents = list(incidents)
    total = len(incidents)
    counts = count_statuses(incidents)

    return DashboardSummary(
        time_range=TimeRange(time_range),
        total_incidents=total,
        pending_incidents=counts[STATUS_PENDING],
        under_investigation_incidents=counts[STATUS_UNDER_INVESTIGATION],
        resolved_incidents=counts[STATUS_RESOLVED],
        pending_percent=percentage(counts[STATUS_PENDING], total),
        under_investigation_percent=percentage(counts[STATUS_UNDER_INVESTIGATION], total),
        resolved_percent=percentage(counts[STATUS_RESOLVED], total),
        status_breakdown=status_breakdown(incidents),
        type_distribution=type_distribution(incidents),
        top_locations=top_locations(incidents),
        trend=trend_series(filter_by_range(incidents, time_range, now)),
        recent_incidents=recent_incidents(incidents),
    )
