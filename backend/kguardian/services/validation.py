"""
Field rules for incident reports and evidence uploads.

Report fields are checked in the order the form shows them; ``focus`` names
the first one that failed so the client can move the cursor there.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from fastapi import status

from kguardian.core.exceptions import MediaRejected, ReportValidationError
from kguardian.schemas.incident import INCIDENT_TYPES, LOCATIONS

MIN_TITLE_LENGTH = 5
MIN_DESCRIPTION_LENGTH = 20
MAX_MEDIA_BYTES = 10 * 1024 * 1024
ALLOWED_MEDIA_PREFIXES = ("image/", "video/")


@dataclass
class ReportValidation:
    errors: Dict[str, str] = field(default_factory=dict)
    focus: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, name: str, message: str) -> None:
        self.errors[name] = message
        if self.focus is None:
            self.focus = name


def validate_report(title: Optional[str], description: Optional[str], incident_type: Optional[str],
                    location: Optional[str]) -> ReportValidation:
    result = ReportValidation()

    if len((title or "").strip()) < MIN_TITLE_LENGTH:
        result.add("title", "Title must be at least 5 characters long")

    if len((description or "").strip()) < MIN_DESCRIPTION_LENGTH:
        result.add("description", "Please provide more details (at least 20 characters)")

    if not incident_type:
        result.add("incident_type", "Please select an incident type")
    elif incident_type not in INCIDENT_TYPES:
        result.add("incident_type", "Unknown incident type")

    if not location:
        result.add("location", "Please select a location")
    elif location not in LOCATIONS:
        result.add("location", "Unknown location")

    return result


def ensure_valid_report(title: Optional[str], description: Optional[str], incident_type: Optional[str],
                        location: Optional[str]) -> None:
    """Raise ReportValidationError carrying every failing field."""
    result = validate_report(title, description, incident_type, location)
    if not result.is_valid:
        raise ReportValidationError(result.errors, result.focus)


def validate_media(content_type: Optional[str], size: int) -> None:
    if not content_type or not content_type.startswith(ALLOWED_MEDIA_PREFIXES):
        raise MediaRejected(
            "Unsupported file type. Please upload an image or video.",
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        )
    if size > MAX_MEDIA_BYTES:
        raise MediaRejected("File is too large. Maximum size is 10MB.", 413)
