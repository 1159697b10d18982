"""
Pydantic models for incident reports.

Stored documents keep the camelCase field names the map front end reads
(incidentType, incidentPlace, ...). Request models accept either spelling.
"""

from pydantic import BaseModel, Field
from typing import Any, Optional


class IncidentCreate(BaseModel):
    """
    Model for creating a new incident report (incoming POST request).
    Type, time, place and a selected location are all required.
    """
    incident_type: str = Field(..., alias="incidentType", min_length=1, max_length=100, description="Type of incident")
    incident_time: str = Field(..., alias="incidentTime", min_length=1, description="When it happened (datetime-local string)")
    incident_place: str = Field(..., alias="incidentPlace", min_length=1, max_length=200, description="Place description")
    additional_details: Optional[str] = Field("", alias="additionalDetails", max_length=2000)
    latitude: float = Field(..., ge=-90, le=90, description="Selected location latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Selected location longitude")
    image_url: Optional[str] = Field("", alias="imageUrl", description="Download URL of an already uploaded image")

    class Config:
        populate_by_name = True
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "incidentType": "Harassment",
                "incidentTime": "2025-03-01T21:15",
                "incidentPlace": "Charminar bus stop",
                "additionalDetails": "Group of men following women near the stop.",
                "latitude": 17.3616,
                "longitude": 78.4746,
                "imageUrl": "",
            }
        }


class IncidentResponse(BaseModel):
    """Incident as returned by the API (stored fields + id + display time)."""
    id: str
    userId: Optional[str] = None
    incidentType: Optional[str] = None
    incidentTime: Optional[str] = None
    incidentPlace: Optional[str] = None
    additionalDetails: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    imageUrl: Optional[str] = None
    timestamp: Optional[Any] = None
    resolved: bool = False
    displayTime: Optional[str] = None
