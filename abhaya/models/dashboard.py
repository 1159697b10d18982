"""
Dashboard response models - the render-ready payload for the authority map.
"""

from pydantic import BaseModel
from typing import List, Tuple

from abhaya.models.alert import EmergencyAlertResponse
from abhaya.models.incident import IncidentResponse


class RiskZone(BaseModel):
    lat: float
    lng: float
    count: int
    severity: str
    color: str
    radius_meters: float
    fill_opacity: float = 0.4


class MapView(BaseModel):
    center: Tuple[float, float]
    zoom: int


class DashboardResponse(BaseModel):
    map: MapView
    incidents: List[IncidentResponse]
    risk_zones: List[RiskZone]
    emergency_alerts: List[EmergencyAlertResponse]
