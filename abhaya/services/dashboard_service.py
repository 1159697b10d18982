"""
Dashboard service - assemble the authority map payload.

Risk tier and colors are derived here, at render time; nothing derived is
written back to Firestore.
"""

from typing import Any, Dict, Iterable, List, Optional
import logging

from abhaya.core.settings import settings
from abhaya.services.alert_service import list_unresolved_alerts
from abhaya.services.incident_service import list_unresolved_incidents
from abhaya.services.risk_zones import cluster_reports, severity_tier

logger = logging.getLogger(__name__)

DEFAULT_MAP_CENTER = (17.3616, 78.4746)
DEFAULT_MAP_ZOOM = 12

SEVERITY_COLORS = {
    "high": "red",
    "medium": "orange",
    "low": "yellow",
}
RISK_ZONE_FILL_OPACITY = 0.4


def build_risk_zones(reports: Iterable[Any], radius_meters: Optional[float] = None) -> List[Dict[str, Any]]:
    """
    Cluster unresolved reports and decorate each cluster for the map overlay.
    """
    radius = radius_meters if radius_meters is not None else settings.RISK_ZONE_RADIUS_METERS

    zones = []
    for cluster in cluster_reports(reports, radius_meters=radius):
        severity = severity_tier(cluster["count"])
        zones.append({
            **cluster,
            "severity": severity,
            "color": SEVERITY_COLORS[severity],
            "radius_meters": radius,
            "fill_opacity": RISK_ZONE_FILL_OPACITY,
        })
    return zones


async def build_dashboard() -> Dict[str, Any]:
    incidents = await list_unresolved_incidents()
    risk_zones = build_risk_zones(incidents)
    alerts = await list_unresolved_alerts()

    high_count = sum(1 for zone in risk_zones if zone["severity"] == "high")
    logger.info(
        f"Dashboard built: {len(incidents)} incidents, {len(risk_zones)} risk zones "
        f"({high_count} high), {len(alerts)} emergency alerts"
    )

    return {
        "map": {"center": DEFAULT_MAP_CENTER, "zoom": DEFAULT_MAP_ZOOM},
        "incidents": incidents,
        "risk_zones": risk_zones,
        "emergency_alerts": alerts,
    }
