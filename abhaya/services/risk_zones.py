"""
Risk zone clustering - flag high-risk areas from unresolved incident reports.

Greedy single-pass clustering:
- reports are visited in input order
- a report joins the FIRST existing cluster whose anchor is closer than the radius
- otherwise it anchors a new cluster at its own coordinates

DESIGN NOTES:
- Anchors are fixed at the first report of a cluster (never a recomputed centroid)
- First match wins, not nearest match, so the result depends on input order
- Reports missing latitude or longitude (None or "") are skipped, never an error
- Coordinates are not range-checked
- No resolution-state filtering: callers pass unresolved reports only
- Pure function: no I/O, no shared state, safe to call concurrently
"""

import math
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional

EARTH_RADIUS_METERS = 6371000
DEFAULT_RADIUS_METERS = 500

HIGH_RISK_MIN_COUNT = 5
MEDIUM_RISK_MIN_COUNT = 3

DistanceFn = Callable[[float, float, float, float], float]


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def _field(report: Any, name: str) -> Optional[Any]:
    """Read a field from a mapping, a Firestore snapshot or a plain object."""
    if isinstance(report, Mapping):
        return report.get(name)
    if hasattr(report, "to_dict"):
        return (report.to_dict() or {}).get(name)
    return getattr(report, name, None)


def _is_absent(value: Any) -> bool:
    # blank form fields arrive as ""
    return value is None or value == ""


def first_matching_cluster(
    clusters: List[Dict[str, Any]],
    latitude: float,
    longitude: float,
    radius_meters: float = DEFAULT_RADIUS_METERS,
    distance: DistanceFn = haversine_meters,
) -> Optional[Dict[str, Any]]:
    """
    Tie-break rule: return the first cluster (in list order) whose anchor is
    strictly closer than radius_meters, or None.

    Later clusters are not examined once a match is found, even if one of
    them is nearer.
    """
    for cluster in clusters:
        if distance(cluster["lat"], cluster["lng"], latitude, longitude) < radius_meters:
            return cluster
    return None


def cluster_reports(
    reports: Iterable[Any],
    radius_meters: float = DEFAULT_RADIUS_METERS,
    distance: DistanceFn = haversine_meters,
) -> List[Dict[str, Any]]:
    """
    Partition reports into proximity clusters.

    Args:
        reports: Ordered incident records (dicts or objects) with optional
            `latitude`/`longitude`. Other fields are ignored.
        radius_meters: Exclusive proximity radius around each anchor.
        distance: Distance function in meters (haversine by default).

    Returns:
        Clusters as {"lat", "lng", "count"} dicts, ordered by when their
        anchor was first encountered.
    """
    clusters: List[Dict[str, Any]] = []

    for report in reports:
        latitude = _field(report, "latitude")
        longitude = _field(report, "longitude")
        if _is_absent(latitude) or _is_absent(longitude):
            continue

        match = first_matching_cluster(clusters, latitude, longitude, radius_meters, distance)
        if match is not None:
            match["count"] += 1
        else:
            clusters.append({"lat": latitude, "lng": longitude, "count": 1})

    return clusters


def severity_tier(count: int) -> str:
    """Map a cluster's member count to "high", "medium" or "low"."""
    if count >= HIGH_RISK_MIN_COUNT:
        return "high"
    if count >= MEDIUM_RISK_MIN_COUNT:
        return "medium"
    return "low"
