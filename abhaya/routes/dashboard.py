"""Dashboard routes - authority map payload.

Returns everything the map needs in one call: unresolved incident markers,
risk zone overlays (already tiered and colored) and emergency alerts.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from abhaya.models.dashboard import DashboardResponse, RiskZone
from abhaya.models.user import AuthenticatedUser
from abhaya.services.dashboard_service import build_dashboard, build_risk_zones
from abhaya.services.incident_service import list_unresolved_incidents
from abhaya.utils.security import require_authority

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def dashboard(_: AuthenticatedUser = Depends(require_authority)):
    try:
        return await build_dashboard()
    except Exception as e:
        logger.error(f"Error fetching dashboard data: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to load dashboard: {str(e)}")


@router.get("/risk-zones", response_model=List[RiskZone])
async def risk_zones(_: AuthenticatedUser = Depends(require_authority)):
    try:
        incidents = await list_unresolved_incidents()
        return build_risk_zones(incidents)
    except Exception as e:
        logger.error(f"Error computing risk zones: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to compute risk zones: {str(e)}")
