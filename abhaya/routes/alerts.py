"""
Emergency alert endpoints.

Raising an alert works with or without a session: the button lives on the
login screen. Listing and resolving are authority actions.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from abhaya.models.alert import EmergencyAlertCreate, EmergencyAlertReceipt, EmergencyAlertResponse
from abhaya.models.base import ResolveResponse
from abhaya.models.user import AuthenticatedUser
from abhaya.services.alert_service import list_unresolved_alerts, raise_emergency_alert
from abhaya.services.incident_service import EMERGENCY_ALERTS_COLLECTION, mark_resolved
from abhaya.utils.security import get_optional_user, require_authority

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["Emergency Alerts"])


@router.post("/emergency", status_code=status.HTTP_201_CREATED, response_model=EmergencyAlertReceipt)
async def emergency_alert(
    alert: EmergencyAlertCreate,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
):
    try:
        return await raise_emergency_alert(alert.latitude, alert.longitude, user)
    except Exception as e:
        logger.error(f"Error saving emergency alert: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to send emergency alert: {str(e)}",
        )


@router.get("", response_model=List[EmergencyAlertResponse])
async def get_unresolved_alerts(_: AuthenticatedUser = Depends(require_authority)):
    try:
        return await list_unresolved_alerts()
    except Exception as e:
        logger.error(f"Failed to retrieve emergency alerts: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve emergency alerts: {str(e)}",
        )


@router.patch("/{alert_id}/resolve", response_model=ResolveResponse)
async def resolve_alert(alert_id: str, authority: AuthenticatedUser = Depends(require_authority)):
    try:
        await mark_resolved(EMERGENCY_ALERTS_COLLECTION, alert_id, authority)
        return ResolveResponse(id=alert_id, collection=EMERGENCY_ALERTS_COLLECTION, message="Alert resolved")
    except LookupError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Alert {alert_id} not found")
    except Exception as e:
        logger.error(f"Error marking alert {alert_id} as resolved: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to resolve alert: {str(e)}",
        )
