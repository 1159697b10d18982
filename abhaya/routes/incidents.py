"""
Incident endpoints - report submission, listing and resolution.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from abhaya.models.base import ResolveResponse
from abhaya.models.incident import IncidentCreate, IncidentResponse
from abhaya.models.user import AuthenticatedUser
from abhaya.services.incident_service import (
    INCIDENTS_COLLECTION,
    create_incident,
    list_unresolved_incidents,
    mark_resolved,
)
from abhaya.utils.security import get_current_user, require_authority

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/incidents", tags=["Incidents"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=IncidentResponse)
async def submit_incident(incident: IncidentCreate, user: AuthenticatedUser = Depends(get_current_user)):
    """
    Submit a new incident report.

    Requires a signed-in user (anonymous sign-in is fine). Type, time, place
    and a selected location are mandatory.
    """
    try:
        logger.info(f"📝 POST /incidents - type={incident.incident_type}, user={user.uid}")
        return await create_incident(incident, user)
    except Exception as e:
        logger.error(f"❌ POST /incidents - creation failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to report incident. Please try again."
        )


@router.get("", response_model=List[IncidentResponse])
async def get_unresolved_incidents(_: AuthenticatedUser = Depends(require_authority)):
    try:
        return await list_unresolved_incidents()
    except Exception as e:
        logger.error(f"Failed to retrieve incidents: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve incidents: {str(e)}",
        )


@router.patch("/{incident_id}/resolve", response_model=ResolveResponse)
async def resolve_incident(incident_id: str, authority: AuthenticatedUser = Depends(require_authority)):
    """Mark an incident as resolved; it drops off the dashboard and out of risk zones."""
    try:
        await mark_resolved(INCIDENTS_COLLECTION, incident_id, authority)
        return ResolveResponse(id=incident_id, collection=INCIDENTS_COLLECTION, message="Incident resolved")
    except LookupError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Incident {incident_id} not found")
    except Exception as e:
        logger.error(f"Error marking incident {incident_id} as resolved: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to resolve incident: {str(e)}",
        )
