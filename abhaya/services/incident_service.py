"""
Incident service - business logic for incident reports.
Handles Firestore reads and writes for the `incidents` collection and the
shared resolve action for incidents and emergency alerts.

DESIGN NOTE:
- Documents keep the camelCase shape the map front end reads
- Images are referenced by download URL only (uploaded client-side)
- Resolving a record flips `resolved`; records are never deleted
"""

from typing import Any, Dict, List
import logging

from abhaya.config.firebase import get_db
from abhaya.models.incident import IncidentCreate
from abhaya.models.user import AuthenticatedUser
from abhaya.utils.firestore_helpers import snapshot_to_record, unresolved_records
from abhaya.utils.timestamps import display_time, utcnow

logger = logging.getLogger(__name__)

INCIDENTS_COLLECTION = "incidents"
EMERGENCY_ALERTS_COLLECTION = "emergency_alerts"

RESOLVABLE_COLLECTIONS = (INCIDENTS_COLLECTION, EMERGENCY_ALERTS_COLLECTION)


def with_display_time(record: Dict[str, Any]) -> Dict[str, Any]:
    record["displayTime"] = display_time(record)
    return record


async def create_incident(incident: IncidentCreate, user: AuthenticatedUser) -> Dict[str, Any]:
    """
    Store a new incident report.

    Args:
        incident: Validated report from the submission form
        user: Reporter identity (required; anonymous accounts are allowed)

    Returns:
        The stored document with its generated id
    """
    db = get_db()

    doc_ref = db.collection(INCIDENTS_COLLECTION).document()
    document = {
        "userId": user.uid,
        "incidentType": incident.incident_type,
        "incidentTime": incident.incident_time,
        "incidentPlace": incident.incident_place,
        "additionalDetails": incident.additional_details or "",
        "latitude": incident.latitude,
        "longitude": incident.longitude,
        "imageUrl": incident.image_url or "",
        "timestamp": utcnow(),
        "resolved": False,
    }

    try:
        doc_ref.set(document)
    except Exception as e:
        logger.error(f"Failed to save incident to Firestore: {e}", exc_info=True)
        raise

    logger.info(f"Incident saved: {doc_ref.id} ({incident.incident_type}) by {user.uid}")
    document["id"] = doc_ref.id
    return with_display_time(document)


async def list_unresolved_incidents() -> List[Dict[str, Any]]:
    """
    All incidents not yet marked resolved, in store order.

    This ordering is what the risk zone clustering sees.
    """
    db = get_db()
    return [with_display_time(record) for record in unresolved_records(db, INCIDENTS_COLLECTION)]


async def get_record(collection: str, doc_id: str) -> Dict[str, Any]:
    """
    Raises:
        LookupError: document does not exist
    """
    db = get_db()
    doc = db.collection(collection).document(doc_id).get()
    if not doc.exists:
        raise LookupError(f"{collection}/{doc_id} not found")
    return snapshot_to_record(doc)


async def mark_resolved(collection: str, doc_id: str, resolved_by: AuthenticatedUser) -> Dict[str, Any]:
    """
    Mark an incident or emergency alert as resolved.

    Raises:
        ValueError: collection is not resolvable
        LookupError: document does not exist
    """
    if collection not in RESOLVABLE_COLLECTIONS:
        raise ValueError(f"Cannot resolve records in '{collection}'. Allowed: {list(RESOLVABLE_COLLECTIONS)}")

    await get_record(collection, doc_id)

    db = get_db()
    db.collection(collection).document(doc_id).update({
        "resolved": True,
        "resolvedBy": resolved_by.uid,
        "resolvedAt": utcnow(),
    })

    logger.info(f"✅ {collection}/{doc_id} marked resolved by {resolved_by.email or resolved_by.uid}")
    return await get_record(collection, doc_id)
