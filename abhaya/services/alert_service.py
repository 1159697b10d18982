"""
Emergency Alert Service - one-tap SOS from the login screen.

WHAT THIS SERVICE DOES:
- Stores the alert in `emergency_alerts` so authorities see it on the dashboard
- Queues an email for the authorities by writing a record to the mail
  collection; the Trigger Email extension watches that collection and sends it

WHAT THIS SERVICE DOES NOT:
- Send email itself
- Require a signed-in user (anyone in danger can raise an alert)
"""

from typing import Any, Dict, List, Optional
import logging

from abhaya.config.firebase import get_db
from abhaya.core.settings import settings
from abhaya.models.user import AuthenticatedUser
from abhaya.services.incident_service import EMERGENCY_ALERTS_COLLECTION, with_display_time
from abhaya.utils.firestore_helpers import unresolved_records
from abhaya.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

ANONYMOUS_USER_ID = "anonymous"

ALERT_SUBJECT = "🚨 Emergency Alert!"
ALERT_TITLE = "Emergency!!"


def build_alert_mail(latitude: float, longitude: float, recipients: List[str], raised_at) -> Dict[str, Any]:
    """
    Mail trigger document in the shape the Trigger Email extension reads.
    `to` must be a list; coordinates are stored as strings.
    """
    return {
        "to": recipients,
        "subject": ALERT_SUBJECT,
        "message": {
            "text": "An emergency has been triggered!",
            "location": f"📍 Latitude: {latitude}, Longitude: {longitude}",
            "time": f"⏰ Time: {raised_at.isoformat()}",
        },
        "alertTitle": ALERT_TITLE,
        "latitude": str(latitude),
        "longitude": str(longitude),
        "timestamp": raised_at,
    }


async def raise_emergency_alert(
    latitude: float,
    longitude: float,
    user: Optional[AuthenticatedUser] = None,
) -> Dict[str, Any]:
    """
    Record an emergency alert and queue the authority email.

    The alert write must succeed. If no authority email is configured, or the
    mail record cannot be written, the alert stays stored and the receipt
    says no email was queued.

    Returns:
        Dict with alert_id, mail_id (or None), notified flag and message
    """
    db = get_db()
    raised_at = utcnow()
    user_id = user.uid if user else ANONYMOUS_USER_ID

    alert_ref = db.collection(EMERGENCY_ALERTS_COLLECTION).document()
    try:
        alert_ref.set({
            "userId": user_id,
            "latitude": latitude,
            "longitude": longitude,
            "timestamp": raised_at,
            "resolved": False,
        })
    except Exception as e:
        logger.error(f"Failed to save emergency alert: {e}", exc_info=True)
        raise

    logger.warning(f"🚨 Emergency alert {alert_ref.id} raised by {user_id} at ({latitude}, {longitude})")

    recipients = settings.authority_emails()
    if not recipients:
        logger.warning("AUTHORITY_EMAILS is empty, emergency email not queued")
        return {
            "alert_id": alert_ref.id,
            "mail_id": None,
            "notified": False,
            "message": "Emergency alert recorded. No authority email configured.",
        }

    mail_ref = db.collection(settings.MAIL_COLLECTION).document()
    try:
        mail_ref.set(build_alert_mail(latitude, longitude, recipients, raised_at))
    except Exception as e:
        # The alert is already stored; report the partial result instead of failing.
        logger.error(f"Failed to queue emergency email for alert {alert_ref.id}: {e}", exc_info=True)
        return {
            "alert_id": alert_ref.id,
            "mail_id": None,
            "notified": False,
            "message": "Emergency alert recorded, but the authority email could not be queued.",
        }
    logger.info(f"Emergency email queued in '{settings.MAIL_COLLECTION}': {mail_ref.id}")

    return {
        "alert_id": alert_ref.id,
        "mail_id": mail_ref.id,
        "notified": True,
        "message": f"Emergency alert sent! Location: {latitude}, {longitude}",
    }


async def list_unresolved_alerts() -> List[Dict[str, Any]]:
    db = get_db()
    return [with_display_time(record) for record in unresolved_records(db, EMERGENCY_ALERTS_COLLECTION)]
