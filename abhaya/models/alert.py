"""
Pydantic models for emergency alerts.
"""

from pydantic import BaseModel, Field
from typing import Any, Optional


class EmergencyAlertCreate(BaseModel):
    """Device position at the moment the emergency button was pressed."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class EmergencyAlertResponse(BaseModel):
    id: str
    userId: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timestamp: Optional[Any] = None
    resolved: bool = False
    displayTime: Optional[str] = None


class EmergencyAlertReceipt(BaseModel):
    """Result of raising an alert: the stored alert and the queued mail, if any."""
    alert_id: str
    mail_id: Optional[str] = None
    notified: bool = Field(False, description="Whether an email trigger record was written")
    message: str
