"""
Core settings and environment variables for the ABHAYA backend.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "ABHAYA Incident Reporting"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API (comma separated)
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # Mock DB mode for local development without Firebase credentials
    USE_MOCK_DB: bool = False
    MOCK_DB_PATH: Optional[str] = "./mock_db.json"

    # Authorities: only these accounts may open the dashboard and resolve records.
    # Also the recipients of emergency alert emails.
    AUTHORITY_EMAILS: str = ""

    # Risk zones
    RISK_ZONE_RADIUS_METERS: float = 500.0

    # Collection watched by the Trigger Email extension
    MAIL_COLLECTION: str = "mails"

    # Location search (Nominatim)
    GEOCODING_USER_AGENT: str = "abhaya-incident-reporting/0.1"
    GEOCODING_TIMEOUT_SECONDS: float = 3.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    def cors_origins(self) -> List[str]:
        return _split_csv(self.CORS_ORIGINS)

    def authority_emails(self) -> List[str]:
        return [email.lower() for email in _split_csv(self.AUTHORITY_EMAILS)]


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# Global settings instance
settings = Settings()
