import logging
from typing import Optional

from abhaya.core.settings import settings
from .base import GeocodingProvider
from .nominatim_provider import NominatimProvider

logger = logging.getLogger(__name__)

_provider_instance: Optional[GeocodingProvider] = None


def get_geocoding_provider() -> GeocodingProvider:
    """
    Resolve the active location-search provider (Nominatim, configured from
    settings). Created once and reused.
    """
    global _provider_instance
    if _provider_instance is not None:
        return _provider_instance

    _provider_instance = NominatimProvider(
        user_agent=settings.GEOCODING_USER_AGENT,
        timeout=settings.GEOCODING_TIMEOUT_SECONDS,
    )
    logger.info("Geocoding provider initialized: nominatim")
    return _provider_instance


def set_geocoding_provider(provider: Optional[GeocodingProvider]) -> None:
    """Swap the provider (tests, alternative backends). None resets to default."""
    global _provider_instance
    _provider_instance = provider
