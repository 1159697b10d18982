"""
Location search used by the report form to center the map on a typed place.
"""

from abhaya.services.geocoding.base import GeocodingProvider
from abhaya.services.geocoding.nominatim_provider import NominatimProvider
from abhaya.services.geocoding.resolver import get_geocoding_provider, set_geocoding_provider

__all__ = [
    "GeocodingProvider",
    "NominatimProvider",
    "get_geocoding_provider",
    "set_geocoding_provider",
]
