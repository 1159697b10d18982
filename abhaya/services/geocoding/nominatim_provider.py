import logging
from typing import Any, List, Optional

import requests

from .base import GeocodingProvider, SearchResult, make_result

logger = logging.getLogger(__name__)


class NominatimProvider(GeocodingProvider):
    """
    OpenStreetMap Nominatim location search.

    - No API key required.
    - Uses a strict timeout (<= 3 seconds).
    - Includes a User-Agent header as required by Nominatim usage policy.
    - Never raises upstream exceptions; returns None on failure.
    """

    name = "nominatim"
    BASE_URL = "https://nominatim.openstreetmap.org/search"

    def __init__(self, user_agent: str = "abhaya-incident-reporting/0.1", timeout: float = 3.0):
        self.user_agent = user_agent
        self.timeout = timeout

    def search(self, query: str) -> Optional[SearchResult]:
        if not query or not query.strip():
            return None
        try:
            params = {
                "q": query.strip(),
                "format": "json",
                "limit": 1,
            }
            headers = {
                "User-Agent": self.user_agent,
            }
            resp = requests.get(self.BASE_URL, params=params, headers=headers, timeout=self.timeout)
            if resp.status_code != 200:
                logger.warning(f"Nominatim search failed with status {resp.status_code}")
                return None

            data: List[Any] = resp.json()
            if not data:
                logger.info(f"Nominatim found no match for '{query}'")
                return None

            first = data[0]
            return make_result(
                latitude=float(first["lat"]),
                longitude=float(first["lon"]),
                display_name=first.get("display_name"),
                provider=self.name,
            )
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            # Location search is a convenience; the user can still click the map.
            logger.warning(f"Nominatim search error: {e}")
            return None
