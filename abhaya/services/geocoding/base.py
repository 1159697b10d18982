from abc import ABC, abstractmethod
from typing import Dict, Optional, Union
import logging

logger = logging.getLogger(__name__)

SearchResult = Dict[str, Union[float, str, None]]


class GeocodingProvider(ABC):
    """
    Abstract location-search (forward geocoding) provider.

    Contract:
    - Input: free-text query ("Charminar, Hyderabad")
    - Output: best match as a dict with well-known keys:
      {
        "latitude": float,
        "longitude": float,
        "display_name": str | None,
        "provider": str
      }
      or None when nothing matches.
    - MUST NEVER raise upstream exceptions; failures return None.
    - Implementations should enforce a network timeout <= 3 seconds.
    """

    name = "base"

    @abstractmethod
    def search(self, query: str) -> Optional[SearchResult]:
        raise NotImplementedError


def make_result(latitude: float, longitude: float, display_name: Optional[str], provider: str) -> SearchResult:
    return {
        "latitude": latitude,
        "longitude": longitude,
        "display_name": display_name,
        "provider": provider,
    }
