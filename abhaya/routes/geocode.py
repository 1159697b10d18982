"""Location search route - backs the search box on the report form."""

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel
from typing import Optional
import asyncio

from abhaya.services.geocoding import get_geocoding_provider


class LocationMatch(BaseModel):
    latitude: float
    longitude: float
    display_name: Optional[str] = None
    provider: str


router = APIRouter(prefix="/geocode", tags=["Geocoding"])


@router.get("/search", response_model=LocationMatch)
async def search_location(q: str = Query(..., min_length=1, description="Place to look up")):
    # requests is blocking; keep it off the event loop
    loop = asyncio.get_event_loop()
    result = await loop.run_in_executor(None, get_geocoding_provider().search, q)
    if result is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return result
