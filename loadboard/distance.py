"""
Driving distance and trucking ETA lookup for loads whose listing omits trip miles.
"""

import logging
import math
from typing import List, Optional
import httpx
from pydantic import BaseModel
from .models import LoadRecord
from .ratelimit import RateLimiter

logger = logging.getLogger(__name__)

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
METERS_TO_MILES = 0.000621371


class DistanceResult(BaseModel):
    distance: Optional[str] = None
    eta: Optional[str] = None
    distance_miles: Optional[int] = None
    error: Optional[str] = None


def trucking_hours(drive_seconds: float) -> float:
    """Car drive time stretched for a truck: 20% slower plus 2 hours of stops."""
    return (drive_seconds / 3600) * 1.2 + 2


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(hours: float) -> str:
    """45 minutes / 5h 30m / 2d 3h."""
    if hours < 1:
        return f"{_round_half_up(hours * 60)} minutes"
    if hours < 24:
        whole, minutes = divmod(_round_half_up(hours * 60), 60)
        return f"{whole}h {minutes}m" if minutes > 0 else f"{whole}h"
    days, remaining = divmod(_round_half_up(hours), 24)
    return f"{days}d {remaining}h" if remaining > 0 else f"{days}d"


class DistanceClient:
    """Distance Matrix client. Every lookup passes through the caller's rate limiter."""

    def __init__(
        self,
        api_key: Optional[str],
        limiter: Optional[RateLimiter] = None,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = DISTANCE_MATRIX_URL,
    ):
        self.api_key = api_key
        self.limiter = limiter or RateLimiter()
        self.client = client
        self.base_url = base_url

    async def lookup(self, origin: Optional[str], destination: Optional[str]) -> DistanceResult:
        if not self.api_key:
            logger.warning("Google Maps API key not found, skipping distance calculation")
            return DistanceResult(error="API key missing")
        if not origin or not destination:
            return DistanceResult(error="Missing origin or destination")

        return await self.limiter.call(self._fetch, origin, destination)

    async def _fetch(self, origin: str, destination: str) -> DistanceResult:
        params = {
            "origins": origin,
            "destinations": destination,
            "units": "imperial",
            "mode": "driving",
            "avoid": "tolls",
            "key": self.api_key,
        }

        logger.info(f"Calculating distance: {origin} -> {destination}")
        try:
            if self.client is not None:
                response = await self.client.get(self.base_url, params=params)
            else:
                async with httpx.AsyncClient(timeout=30.0) as client:
                    response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Distance API error: {e}")
            return DistanceResult(error=str(e))

        return self._parse(data)

    def _parse(self, data: dict) -> DistanceResult:
        if not isinstance(data, dict):
            return DistanceResult(error="INVALID_RESPONSE")
        try:
            element = data["rows"][0]["elements"][0]
        except (KeyError, IndexError, TypeError):
            return DistanceResult(error=data.get("status") or "INVALID_RESPONSE")

        if data.get("status") != "OK" or element.get("status") != "OK":
            error = element.get("status") or data.get("status")
            logger.warning(f"Distance calculation failed: {error}")
            return DistanceResult(error=error)

        try:
            meters = element["distance"]["value"]
            seconds = element["duration"]["value"]
        except (KeyError, TypeError):
            return DistanceResult(error="INVALID_RESPONSE")

        miles = _round_half_up(meters * METERS_TO_MILES)
        eta = format_duration(trucking_hours(seconds))
        return DistanceResult(distance=f"{miles} miles", eta=eta, distance_miles=miles)


async def fill_distances(records: List[LoadRecord], client: DistanceClient) -> List[LoadRecord]:
    """Look up trip distance and ETA for records that have a route but no distance."""
    filled = []
    for record in records:
        if record.trip_distance or not record.has_route:
            filled.append(record)
            continue
        result = await client.lookup(record.origin, record.destination)
        if result.distance:
            record = record.model_copy(update={"trip_distance": result.distance, "estimated_eta": result.eta})
        filled.append(record)
    return filled
