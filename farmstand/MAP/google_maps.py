# file: farmstand/MAP/google_maps.py
"""
Google Maps web services (async):
    geocode   – Geocoding API, address text -> LatLng
    route     – Directions API, origin/destination -> Route
    suggest   – Places Autocomplete, partial text -> [Suggestion]
Errors map onto the app's failure kinds; nothing is retried here.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from farmstand.core import config
from farmstand.core.exceptions import NotFound, RoutingFailed
from farmstand.MAP.models import LatLng, Route, RouteStep, Suggestion
from farmstand.utils.sanitize import sanitize_text

# ----------------------
# Logging
# ----------------------
logger = logging.getLogger("maps.google")

GEOCODE_FAILED = "Error setting location. Please check the address and try again."


def _safe_json(resp: httpx.Response) -> Dict[str, Any]:
    """Return parsed json, or an empty body when the response is not JSON."""
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _fmt(point: LatLng) -> str:
    return f"{point.lat},{point.lng}"


class GoogleMapsClient:
    def __init__(self, api_key: str = None, http: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key if api_key is not None else config.GOOGLE_MAPS_API_KEY
        self.http = http or httpx.AsyncClient(base_url=config.GOOGLE_MAPS_BASE_URL, timeout=config.MAPS_TIMEOUT)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        return await self.http.get(path, params={**params, "key": self.api_key})

    # ----------------------
    # Geocoding
    # ----------------------
    async def geocode(self, address: str) -> LatLng:
        logger.info("[Maps] geocode address=%r", address)
        try:
            resp = await self._get("/geocode/json", {"address": address})
        except httpx.HTTPError as e:
            logger.warning("[Maps] geocode request error: %s", e)
            raise NotFound(GEOCODE_FAILED) from e

        body = _safe_json(resp)
        status = body.get("status")
        results = body.get("results") or []
        if resp.status_code >= 400 or status != "OK" or not results:
            logger.warning("[Maps] geocode no result http=%s status=%s", resp.status_code, status)
            raise NotFound(GEOCODE_FAILED)

        location = (results[0].get("geometry") or {}).get("location") or {}
        if "lat" not in location or "lng" not in location:
            logger.warning("[Maps] geocode result without coordinates for %r", address)
            raise NotFound(GEOCODE_FAILED)
        return LatLng(lat=location["lat"], lng=location["lng"])

    # ----------------------
    # Directions
    # ----------------------
    async def route(self, origin: LatLng, destination: LatLng, mode: str = "driving") -> Route:
        logger.info("[Maps] route %s -> %s mode=%s", _fmt(origin), _fmt(destination), mode)
        try:
            resp = await self._get("/directions/json", {
                "origin": _fmt(origin),
                "destination": _fmt(destination),
                "mode": mode,
            })
        except httpx.HTTPError as e:
            logger.warning("[Maps] directions request error: %s", e)
            raise RoutingFailed("Directions request failed. Please try again.") from e

        body = _safe_json(resp)
        status = body.get("status") or f"HTTP_{resp.status_code}"
        routes = body.get("routes") or []
        if resp.status_code >= 400 or status != "OK" or not routes:
            logger.warning("[Maps] directions failed status=%s", status)
            raise RoutingFailed(f"Directions request failed due to {status}")

        first = routes[0]
        legs = first.get("legs") or [{}]
        leg = legs[0]
        steps = [
            RouteStep(
                instruction=sanitize_text(step.get("html_instructions", "")),
                distance=step.get("distance", {}).get("text"),
                duration=step.get("duration", {}).get("text"),
            )
            for step in leg.get("steps", [])
        ]
        return Route(
            origin=origin,
            destination=destination,
            mode=mode,
            polyline=first.get("overview_polyline", {}).get("points", ""),
            distance=leg.get("distance", {}).get("text"),
            duration=leg.get("duration", {}).get("text"),
            steps=steps,
        )

    # ----------------------
    # Autocomplete
    # ----------------------
    async def suggest(self, partial: str) -> List[Suggestion]:
        """Ordered address suggestions; empty when the service has none or is unreachable."""
        if not partial.strip():
            return []
        try:
            resp = await self._get("/place/autocomplete/json", {"input": partial, "types": "address"})
        except httpx.HTTPError as e:
            logger.warning("[Maps] autocomplete request error: %s", e)
            return []

        body = _safe_json(resp)
        if body.get("status") != "OK":
            logger.debug("[Maps] autocomplete status=%s", body.get("status"))
            return []
        return [
            Suggestion(id=p["place_id"], description=p["description"])
            for p in body.get("predictions", [])
            if "place_id" in p and "description" in p
        ]


_maps = None


def get_maps() -> GoogleMapsClient:
    """FastAPI dependency returning the shared Maps client."""
    global _maps
    if _maps is None:
        _maps = GoogleMapsClient()
    return _maps


async def close_maps() -> None:
    global _maps
    if _maps is not None:
        await _maps.aclose()
        _maps = None
