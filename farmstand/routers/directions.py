# farmstand/routers/directions.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from farmstand.core import config
from farmstand.core.exceptions import NotFound
from farmstand.core.rate_limit import limiter
from farmstand.MAP.google_maps import get_maps
from farmstand.MAP.models import LatLng
from farmstand.MAP.projection import default_center, plan_route
from farmstand.VENDORS.records import VendorRecords, get_records

router = APIRouter(prefix="/map", tags=["Directions"])


def build_google_link(origin: LatLng, destination: LatLng) -> str:
    return (
        f"https://www.google.com/maps/dir/?api=1"
        f"&origin={origin.lat},{origin.lng}"
        f"&destination={destination.lat},{destination.lng}"
        f"&travelmode=driving"
    )


@router.get("/vendors/{vendor_id}/directions")
@limiter.limit(config.RATE_LIMIT_DIRECTIONS)
async def get_directions(
    request: Request,
    vendor_id: str,
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Viewer latitude"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Viewer longitude"),
    records: VendorRecords = Depends(get_records),
    maps=Depends(get_maps),
):
    """
    Driving route from the viewer to a vendor, requested when the customer
    clicks "navigate" on a marker. Without a viewer position the route
    starts at the default map center.
    """
    vendor = records.get(vendor_id)
    if vendor.location is None:
        raise NotFound("This vendor has not shared a location yet.")

    viewer = LatLng(lat=lat, lng=lng) if lat is not None and lng is not None else None
    route = await plan_route(maps, vendor, viewer)
    return {
        "vendor_id": vendor.id,
        "route": route.model_dump(),
        "google_maps_url": build_google_link(viewer or default_center(), route.destination),
    }
