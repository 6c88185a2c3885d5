# MAP/map_routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from farmstand.MAP.models import LatLng, MapView
from farmstand.MAP.projection import project_map
from farmstand.VENDORS.records import VendorRecords, get_records

logger = logging.getLogger("map.routes")

router = APIRouter(prefix="/map", tags=["map"])


@router.get("", response_model=MapView)
async def get_map(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Viewer latitude, omit if geolocation was denied"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Viewer longitude"),
    records: VendorRecords = Depends(get_records),
):
    """Markers for every vendor with a location, re-read from the store on each call."""
    viewer = LatLng(lat=lat, lng=lng) if lat is not None and lng is not None else None
    vendors = records.list_all()
    view = project_map(vendors, viewer)
    logger.debug("Map view: %d vendors, %d markers, viewer=%s", len(vendors), len(view.markers), viewer)
    return view
