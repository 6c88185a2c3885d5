# MAP/projection.py
"""
Derives what the customer map shows from the vendor records and the
viewer's position. Pure functions; nothing here touches the store.
"""
import math
from datetime import datetime
from typing import Iterable, List, Optional

from farmstand.core import config
from farmstand.MAP.models import LatLng, MapView, Route, VendorMarker, ViewerMarker
from farmstand.VENDORS.models import VendorRecord


def default_center() -> LatLng:
    lat, lng = config.DEFAULT_CENTER
    return LatLng(lat=lat, lng=lng)


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in km between two coordinates."""
    R = 6371
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return R * (2 * math.atan2(math.sqrt(a), math.sqrt(1 - a)))


def marker_color(total_quantity: int) -> str:
    return "green" if total_quantity > 0 else "red"


def format_last_updated(value: Optional[datetime]) -> str:
    if value is None:
        return "N/A"
    return value.strftime("%b %d, %Y %I:%M %p")


def info_content(vendor: VendorRecord) -> str:
    lines = [vendor.vendor_name, f"Address: {vendor.location.address}"]
    if vendor.location.note:
        lines.append(f"Note: {vendor.location.note}")
    lines.append("Stock Available:")
    if vendor.items:
        lines.extend(f"{item.name}: {item.quantity}" for item in vendor.items)
    else:
        lines.append("No items available")
    lines.append(f"Last updated: {format_last_updated(vendor.last_updated)}")
    return "\n".join(lines)


def vendor_marker(vendor: VendorRecord, viewer: Optional[LatLng] = None) -> VendorMarker:
    position = LatLng(lat=vendor.location.lat, lng=vendor.location.lng)
    distance = None
    if viewer is not None:
        distance = round(haversine(viewer.lat, viewer.lng, position.lat, position.lng), 3)
    total = vendor.total_quantity
    return VendorMarker(
        vendor_id=vendor.id,
        title=vendor.vendor_name,
        position=position,
        color=marker_color(total),
        total_quantity=total,
        info_content=info_content(vendor),
        details_url=f"/vendors/{vendor.id}/page",
        distance_km=distance,
    )


def project_map(vendors: Iterable[VendorRecord], viewer: Optional[LatLng] = None) -> MapView:
    """
    One marker per vendor that has a location. With a known viewer the
    markers come nearest-first and the map centers on the viewer.
    """
    markers: List[VendorMarker] = [vendor_marker(v, viewer) for v in vendors if v.location is not None]
    if viewer is None:
        return MapView(center=default_center(), markers=markers)

    markers.sort(key=lambda m: m.distance_km)
    return MapView(center=viewer, viewer=ViewerMarker(position=viewer), markers=markers)


async def plan_route(maps, vendor: VendorRecord, viewer: Optional[LatLng] = None) -> Route:
    """Driving route from the viewer (or the default center) to one vendor."""
    origin = viewer or default_center()
    destination = LatLng(lat=vendor.location.lat, lng=vendor.location.lng)
    return await maps.route(origin, destination, mode="driving")
