# MAP/models.py
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class LatLng(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


MarkerColor = Literal["green", "red"]


class VendorMarker(BaseModel):
    vendor_id: str
    title: str
    position: LatLng
    color: MarkerColor
    total_quantity: int
    info_content: str
    details_url: str
    distance_km: Optional[float] = None


class ViewerMarker(BaseModel):
    position: LatLng
    style: Literal["viewer"] = "viewer"


class MapView(BaseModel):
    center: LatLng
    viewer: Optional[ViewerMarker] = None
    markers: List[VendorMarker] = []


# ---------------------------
# External Maps capabilities
# ---------------------------
class Suggestion(BaseModel):
    id: str
    description: str


class RouteStep(BaseModel):
    instruction: str
    distance: Optional[str] = None
    duration: Optional[str] = None


class Route(BaseModel):
    origin: LatLng
    destination: LatLng
    mode: str = "driving"
    polyline: str
    distance: Optional[str] = None
    duration: Optional[str] = None
    steps: List[RouteStep] = []
