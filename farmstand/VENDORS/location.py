# file: farmstand/VENDORS/location.py
import logging
from typing import List, Optional

from farmstand.core.exceptions import NotFound, ValidationFailed
from farmstand.VENDORS.models import Location
from farmstand.VENDORS.records import VendorRecords

logger = logging.getLogger("vendors.location")


class LocationEditor:
    """
    Address, geocoded position and location note of one vendor.
    `location` in memory only changes once the store write succeeded;
    a failed geocode never writes anything.
    """

    def __init__(self, records: VendorRecords, maps, vendor_id: str, location: Optional[Location]):
        self.records = records
        self.maps = maps
        self.vendor_id = vendor_id
        self.location = location

    def _save(self, location: Optional[Location]) -> Optional[Location]:
        self.records.patch(self.vendor_id, "location", location)
        self.location = location
        return location

    def _require_location(self) -> Location:
        if self.location is None:
            raise NotFound("Set an address before adding a location note.")
        return self.location

    async def set_address(self, address: str, note: Optional[str] = None) -> Location:
        if not address or not address.strip():
            raise ValidationFailed("Please enter a valid address.")
        address = address.strip()

        point = await self.maps.geocode(address)
        if note is None and self.location is not None:
            note = self.location.note
        location = Location(address=address, note=note or None, lat=point.lat, lng=point.lng)
        logger.info("Vendor %s geocoded %r -> (%s, %s)", self.vendor_id, address, point.lat, point.lng)
        return self._save(location)

    def set_note(self, note: str) -> Location:
        current = self._require_location()
        return self._save(current.model_copy(update={"note": note or None}))

    def remove_note(self) -> Location:
        current = self._require_location()
        return self._save(current.model_copy(update={"note": None}))

    def remove_location(self) -> None:
        self._save(None)

    async def suggest(self, partial: str) -> List:
        return await self.maps.suggest(partial)
