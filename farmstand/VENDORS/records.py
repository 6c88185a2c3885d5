# file: farmstand/VENDORS/records.py
"""
Vendor record model: load-or-create, the single merge-patch write path,
and read helpers for the public page and the map.

Each write touches exactly one field group (see FIELD_GROUPS). Two writes to
the same group from different sessions are last-writer-wins; writes to
different groups never interfere.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pydantic import ValidationError

from farmstand.core import config
from farmstand.core.exceptions import NotFound, ValidationFailed
from farmstand.core.firebase import get_store
from farmstand.core.security import Identity
from farmstand.VENDORS.models import (
    FIELD_GROUPS,
    Location,
    StockItem,
    VendorRecord,
    WeeklyHours,
)

logger = logging.getLogger("vendors.records")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def describe_validation_error(e: ValidationError) -> str:
    first = e.errors()[0]
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "__root__")
    msg = first.get("msg", "invalid value").removeprefix("Value error, ")
    return f"{where}: {msg}" if where else msg


def serialize_field_group(field_group: str, value: Any) -> Any:
    """Validate `value` for one field group and return its stored form."""
    try:
        if field_group == "location":
            if value is None:
                return None
            loc = value if isinstance(value, Location) else Location.model_validate(value)
            return loc.to_document()
        if field_group == "items":
            items = [v if isinstance(v, StockItem) else StockItem.model_validate(v) for v in value]
            return [item.to_document() for item in items]
        if field_group == "hours":
            hours = value if isinstance(value, WeeklyHours) else WeeklyHours.model_validate(value)
            return hours.to_document()
        if field_group == "vendorName":
            if not isinstance(value, str) or not value.strip():
                raise ValidationFailed("Vendor name cannot be empty.")
            return value.strip()
    except ValidationError as e:
        raise ValidationFailed(f"Invalid {field_group}: {describe_validation_error(e)}") from e
    except TypeError as e:
        raise ValidationFailed(f"Invalid {field_group}: {e}") from e
    raise ValidationFailed(f"Unknown field group '{field_group}'. Expected one of: {', '.join(FIELD_GROUPS)}")


def drop_invalid_fields(data: Dict[str, Any], error: ValidationError) -> Dict[str, Any]:
    """
    Copy of a stored document without the values `error` points at.
    Bad stock items are dropped one by one; any other bad field falls back
    to its default.
    """
    cleaned = dict(data)
    bad_items = set()
    for err in error.errors():
        loc = err.get("loc", ())
        if not loc:
            continue
        if loc[0] == "items" and len(loc) > 1 and isinstance(loc[1], int):
            bad_items.add(loc[1])
        else:
            cleaned.pop(loc[0], None)
    if bad_items and isinstance(cleaned.get("items"), list):
        cleaned["items"] = [item for i, item in enumerate(cleaned["items"]) if i not in bad_items]
    return cleaned


class VendorRecords:
    """Vendor records in the document store, one document per auth uid."""

    def __init__(self, store, collection: str = None, clock=_utcnow):
        self.store = store
        self.collection = collection or config.VENDORS_COLLECTION
        self.clock = clock

    # ------------------------------
    # Reads
    # ------------------------------
    def _parse(self, vendor_id: str, data: Dict[str, Any]) -> VendorRecord:
        """
        Older clients wrote raw form strings into the record (e.g. an empty
        quantity). Such values are left out of the returned record; the stored
        document only changes when the vendor next saves that field group.
        """
        try:
            return VendorRecord.from_document(vendor_id, data)
        except ValidationError as e:
            logger.warning("Vendor %s has malformed fields, ignoring them: %s", vendor_id, describe_validation_error(e))
            cleaned = drop_invalid_fields(data, e)
        try:
            return VendorRecord.from_document(vendor_id, cleaned)
        except ValidationError as e:
            raise ValidationFailed(f"This vendor record could not be read: {describe_validation_error(e)}") from e

    def load_or_init(self, vendor_id: str, identity: Optional[Identity]) -> VendorRecord:
        """
        Fetch the vendor's record, creating the default skeleton on first sight.
        The identity must be the resolved owner of `vendor_id`.
        """
        if identity is None or identity.id != vendor_id:
            raise NotFound("No signed-in vendor matches this account.")

        data = self.store.get(self.collection, vendor_id)
        if data is not None:
            return self._parse(vendor_id, data)

        record = VendorRecord.skeleton(vendor_id, email=identity.email)
        self.store.merge_patch(self.collection, vendor_id, record.to_document())
        logger.info("Created vendor skeleton for %s", vendor_id)
        return record

    def get(self, vendor_id: str) -> VendorRecord:
        data = self.store.get(self.collection, vendor_id)
        if data is None:
            raise NotFound("Vendor not found.")
        return self._parse(vendor_id, data)

    def list_all(self) -> List[VendorRecord]:
        records = []
        for doc in self.store.list_all(self.collection):
            doc_id = doc.pop("id")
            try:
                records.append(self._parse(doc_id, doc))
            except ValidationFailed as e:
                # one unreadable document must not take down the whole map
                logger.warning("Skipping vendor %s: %s", doc_id, e.message)
        return records

    # ------------------------------
    # Writes
    # ------------------------------
    def patch(self, vendor_id: str, field_group: str, value: Any) -> dict:
        """
        Merge-write exactly one top-level field group. `location` writes also
        stamp lastUpdated. Returns the partial document that was written.

        Every vendor-editable field goes through here. The only other writes
        are the first-sight skeleton and `email`, which is copied from the
        identity and never edited by the vendor.
        """
        partial = {field_group: serialize_field_group(field_group, value)}
        if field_group == "location":
            partial["lastUpdated"] = self.clock()

        self.store.merge_patch(self.collection, vendor_id, partial)
        logger.info("Patched %s/%s field_group=%s", self.collection, vendor_id, field_group)
        return partial

    def _record_email(self, identity: Identity) -> None:
        self.store.merge_patch(self.collection, identity.id, {"email": identity.email})

    def sign_up(self, identity: Identity, vendor_name: str) -> VendorRecord:
        """Record the vendor's display name and email right after account creation."""
        self.patch(identity.id, "vendorName", vendor_name)
        self._record_email(identity)
        logger.info("Vendor signed up: %s", identity.id)
        return self.load_or_init(identity.id, identity)


def get_records(store=Depends(get_store)) -> VendorRecords:
    return VendorRecords(store)
