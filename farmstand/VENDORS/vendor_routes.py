# VENDORS/vendor_routes.py
from fastapi import APIRouter, Depends, Query, Request, Response

from farmstand.core import config
from farmstand.core.rate_limit import limiter
from farmstand.core.security import Identity, get_signed_in, get_verified_vendor
from farmstand.MAP.google_maps import get_maps
from farmstand.VENDORS import qr_code
from farmstand.VENDORS.hours import HoursEditor, hours_table
from farmstand.VENDORS.location import LocationEditor
from farmstand.VENDORS.models import (
    ItemForm,
    LocationForm,
    NoteForm,
    QuantityForm,
    VendorNameForm,
    VendorRecord,
    WeeklyHours,
)
from farmstand.VENDORS.records import VendorRecords, get_records
from farmstand.VENDORS.stock_editor import StockEditor

router = APIRouter(prefix="/vendors", tags=["vendors"])


def _record_out(record: VendorRecord) -> dict:
    return record.model_dump(by_alias=True, mode="json")


def _items_out(items) -> list:
    return [item.model_dump(by_alias=True, mode="json") for item in items]


def _load(records: VendorRecords, vendor: Identity) -> VendorRecord:
    return records.load_or_init(vendor.id, vendor)


# ==============================
# SIGN UP / DASHBOARD
# ==============================
@router.post("/signup", status_code=201)
async def sign_up(
    form: VendorNameForm,
    identity: Identity = Depends(get_signed_in),
    records: VendorRecords = Depends(get_records),
):
    """
    Called right after the account is created in Firebase Auth.
    Email verification is not required yet; the dashboard stays locked until it is.
    """
    record = records.sign_up(identity, form.vendor_name)
    return {"notice": "Vendor signed up successfully!", "vendor": _record_out(record)}


@router.get("/me")
async def get_dashboard(
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    return {"vendor": _record_out(_load(records, vendor))}


@router.put("/me/name")
async def rename_vendor(
    form: VendorNameForm,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    _load(records, vendor)
    records.patch(vendor.id, "vendorName", form.vendor_name)
    return {"notice": "Vendor name updated successfully", "vendorName": form.vendor_name}


# ==============================
# LOCATION
# ==============================
@router.put("/me/location")
@limiter.limit(config.RATE_LIMIT_GEOCODE)
async def set_location(
    request: Request,
    form: LocationForm,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
    maps=Depends(get_maps),
):
    record = _load(records, vendor)
    editor = LocationEditor(records, maps, vendor.id, record.location)
    location = await editor.set_address(form.address, form.note)
    return {"notice": "Location updated successfully", "location": location.model_dump()}


@router.get("/me/location/suggestions")
@limiter.limit(config.RATE_LIMIT_SUGGEST)
async def suggest_addresses(
    request: Request,
    q: str = Query(..., min_length=1, max_length=200),
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
    maps=Depends(get_maps),
):
    editor = LocationEditor(records, maps, vendor.id, None)
    suggestions = await editor.suggest(q)
    return {"suggestions": [s.model_dump() for s in suggestions]}


@router.delete("/me/location")
async def remove_location(
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    record = _load(records, vendor)
    LocationEditor(records, None, vendor.id, record.location).remove_location()
    return {"notice": "Location removed successfully", "location": None}


@router.put("/me/location/note")
async def set_location_note(
    form: NoteForm,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    record = _load(records, vendor)
    location = LocationEditor(records, None, vendor.id, record.location).set_note(form.note)
    return {"notice": "Location note updated successfully", "location": location.model_dump()}


@router.delete("/me/location/note")
async def remove_location_note(
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    record = _load(records, vendor)
    location = LocationEditor(records, None, vendor.id, record.location).remove_note()
    return {"notice": "Location note removed successfully", "location": location.model_dump()}


# ==============================
# HOURS
# ==============================
@router.put("/me/hours")
async def save_hours(
    hours: WeeklyHours,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    record = _load(records, vendor)
    saved = HoursEditor(records, vendor.id, record.hours).save(hours)
    return {"notice": "Hours updated successfully", "hours": saved.to_document()}


# ==============================
# STOCK
# ==============================
def _stock_editor(records: VendorRecords, vendor: Identity) -> StockEditor:
    record = _load(records, vendor)
    return StockEditor(records, vendor.id, record.items)


@router.post("/me/items", status_code=201)
async def add_item(
    form: ItemForm,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    editor = _stock_editor(records, vendor)
    item = editor.submit(form)
    return {"notice": "Item added", "item": item.model_dump(by_alias=True), "items": _items_out(editor.items)}


@router.post("/me/items/{index}/edit")
async def edit_item(
    index: int,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    """
    Returns the item's fields for the compose form and removes the item from
    the list. The item only comes back if the form is submitted.
    """
    editor = _stock_editor(records, vendor)
    form = editor.edit(index)
    return {"state": editor.state, "form": form.model_dump(by_alias=True), "items": _items_out(editor.items)}


@router.delete("/me/items/{index}")
async def delete_item(
    index: int,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    editor = _stock_editor(records, vendor)
    editor.delete(index)
    return {"notice": "Item deleted", "items": _items_out(editor.items)}


@router.patch("/me/items/{index}/quantity")
async def update_item_quantity(
    index: int,
    form: QuantityForm,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    editor = _stock_editor(records, vendor)
    item = editor.update_quantity(index, form.quantity)
    return {"notice": "Stock updated successfully", "item": item.model_dump(by_alias=True)}


@router.put("/me/items/by-id/{item_id}")
async def replace_item(
    item_id: str,
    form: ItemForm,
    vendor: Identity = Depends(get_verified_vendor),
    records: VendorRecords = Depends(get_records),
):
    editor = _stock_editor(records, vendor)
    item = editor.replace(item_id, form)
    return {"notice": "Item updated", "item": item.model_dump(by_alias=True), "items": _items_out(editor.items)}


# ==============================
# PUBLIC VENDOR PAGE
# ==============================
@router.get("/{vendor_id}/page")
async def vendor_page(vendor_id: str, records: VendorRecords = Depends(get_records)):
    """Everything a customer sees after scanning the stand's QR code."""
    record = records.get(vendor_id)
    return {
        "id": record.id,
        "vendorName": record.vendor_name,
        "address": record.location.address if record.location else None,
        "note": record.location.note if record.location else None,
        "location": (
            {"lat": record.location.lat, "lng": record.location.lng} if record.location else None
        ),
        "items": _items_out(record.items),
        "hours": hours_table(record.hours),
    }


@router.get("/{vendor_id}/qrcode")
async def vendor_qr_code(vendor_id: str, records: VendorRecords = Depends(get_records)):
    record = records.get(vendor_id)
    png = qr_code.encode(qr_code.vendor_page_url(record.id))
    return Response(content=png, media_type="image/png")
