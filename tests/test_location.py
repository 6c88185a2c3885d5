"""
Location editor: geocoded address writes, note handling, and failed geocodes.
"""

from datetime import datetime, timezone

import pytest

from farmstand.core.exceptions import NotFound, ValidationFailed
from farmstand.VENDORS.hours import HoursEditor
from farmstand.VENDORS.location import LocationEditor


@pytest.fixture
def editor(records, maps, identity):
    record = records.load_or_init(identity.id, identity)
    return LocationEditor(records, maps, identity.id, record.location)


@pytest.mark.asyncio
async def test_set_address_stores_geocoded_position(editor, store, identity) -> None:
    requested_at = datetime.now(timezone.utc)

    location = await editor.set_address("12 Maple St")

    stored = store.raw(identity.id)
    assert stored["location"]["lat"] == 41.9
    assert stored["location"]["lng"] == -72.0
    assert stored["location"]["address"] == "12 Maple St"
    assert stored["lastUpdated"] >= requested_at
    assert editor.location == location


@pytest.mark.asyncio
async def test_failed_geocode_writes_nothing(editor, store, identity) -> None:
    await editor.set_address("12 Maple St", note="red shed")
    before = store.raw(identity.id)
    writes = len(store.writes)

    with pytest.raises(NotFound) as excinfo:
        await editor.set_address("Somewhere That Does Not Exist")

    assert "check the address" in excinfo.value.message
    assert len(store.writes) == writes
    assert store.raw(identity.id) == before
    assert editor.location.address == "12 Maple St"


@pytest.mark.asyncio
async def test_blank_address_is_rejected(editor, store) -> None:
    writes = len(store.writes)
    with pytest.raises(ValidationFailed):
        await editor.set_address("   ")
    assert len(store.writes) == writes


@pytest.mark.asyncio
async def test_new_address_keeps_existing_note(editor, store, identity) -> None:
    await editor.set_address("12 Maple St", note="red shed")
    await editor.set_address("40 Orchard Rd")
    assert store.raw(identity.id)["location"]["note"] == "red shed"


@pytest.mark.asyncio
async def test_note_set_and_remove(editor, store, identity) -> None:
    await editor.set_address("12 Maple St")

    editor.set_note("end of the driveway")
    assert store.raw(identity.id)["location"]["note"] == "end of the driveway"

    editor.remove_note()
    stored = store.raw(identity.id)["location"]
    assert stored["note"] is None
    assert stored["address"] == "12 Maple St"


def test_note_needs_a_location(editor) -> None:
    with pytest.raises(NotFound):
        editor.set_note("by the mailbox")


@pytest.mark.asyncio
async def test_remove_location(editor, store, identity) -> None:
    await editor.set_address("12 Maple St")
    editor.remove_location()
    assert store.raw(identity.id)["location"] is None
    assert editor.location is None


@pytest.mark.asyncio
async def test_suggest(editor) -> None:
    suggestions = await editor.suggest("12 Maple")
    assert [s.id for s in suggestions] == ["p-1", "p-2"]
    assert await editor.suggest("zzz") == []


def test_hours_editor_saves_and_validates(records, store, identity) -> None:
    record = records.load_or_init(identity.id, identity)
    editor = HoursEditor(records, identity.id, record.hours)

    saved = editor.save({"Sat": {"open": "08:00", "close": "13:00", "closed": False},
                         "Sun": {"open": "08:00", "close": "13:00", "closed": True}})

    stored = store.raw(identity.id)["hours"]
    assert stored["Sat"] == {"open": "08:00", "close": "13:00", "closed": False}
    assert stored["Sun"] == {"open": "", "close": "", "closed": True}
    assert editor.hours == saved

    writes = len(store.writes)
    with pytest.raises(ValidationFailed):
        editor.save({"Mon": {"open": "late", "close": "13:00", "closed": False}})
    assert len(store.writes) == writes
    assert editor.hours == saved
