"""
Stock editor transitions and what each one leaves in the store.
"""

import pytest

from farmstand.core.exceptions import NotFound, StoreUnavailable, ValidationFailed
from farmstand.VENDORS.models import StockItem
from farmstand.VENDORS.stock_editor import COMPOSING, VIEWING, StockEditor


@pytest.fixture
def editor(records, identity):
    record = records.load_or_init(identity.id, identity)
    return StockEditor(records, identity.id, record.items)


def _stored_items(store, identity):
    return store.raw(identity.id)["items"]


def _stock(editor, *names):
    for i, name in enumerate(names):
        editor.submit({"name": name, "quantity": i + 1})


def test_submit_corn_without_price(editor, store, identity) -> None:
    item = editor.submit({"name": "Corn", "quantity": 12})

    stored = _stored_items(store, identity)
    assert len(stored) == 1
    assert stored[0]["name"] == "Corn"
    assert stored[0]["quantity"] == 12
    assert "price" not in stored[0]
    assert stored[0]["pricePerDozen"] is None
    assert stored[0]["id"] == item.id
    assert editor.state == VIEWING
    assert editor.form is None


def test_submit_appends_at_end(editor, store, identity) -> None:
    _stock(editor, "Corn", "Beans", "Squash")
    assert [i["name"] for i in _stored_items(store, identity)] == ["Corn", "Beans", "Squash"]


@pytest.mark.parametrize("form", [
    {"name": "", "quantity": 1},
    {"name": "Corn", "quantity": "a dozen"},
    {"name": "Corn", "quantity": -1},
    {"name": "Corn"},
])
def test_submit_rejects_bad_forms_without_writing(editor, store, identity, form) -> None:
    writes = len(store.writes)
    with pytest.raises(ValidationFailed):
        editor.submit(form)
    assert len(store.writes) == writes
    assert editor.items == []


def test_edit_prefills_form_and_removes_item(editor, store, identity) -> None:
    _stock(editor, "Corn", "Eggs", "Squash")

    form = editor.edit(1)

    assert editor.state == COMPOSING
    assert form.name == "Eggs"
    assert form.quantity == 2
    assert [i["name"] for i in _stored_items(store, identity)] == ["Corn", "Squash"]


def test_abandoned_edit_loses_the_item(records, editor, store, identity) -> None:
    _stock(editor, "Corn", "Eggs", "Squash")

    editor.edit(1)
    editor.cancel()

    # a fresh session sees the item gone for good
    reloaded = records.load_or_init(identity.id, identity)
    assert [i.name for i in reloaded.items] == ["Corn", "Squash"]
    assert editor.state == VIEWING


def test_edit_then_submit_recreates_at_end(editor, store, identity) -> None:
    _stock(editor, "Corn", "Eggs", "Squash")

    form = editor.edit(0)
    editor.submit(form.model_copy(update={"quantity": 30}))

    stored = _stored_items(store, identity)
    assert [(i["name"], i["quantity"]) for i in stored] == [("Eggs", 2), ("Squash", 3), ("Corn", 30)]


def test_delete(editor, store, identity) -> None:
    _stock(editor, "Corn", "Eggs")

    editor.delete(0)

    assert [i["name"] for i in _stored_items(store, identity)] == ["Eggs"]
    assert editor.state == VIEWING


def test_out_of_range_index(editor) -> None:
    _stock(editor, "Corn")
    with pytest.raises(NotFound):
        editor.delete(5)
    with pytest.raises(NotFound):
        editor.edit(-1)


def test_update_quantity_in_place(editor, store, identity) -> None:
    _stock(editor, "Corn", "Eggs")
    eggs_id = editor.items[1].id

    item = editor.update_quantity(1, 0)

    assert item.quantity == 0
    assert item.id == eggs_id
    assert [(i["name"], i["quantity"]) for i in _stored_items(store, identity)] == [("Corn", 1), ("Eggs", 0)]
    with pytest.raises(ValidationFailed):
        editor.update_quantity(0, -2)


def test_replace_keeps_id_and_position(editor, store, identity) -> None:
    _stock(editor, "Corn", "Eggs", "Squash")
    eggs_id = editor.items[1].id

    editor.replace(eggs_id, {"name": "Brown Eggs", "quantity": 24, "pricePerDozen": 6.0})

    stored = _stored_items(store, identity)
    assert [i["name"] for i in stored] == ["Corn", "Brown Eggs", "Squash"]
    assert stored[1]["id"] == eggs_id
    assert stored[1]["pricePerDozen"] == 6.0
    with pytest.raises(NotFound):
        editor.replace("missing", {"name": "x", "quantity": 1})


def test_failed_write_keeps_local_list(editor, store) -> None:
    _stock(editor, "Corn")
    before = list(editor.items)
    store.fail_writes = True

    with pytest.raises(StoreUnavailable):
        editor.submit({"name": "Eggs", "quantity": 6})
    with pytest.raises(StoreUnavailable):
        editor.delete(0)

    assert editor.items == before


def test_items_without_ids_get_one_on_next_write(records, store, identity) -> None:
    records.load_or_init(identity.id, identity)
    store.merge_patch("vendors", identity.id, {"items": [{"name": "Corn", "quantity": 3, "pricePerDozen": None}]})
    record = records.load_or_init(identity.id, identity)
    assert record.items[0].id is None

    editor = StockEditor(records, identity.id, record.items)
    editor.submit({"name": "Eggs", "quantity": 6})

    stored = store.raw(identity.id)["items"]
    assert all(i["id"] for i in stored)
    assert isinstance(editor.items[0], StockItem)
