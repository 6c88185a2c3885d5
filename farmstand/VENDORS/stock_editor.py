# file: farmstand/VENDORS/stock_editor.py
"""
Stock list editing.

The editor is either VIEWING the list or COMPOSING an item in the form.
`edit(index)` pre-fills the form and deletes the item straight away, so an
abandoned edit loses that item; `replace(item_id, ...)` is the in-place
alternative addressed by the item's durable id.

Local state (`items`) only changes after the store accepted the write.
"""
import logging
from typing import List, Optional

from pydantic import ValidationError

from farmstand.core.exceptions import NotFound, ValidationFailed
from farmstand.VENDORS.models import ItemForm, StockItem, new_item_id
from farmstand.VENDORS.records import VendorRecords, describe_validation_error

logger = logging.getLogger("vendors.stock")

VIEWING = "viewing"
COMPOSING = "composing"


def parse_item_form(data) -> ItemForm:
    if isinstance(data, ItemForm):
        return data
    try:
        return ItemForm.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(f"Please check the item: {describe_validation_error(e)}") from e


class StockEditor:
    def __init__(self, records: VendorRecords, vendor_id: str, items: List[StockItem]):
        self.records = records
        self.vendor_id = vendor_id
        self.items = list(items)
        self.state = VIEWING
        self.form: Optional[ItemForm] = None

    # ------------------------------
    # Helpers
    # ------------------------------
    def _persist(self, updated: List[StockItem]) -> List[StockItem]:
        updated = [item if item.id else item.model_copy(update={"id": new_item_id()}) for item in updated]
        self.records.patch(self.vendor_id, "items", updated)
        self.items = updated
        return updated

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise NotFound(f"There is no item at position {index}.")

    def _index_of(self, item_id: str) -> int:
        for i, item in enumerate(self.items):
            if item.id == item_id:
                return i
        raise NotFound("That item no longer exists.")

    # ------------------------------
    # Transitions
    # ------------------------------
    def edit(self, index: int) -> ItemForm:
        """Copy items[index] into the form, then delete it from the stored list."""
        self._check_index(index)
        item = self.items[index]
        form = ItemForm(
            name=item.name,
            quantity=item.quantity,
            price=item.price,
            price_per_dozen=item.price_per_dozen,
        )
        self.delete(index)
        self.form = form
        self.state = COMPOSING
        logger.info("Vendor %s editing item %r (removed from list until resubmitted)", self.vendor_id, item.name)
        return form

    def submit(self, data) -> StockItem:
        """Validate the form, append a new item and persist the whole list."""
        form = parse_item_form(data)
        item = StockItem(
            id=new_item_id(),
            name=form.name,
            quantity=form.quantity,
            price=form.price,
            price_per_dozen=form.price_per_dozen,
        )
        self._persist(self.items + [item])
        self.form = None
        self.state = VIEWING
        return item

    def delete(self, index: int) -> List[StockItem]:
        self._check_index(index)
        updated = self.items[:index] + self.items[index + 1:]
        return self._persist(updated)

    def cancel(self) -> None:
        """Drop the form. An item taken out by edit() is not put back."""
        self.form = None
        self.state = VIEWING

    def update_quantity(self, index: int, quantity: int) -> StockItem:
        self._check_index(index)
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
            raise ValidationFailed("Quantity must be a whole number of 0 or more.")
        updated = list(self.items)
        updated[index] = updated[index].model_copy(update={"quantity": quantity})
        self._persist(updated)
        return self.items[index]

    def replace(self, item_id: str, data) -> StockItem:
        """Replace one item's fields in a single write, keeping its id and position."""
        index = self._index_of(item_id)
        form = parse_item_form(data)
        item = StockItem(
            id=item_id,
            name=form.name,
            quantity=form.quantity,
            price=form.price,
            price_per_dozen=form.price_per_dozen,
        )
        updated = list(self.items)
        updated[index] = item
        self._persist(updated)
        return item
