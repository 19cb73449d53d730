from __future__ import annotations
import logging
from typing import Callable, Iterable, Optional

from satchel.rules.catalog import Catalog
from satchel.rules.inventory import InventoryState
from satchel.rules.items import CatalogItem, Item
from satchel.rules.selection import PickerSession
from satchel.rules.stacking import StackingEngine

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[InventoryState], None]


class InventoryEditor:
    """
    Host-side controller for one inventory widget.
      - holds the single live InventoryState and routes intents to the engine
      - calls on_change(new_state) whenever an intent produced a new document
      - runs at most one picker session (open -> toggle/adjust -> confirm/cancel)
      - tracks the custom-item form target (an entry being converted/edited,
        or a catalog item copied from the picker)
    """

    def __init__(
        self,
        state: InventoryState,
        on_change: Optional[ChangeCallback] = None,
        engine: Optional[StackingEngine] = None,
        catalog: Optional[Catalog] = None,
    ) -> None:
        self.state = state
        self.on_change = on_change
        self.engine = engine or StackingEngine()
        self.catalog = catalog

        self.picker: Optional[PickerSession] = None
        self.editing_entry_id: Optional[str] = None
        self.picker_custom_item: Optional[Item] = None
        self.custom_form_open = False

    # ----- plumbing ---------------------------------------------------------
    def _apply(self, new_state: InventoryState) -> InventoryState:
        if new_state is self.state or new_state == self.state:
            return self.state
        self.state = new_state
        if self.on_change is not None:
            self.on_change(new_state)
        return new_state

    # ----- entry intents ----------------------------------------------------
    def add_items(self, items: Iterable[Item]) -> InventoryState:
        return self._apply(self.engine.add_items(self.state, items))

    def add_by_name(self, name: str, quantity: int = 1) -> InventoryState:
        """Catalog shortcut; unknown names are ignored."""
        item = self.catalog.get(name) if self.catalog is not None else None
        if item is None:
            logger.warning("No catalog item named %r", name)
            return self.state
        return self.add_items([item] * max(0, quantity))

    def change_quantity(self, entry_id: str, delta: int) -> InventoryState:
        return self._apply(self.engine.change_quantity(self.state, entry_id, delta))

    def remove(self, entry_id: str) -> InventoryState:
        return self._apply(self.engine.remove_entry(self.state, entry_id))

    def toggle_equip(self, entry_id: str) -> InventoryState:
        return self._apply(self.engine.toggle_equip(self.state, entry_id))

    def relocate(self, entry_id: str, location: str) -> InventoryState:
        return self._apply(self.engine.relocate(self.state, entry_id, location))

    # ----- document settings ------------------------------------------------
    def change_max_slots(self, delta: int) -> InventoryState:
        return self._apply(self.engine.change_slot_ceiling(self.state, delta))

    def set_unlimited_slots(self, value: bool) -> InventoryState:
        return self._apply(self.engine.set_unlimited_slots(self.state, value))

    def set_unlimited_quantity(self, value: bool) -> InventoryState:
        return self._apply(self.engine.set_unlimited_quantity(self.state, value))

    # ----- picker -----------------------------------------------------------
    def open_picker(self) -> PickerSession:
        """Budget and stack caps follow the live document's overrides."""
        self.picker = PickerSession(self.state)
        return self.picker

    def confirm_picker(self) -> InventoryState:
        if self.picker is None:
            return self.state
        session, self.picker = self.picker, None
        return self._apply(session.commit(self.state, self.engine))

    def cancel_picker(self) -> None:
        if self.picker is not None:
            self.picker.cancel()
        self.picker = None

    # ----- custom item form -------------------------------------------------
    @property
    def editing_item(self) -> Optional[Item]:
        if self.editing_entry_id is not None:
            entry = self.state.find(self.editing_entry_id)
            return entry.item if entry else None
        return self.picker_custom_item

    def begin_convert(self, entry_id: str) -> Optional[Item]:
        """Detach an entry from the catalog and open the form on it."""
        if self.state.find(entry_id) is None:
            return None
        self._apply(self.engine.convert_to_custom(self.state, entry_id))
        self.editing_entry_id = entry_id
        self.picker_custom_item = None
        self.custom_form_open = True
        return self.editing_item

    def begin_convert_from_picker(self, item: Item) -> Item:
        """Close the picker and open the form prefilled from a catalog item."""
        self.cancel_picker()
        self.editing_entry_id = None
        self.picker_custom_item = item.to_custom() if isinstance(item, CatalogItem) else item
        self.custom_form_open = True
        return self.picker_custom_item

    def submit_custom_item(self, item: Item) -> InventoryState:
        """Form submit: replace the edited entry's item, or add a new custom entry."""
        if isinstance(item, CatalogItem):
            item = item.to_custom()
        if self.editing_entry_id is not None:
            new_state = self.engine.update_custom_item(self.state, self.editing_entry_id, item)
        else:
            new_state = self.engine.add_custom_item(self.state, item)
        self.close_custom_form()
        return self._apply(new_state)

    def close_custom_form(self) -> None:
        self.custom_form_open = False
        self.editing_entry_id = None
        self.picker_custom_item = None
