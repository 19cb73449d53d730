# satchel/rules/stacking.py
"""
Capacity & stacking intents.

Every intent takes the current InventoryState and returns the next one. None of
them raise for ordinary limits: adds past the slot ceiling are dropped, quantity
changes clamp at the stack cap, and intents aimed at a missing entry id leave
the document as it was.
"""
from __future__ import annotations
from dataclasses import replace
from typing import Callable, Iterable, List, Optional
import logging

from .inventory import (
    DEFAULT_LOCATION,
    EQUIPPED_LOCATION,
    InventoryEntry,
    InventoryState,
)
from .items import CatalogItem, Category, Item

logger = logging.getLogger(__name__)

EquipPredicate = Callable[[Item], bool]


def _update_entry(
    state: InventoryState,
    entry_id: str,
    fn: Callable[[InventoryEntry], InventoryEntry],
) -> InventoryState:
    for idx, e in enumerate(state.entries):
        if e.id != entry_id:
            continue
        updated = fn(e)
        if updated == e:
            return state
        entries = list(state.entries)
        entries[idx] = updated
        return replace(state, entries=tuple(entries))
    logger.debug("No inventory entry with id=%s; intent ignored", entry_id)
    return state


def _clamp_quantity(qty: int, cap: Optional[int]) -> int:
    qty = max(1, qty)
    if cap is not None:
        qty = min(cap, qty)
    return qty


# --- Adding -------------------------------------------------------------------

def add_items(state: InventoryState, items: Iterable[Item]) -> InventoryState:
    """
    Add a batch, one unit per element (repeat an item to add several).
    Catalog items merge into the existing catalog stack of the same name;
    custom items always get their own entry. Processing stops as soon as the
    slot ceiling is reached, so a batch can be partially applied.
    """
    entries: List[InventoryEntry] = list(state.entries)
    batch = list(items)
    remaining = None if state.unlimited_slots else state.max_slots - state.total_quantity

    for pos, item in enumerate(batch):
        if remaining is not None and remaining <= 0:
            logger.debug("Inventory full; dropped %d of %d added units", len(batch) - pos, len(batch))
            break

        idx = None
        if not item.is_custom:
            idx = next(
                (i for i, e in enumerate(entries) if not e.is_custom and e.item.name == item.name),
                None,
            )

        if idx is not None:
            existing = entries[idx]
            cap = None if state.unlimited_quantity else existing.item.max_quantity
            new_qty = existing.quantity + 1 if cap is None else min(cap, existing.quantity + 1)
            if new_qty <= existing.quantity:
                logger.debug("Stack of %r is at its cap (%s)", item.name, cap)
                continue
            entries[idx] = replace(existing, quantity=new_qty)
        else:
            entries.append(InventoryEntry(
                item=item,
                quantity=1,
                is_equipped=False,
                location=DEFAULT_LOCATION,
                is_custom=item.is_custom,
            ))

        if remaining is not None:
            remaining -= 1

    return replace(state, entries=tuple(entries))


def add_custom_item(state: InventoryState, item: Item) -> InventoryState:
    """Add one unit of `item` as its own custom entry, even if it came from the catalog."""
    if state.is_full:
        logger.debug("Inventory full; custom item %r not added", item.name)
        return state
    entry = InventoryEntry(item=item, quantity=1, location=DEFAULT_LOCATION, is_custom=True)
    return replace(state, entries=state.entries + (entry,))


# --- Per-entry intents --------------------------------------------------------

def change_quantity(state: InventoryState, entry_id: str, delta: int) -> InventoryState:
    """
    Nudge an entry's quantity, clamped to [1, stack cap].
    Only the stack cap is checked here, not the slot ceiling.
    """
    return _update_entry(
        state, entry_id,
        lambda e: replace(e, quantity=_clamp_quantity(e.quantity + delta, state.stack_cap(e))),
    )


def remove_entry(state: InventoryState, entry_id: str) -> InventoryState:
    if state.find(entry_id) is None:
        logger.debug("No inventory entry with id=%s; nothing removed", entry_id)
        return state
    return replace(state, entries=tuple(e for e in state.entries if e.id != entry_id))


def toggle_equip(state: InventoryState, entry_id: str) -> InventoryState:
    def _flip(e: InventoryEntry) -> InventoryEntry:
        if e.is_equipped:
            return replace(e, is_equipped=False, location=DEFAULT_LOCATION)
        return replace(e, is_equipped=True, location=EQUIPPED_LOCATION)

    return _update_entry(state, entry_id, _flip)


def relocate(state: InventoryState, entry_id: str, location: str) -> InventoryState:
    return _update_entry(state, entry_id, lambda e: replace(e, location=location))


def convert_to_custom(state: InventoryState, entry_id: str) -> InventoryState:
    """
    Detach an entry from the catalog so later adds never merge into it.
    Quantity, equip state and location are untouched.
    """
    def _detach(e: InventoryEntry) -> InventoryEntry:
        if e.is_custom:
            return e
        item = e.item.to_custom() if isinstance(e.item, CatalogItem) else e.item
        return replace(e, is_custom=True, item=item)

    return _update_entry(state, entry_id, _detach)


def update_custom_item(state: InventoryState, entry_id: str, new_item: Item) -> InventoryState:
    """
    Swap in an edited item snapshot. The entry becomes custom, and its quantity
    is clamped to the new item's stack cap.
    """
    item = new_item.to_custom() if isinstance(new_item, CatalogItem) else new_item
    cap = None if state.unlimited_quantity else item.max_quantity
    return _update_entry(
        state, entry_id,
        lambda e: replace(e, item=item, is_custom=True, quantity=_clamp_quantity(e.quantity, cap)),
    )


# --- Document-level settings --------------------------------------------------

def change_slot_ceiling(state: InventoryState, delta: int) -> InventoryState:
    """Move the ceiling by `delta`, never below what is already carried."""
    new_max = max(state.total_quantity, state.max_slots + delta)
    if new_max == state.max_slots:
        return state
    return replace(state, max_slots=new_max)


def set_unlimited_slots(state: InventoryState, value: bool) -> InventoryState:
    """Turning the override off raises the ceiling to what is carried, if needed."""
    if value:
        return replace(state, unlimited_slots=True)
    new_max = max(state.total_quantity, state.max_slots)
    if new_max != state.max_slots:
        logger.debug("Slot ceiling raised from %d to %d to fit carried items", state.max_slots, new_max)
    return replace(state, unlimited_slots=False, max_slots=new_max)


def set_unlimited_quantity(state: InventoryState, value: bool) -> InventoryState:
    """Turning the override off trims every stack back to its item's cap."""
    if value:
        return replace(state, unlimited_quantity=True)
    entries = []
    for e in state.entries:
        qty = _clamp_quantity(e.quantity, e.item.max_quantity)
        if qty != e.quantity:
            logger.debug("Stack of %r trimmed from %d to %d", e.item.name, e.quantity, qty)
            e = replace(e, quantity=qty)
        entries.append(e)
    return replace(state, unlimited_quantity=False, entries=tuple(entries))


# --- Engine facade ------------------------------------------------------------

EQUIPPABLE_CATEGORIES = frozenset({
    Category.UTILITY,
    Category.RELIC,
    Category.WEAPON_MODIFICATION,
    Category.ARMOR_MODIFICATION,
})


def default_can_equip(item: Item) -> bool:
    return item.category in EQUIPPABLE_CATEGORIES


class StackingEngine:
    """
    Bundles the intents behind one object so a host can inject an equip
    capability check. Without `can_equip` every item can be equipped.

    Example:
        engine = StackingEngine(can_equip=default_can_equip)
        state = engine.add_items(state, [rope, rope])
    """

    def __init__(self, can_equip: Optional[EquipPredicate] = None) -> None:
        self.can_equip = can_equip

    def add_items(self, state: InventoryState, items: Iterable[Item]) -> InventoryState:
        return add_items(state, items)

    def add_custom_item(self, state: InventoryState, item: Item) -> InventoryState:
        return add_custom_item(state, item)

    def change_quantity(self, state: InventoryState, entry_id: str, delta: int) -> InventoryState:
        return change_quantity(state, entry_id, delta)

    def remove_entry(self, state: InventoryState, entry_id: str) -> InventoryState:
        return remove_entry(state, entry_id)

    def toggle_equip(self, state: InventoryState, entry_id: str) -> InventoryState:
        entry = state.find(entry_id)
        if entry is not None and not entry.is_equipped and self.can_equip is not None \
                and not self.can_equip(entry.item):
            logger.debug("Item %r cannot be equipped", entry.item.name)
            return state
        return toggle_equip(state, entry_id)

    def relocate(self, state: InventoryState, entry_id: str, location: str) -> InventoryState:
        return relocate(state, entry_id, location)

    def convert_to_custom(self, state: InventoryState, entry_id: str) -> InventoryState:
        return convert_to_custom(state, entry_id)

    def update_custom_item(self, state: InventoryState, entry_id: str, new_item: Item) -> InventoryState:
        return update_custom_item(state, entry_id, new_item)

    def change_slot_ceiling(self, state: InventoryState, delta: int) -> InventoryState:
        return change_slot_ceiling(state, delta)

    def set_unlimited_slots(self, state: InventoryState, value: bool) -> InventoryState:
        return set_unlimited_slots(state, value)

    def set_unlimited_quantity(self, state: InventoryState, value: bool) -> InventoryState:
        return set_unlimited_quantity(state, value)
