from __future__ import annotations
import logging
from typing import Any, Dict, List

import yaml

from satchel.rules.inventory import (
    DEFAULT_LOCATION,
    DEFAULT_MAX_SLOTS,
    InventoryEntry,
    InventoryState,
    check_invariants,
)
from satchel.rules.items import CatalogItem, Category, Rarity, Tier, item_from_dict, item_to_dict

logger = logging.getLogger(__name__)


def _placeholder_item(name: str, description: str = "") -> CatalogItem:
    # Slots saved without item data still need something to render
    return CatalogItem(
        name=name or "Unknown Item",
        category=Category.UTILITY,
        rarity=Rarity.COMMON,
        tier=Tier.T1,
        max_quantity=1,
        is_consumable=False,
        description=description or None,
    )


def state_to_dict(state: InventoryState) -> Dict[str, Any]:
    """Host record shape: {"slots": [...], "maxItems", "unlimitedSlots", "unlimitedQuantity"}."""
    return {
        "slots": [
            {
                "id": e.id,
                "name": e.item.name,
                "description": e.item.description or "",
                "quantity": e.quantity,
                "location": e.location or DEFAULT_LOCATION,
                "isEquipped": e.is_equipped,
                "isCustom": e.is_custom,
                "item": item_to_dict(e.item),
            }
            for e in state.entries
        ],
        "maxItems": state.max_slots,
        "unlimitedSlots": state.unlimited_slots,
        "unlimitedQuantity": state.unlimited_quantity,
    }


def state_from_dict(data: Dict[str, Any] | None) -> InventoryState:
    """
    Rebuild a document from a host record. Missing fields take the same
    defaults the editor uses. Raises ValueError on malformed slots.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"Inventory record must be a mapping, got {type(data).__name__}")

    entries: List[InventoryEntry] = []
    for idx, slot in enumerate(data.get("slots", []) or []):
        if not isinstance(slot, dict):
            raise ValueError(f"slot #{idx} must be a mapping")
        is_custom = bool(slot.get("isCustom", False))

        raw_item = slot.get("item")
        if raw_item:
            try:
                item = item_from_dict(raw_item, custom=is_custom)
            except ValueError as e:
                raise ValueError(f"slot #{idx}: {e}") from e
        else:
            item = _placeholder_item(str(slot.get("name") or ""), str(slot.get("description") or ""))
            if is_custom:
                item = item.to_custom()

        entries.append(InventoryEntry(
            item=item,
            quantity=max(1, int(slot.get("quantity") or 1)),
            is_equipped=bool(slot.get("isEquipped", False)),
            location=str(slot.get("location") or DEFAULT_LOCATION),
            is_custom=is_custom,
            # stored ids survive a round trip so host references stay valid
            id=str(slot.get("id") or f"slot-{idx}"),
        ))

    max_items = data.get("maxItems")
    state = InventoryState(
        entries=tuple(entries),
        max_slots=DEFAULT_MAX_SLOTS if max_items is None else int(max_items),
        unlimited_slots=bool(data.get("unlimitedSlots", False)),
        unlimited_quantity=bool(data.get("unlimitedQuantity", False)),
    )

    problems = check_invariants(state)
    if problems:
        logger.warning("Loaded inventory breaks %d rule(s): %s", len(problems), "; ".join(problems))
    return state


def dump_yaml(state: InventoryState) -> str:
    return yaml.safe_dump(state_to_dict(state), sort_keys=False, allow_unicode=True)


def load_yaml(text: str) -> InventoryState:
    return state_from_dict(yaml.safe_load(text) or {})
