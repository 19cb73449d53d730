# satchel/rules/inventory.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import uuid

from .items import Item

DEFAULT_MAX_SLOTS = 50
DEFAULT_LOCATION = "backpack"
EQUIPPED_LOCATION = "equipped"


def new_entry_id() -> str:
    return uuid.uuid4().hex


# Entries and documents are immutable; intents in stacking.py return new values
@dataclass(frozen=True)
class InventoryEntry:
    item: Item
    quantity: int = 1
    is_equipped: bool = False
    location: str = DEFAULT_LOCATION
    is_custom: bool = False
    id: str = field(default_factory=new_entry_id)


@dataclass(frozen=True)
class InventoryState:
    entries: Tuple[InventoryEntry, ...] = ()
    max_slots: int = DEFAULT_MAX_SLOTS          # one slot = one unit of quantity
    unlimited_slots: bool = False               # disables the aggregate ceiling
    unlimited_quantity: bool = False            # disables per-item stack caps

    def __post_init__(self):
        if not isinstance(self.entries, tuple):
            object.__setattr__(self, "entries", tuple(self.entries))

    # --- Introspection --------------------------------------------------------
    @property
    def total_quantity(self) -> int:
        return sum(e.quantity for e in self.entries)

    @property
    def remaining_slots(self) -> Optional[int]:
        """Free slots, or None when the ceiling is disabled."""
        if self.unlimited_slots:
            return None
        return self.max_slots - self.total_quantity

    @property
    def is_full(self) -> bool:
        remaining = self.remaining_slots
        return remaining is not None and remaining <= 0

    def __iter__(self) -> Iterator[InventoryEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, entry_id: str) -> Optional[InventoryEntry]:
        for e in self.entries:
            if e.id == entry_id:
                return e
        return None

    def find_mergeable(self, name: str) -> Optional[InventoryEntry]:
        """First catalog (non-custom) entry holding an item with this name."""
        for e in self.entries:
            if not e.is_custom and e.item.name == name:
                return e
        return None

    def stack_cap(self, entry: InventoryEntry) -> Optional[int]:
        """Upper quantity bound for `entry`, or None when quantities are unlimited."""
        if self.unlimited_quantity:
            return None
        return entry.item.max_quantity

    def count(self, name: str) -> int:
        return sum(e.quantity for e in self.entries if e.item.name == name)

    def equipped(self) -> List[InventoryEntry]:
        return [e for e in self.entries if e.is_equipped]

    def by_location(self) -> Dict[str, List[InventoryEntry]]:
        """Entries grouped by location tag, in first-seen order."""
        groups: Dict[str, List[InventoryEntry]] = {}
        for e in self.entries:
            groups.setdefault(e.location or DEFAULT_LOCATION, []).append(e)
        return groups


def check_invariants(state: InventoryState) -> List[str]:
    """
    Describe every broken document rule; an empty list means the document is valid.
    Checks the slot ceiling, per-entry stack bounds and catalog merge uniqueness.
    """
    problems: List[str] = []

    if not state.unlimited_slots and state.total_quantity > state.max_slots:
        problems.append(
            f"carrying {state.total_quantity} units but only {state.max_slots} slots"
        )

    seen: Dict[str, str] = {}
    for e in state.entries:
        if e.quantity < 1:
            problems.append(f"entry {e.id} ({e.item.name}) has quantity {e.quantity}")
        cap = state.stack_cap(e)
        if cap is not None and e.quantity > cap:
            problems.append(
                f"entry {e.id} ({e.item.name}) holds {e.quantity}, stack cap is {cap}"
            )
        if e.is_custom:
            continue
        other = seen.get(e.item.name)
        if other is not None:
            problems.append(f"entries {other} and {e.id} both hold catalog item {e.item.name!r}")
        else:
            seen[e.item.name] = e.id

    return problems
