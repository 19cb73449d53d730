# satchel/rules/selection.py
"""
Picker staging: a draft of chosen items that respects the same slot budget as
the inventory, kept apart from the document until the user confirms.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from .inventory import InventoryState
from .items import Item
from .stacking import StackingEngine, add_items


@dataclass(frozen=True)
class DraftLine:
    item: Item
    quantity: int = 1


@dataclass(frozen=True)
class SelectionDraft:
    """Item name -> DraftLine, in selection order. Never persisted."""
    lines: Tuple[DraftLine, ...] = ()

    def __contains__(self, name: object) -> bool:
        return any(l.item.name == name for l in self.lines)

    def __iter__(self) -> Iterator[DraftLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def get(self, name: str) -> Optional[DraftLine]:
        for l in self.lines:
            if l.item.name == name:
                return l
        return None

    def as_dict(self) -> Dict[str, DraftLine]:
        return {l.item.name: l for l in self.lines}


EMPTY_DRAFT = SelectionDraft()


def session_budget(state: InventoryState) -> Optional[int]:
    """Slots a picker session may fill; None when the document has no ceiling."""
    if state.unlimited_slots:
        return None
    return max(0, state.max_slots - state.total_quantity)


def total_selected(draft: SelectionDraft) -> int:
    return sum(l.quantity for l in draft.lines)


def toggle_draft_item(draft: SelectionDraft, item: Item, budget: Optional[int]) -> SelectionDraft:
    """
    Deselect `item` if it is staged, otherwise stage one unit of it, but only
    while the draft is still under budget.
    """
    if item.name in draft:
        return SelectionDraft(tuple(l for l in draft.lines if l.item.name != item.name))
    if budget is not None and total_selected(draft) >= budget:
        return draft
    return SelectionDraft(draft.lines + (DraftLine(item=item, quantity=1),))


def change_draft_quantity(
    draft: SelectionDraft,
    item: Item,
    delta: int,
    budget: Optional[int] = None,
    per_item_cap: Optional[int] = None,
    unlimited_quantity: bool = False,
) -> SelectionDraft:
    """
    Move a staged item's quantity by `delta` within [1, cap]. The cap is
    `per_item_cap` if given, else the item's own limit (none at all when
    `unlimited_quantity`), and for increases whatever the shared budget still
    allows. Unstaged items are left alone.
    """
    existing = draft.get(item.name)
    if existing is None:
        return draft

    limit = per_item_cap
    if limit is None and not unlimited_quantity:
        limit = item.max_quantity
    new_qty = max(1, existing.quantity + delta)
    if limit is not None:
        new_qty = min(limit, new_qty)
    if delta > 0 and budget is not None:
        free = max(0, budget - total_selected(draft))
        new_qty = min(new_qty, existing.quantity + free)
    new_qty = max(1, new_qty)

    if new_qty == existing.quantity:
        return draft
    lines = tuple(
        DraftLine(item=l.item, quantity=new_qty) if l.item.name == item.name else l
        for l in draft.lines
    )
    return SelectionDraft(lines)


def materialize(draft: SelectionDraft) -> Tuple[Item, ...]:
    """One item value per staged unit, each item's units kept together."""
    return tuple(l.item for l in draft.lines for _ in range(l.quantity))


def reset() -> SelectionDraft:
    return EMPTY_DRAFT


class PickerSession:
    """
    One picker session: the draft plus the budget fixed when it was opened.
    commit() feeds the flat list to add_items, which re-checks capacity against
    the live document, so a stale budget can never overfill it.
    """

    def __init__(self, state: InventoryState, per_item_caps: Optional[Dict[str, int]] = None) -> None:
        self.budget: Optional[int] = session_budget(state)
        self.unlimited_quantity: bool = state.unlimited_quantity
        self.per_item_caps: Dict[str, int] = dict(per_item_caps or {})
        self.draft: SelectionDraft = EMPTY_DRAFT

    # --- Introspection --------------------------------------------------------
    @property
    def total(self) -> int:
        return total_selected(self.draft)

    @property
    def remaining(self) -> Optional[int]:
        if self.budget is None:
            return None
        return max(0, self.budget - self.total)

    def can_confirm(self, allow_empty: bool = False) -> bool:
        return allow_empty or self.total > 0

    def is_selected(self, item: Item) -> bool:
        return item.name in self.draft

    def is_selectable(self, item: Item) -> bool:
        """False for unstaged items once the budget is used up (rendered disabled)."""
        if self.is_selected(item):
            return True
        return self.remaining is None or self.remaining > 0

    def quantity_of(self, item: Item) -> int:
        line = self.draft.get(item.name)
        return line.quantity if line else 0

    # --- Mutations ------------------------------------------------------------
    def toggle(self, item: Item) -> None:
        self.draft = toggle_draft_item(self.draft, item, self.budget)

    def change_quantity(self, item: Item, delta: int) -> None:
        self.draft = change_draft_quantity(
            self.draft, item, delta, self.budget,
            self.per_item_caps.get(item.name), self.unlimited_quantity,
        )

    def items(self) -> Tuple[Item, ...]:
        return materialize(self.draft)

    def reset(self) -> None:
        self.draft = reset()

    def cancel(self) -> None:
        self.reset()

    def commit(self, state: InventoryState, engine: Optional[StackingEngine] = None) -> InventoryState:
        """Add the staged units in one batch (through `engine` if given) and clear the draft."""
        items = self.items()
        new_state = engine.add_items(state, items) if engine is not None else add_items(state, items)
        self.reset()
        return new_state
