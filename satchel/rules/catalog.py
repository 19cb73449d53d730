# satchel/rules/catalog.py
from __future__ import annotations
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .items import CatalogItem, Category, Item, Rarity, Tier


class Catalog:
    """Read-only set of catalog items, looked up by name."""

    def __init__(self, items: Iterable[CatalogItem]) -> None:
        self._items: Tuple[CatalogItem, ...] = tuple(items)
        self._by_name: Dict[str, CatalogItem] = {}
        for it in self._items:
            if it.name in self._by_name:
                raise ValueError(f"Duplicate catalog item name {it.name!r}")
            self._by_name[it.name] = it

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Optional[CatalogItem]:
        return self._by_name.get(name)

    def by_category(self, category: Category | str) -> List[CatalogItem]:
        cat = Category(category)
        return [it for it in self._items if it.category is cat]

    def categories(self) -> List[Category]:
        return [c for c in Category if any(it.category is c for it in self._items)]


# --- Picker filtering ---------------------------------------------------------

def _match_score(needle: str, hay: str) -> Optional[int]:
    """0 for a prefix hit, 1 for a substring hit, None for a miss."""
    hay = hay.lower()
    if hay.startswith(needle):
        return 0
    if needle in hay:
        return 1
    return None


def _rank(item: Item, needle: str) -> Optional[int]:
    fields = (
        item.name,
        " ".join(f.name for f in item.features),
        " ".join(f.description for f in item.features),
    )
    for weight, text in enumerate(fields):
        score = _match_score(needle, text)
        if score is not None:
            return weight * 2 + score
    return None


def search_items(items: Sequence[Item], search: str) -> List[Item]:
    """
    Keep items whose name or feature text contains `search` (case-insensitive).
    Name hits come first, then feature names, then feature descriptions;
    prefix hits beat substring hits; ties keep their input order.
    """
    needle = search.strip().lower()
    if not needle:
        return list(items)
    scored = []
    for pos, it in enumerate(items):
        rank = _rank(it, needle)
        if rank is not None:
            scored.append((rank, pos, it))
    scored.sort(key=lambda t: (t[0], t[1]))
    return [it for _, _, it in scored]


def filter_items(
    items: Iterable[Item],
    categories: Iterable[Category | str] = (),
    rarities: Iterable[Rarity | str] = (),
    tiers: Iterable[Tier | str] = (),
    search: str = "",
    allowed_tiers: Optional[Iterable[Tier | str]] = None,
) -> List[Item]:
    """
    Picker filter. `allowed_tiers` is a hard gate set by the host; the other
    selections are user toggles where an empty selection means "any".
    """
    result = list(items)

    if allowed_tiers:
        gate = {Tier(t) for t in allowed_tiers}
        result = [it for it in result if it.tier in gate]

    cats = {Category(c) for c in categories}
    if cats:
        result = [it for it in result if it.category in cats]

    rars = {Rarity(r) for r in rarities}
    if rars:
        result = [it for it in result if it.rarity in rars]

    tset = {Tier(t) for t in tiers}
    if tset:
        result = [it for it in result if it.tier in tset]

    if search.strip():
        result = search_items(result, search)

    return result
