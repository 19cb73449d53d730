# satchel/rules/items.py
from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple
import uuid


# --- Enumerations -------------------------------------------------------------

class Category(str, Enum):
    UTILITY = "Utility"
    CONSUMABLE = "Consumable"
    POTION = "Potion"
    RELIC = "Relic"
    WEAPON_MODIFICATION = "Weapon Modification"
    ARMOR_MODIFICATION = "Armor Modification"
    RECIPE = "Recipe"


class Rarity(str, Enum):
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    LEGENDARY = "Legendary"


class Tier(str, Enum):
    T1 = "1"
    T2 = "2"
    T3 = "3"
    T4 = "4"


def _enum_value(enum_cls, raw: Any, label: str):
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(str(raw).strip())
    except ValueError:
        raise ValueError(f"Unknown {label} {raw!r}") from None


# --- Items --------------------------------------------------------------------

@dataclass(frozen=True)
class Feature:
    name: str
    description: str = ""


@dataclass(frozen=True)
class Item:
    """
    Common shape shared by catalog and custom items. Items are immutable;
    "editing" one means building a new snapshot.
    """
    name: str
    category: Category = Category.UTILITY
    rarity: Rarity = Rarity.COMMON
    tier: Tier = Tier.T1
    max_quantity: int = 1
    cost: Optional[int] = None
    is_consumable: bool = False
    features: Tuple[Feature, ...] = ()
    description: Optional[str] = None

    def __post_init__(self):
        # Stack caps below one make no sense; normalize like the authoring form does
        if self.max_quantity < 1:
            object.__setattr__(self, "max_quantity", 1)
        if not isinstance(self.features, tuple):
            object.__setattr__(self, "features", tuple(self.features))

    @property
    def is_custom(self) -> bool:
        return False


@dataclass(frozen=True)
class CatalogItem(Item):
    """Read-only catalog definition. Compared and merged by name."""

    def to_custom(self) -> "CustomItem":
        base = {f.name: getattr(self, f.name) for f in fields(Item)}
        return CustomItem(**base)


@dataclass(frozen=True)
class CustomItem(Item):
    """User-authored item. Never merged with anything, even on a name clash."""
    uid: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_custom(self) -> bool:
        return True

    def edited(self, **changes: Any) -> "CustomItem":
        """New snapshot with `changes` applied, keeping the same uid."""
        return replace(self, **changes)


# --- Authoring ----------------------------------------------------------------

def _parse_cost(raw: Any) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return None


def build_custom_item(
    name: str,
    category: Category | str = Category.UTILITY,
    *,
    rarity: Rarity | str = Rarity.COMMON,
    tier: Tier | str = Tier.T1,
    max_quantity: Any = 1,
    is_consumable: bool = False,
    cost: Any = None,
    description: Optional[str] = None,
    features: Iterable[Feature] = (),
) -> Optional[CustomItem]:
    """
    Build a custom item from loosely-typed form values.
    Returns None when the name is blank (the only hard validation rule).
    """
    clean_name = (name or "").strip()
    if not clean_name:
        return None

    cat = _enum_value(Category, category, "category")
    rar = _enum_value(Rarity, rarity, "rarity")
    try:
        qty = max(1, int(max_quantity or 1))
    except (TypeError, ValueError):
        qty = 1

    consumable = bool(is_consumable)
    if cat in (Category.CONSUMABLE, Category.POTION):
        consumable = True
    if cat is Category.RELIC:
        rar = Rarity.LEGENDARY

    return CustomItem(
        name=clean_name,
        category=cat,
        rarity=rar,
        tier=_enum_value(Tier, tier, "tier"),
        max_quantity=qty,
        cost=_parse_cost(cost),
        is_consumable=consumable,
        features=tuple(features),
        description=(description or "").strip() or None,
    )


# --- Plain-data mapping -------------------------------------------------------

def item_to_dict(item: Item) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": item.name,
        "category": item.category.value,
        "rarity": item.rarity.value,
        "tier": item.tier.value,
        "maxQuantity": item.max_quantity,
        "isConsumable": item.is_consumable,
        "features": [{"name": f.name, "description": f.description} for f in item.features],
    }
    if item.cost is not None:
        data["cost"] = item.cost
    if item.description:
        data["description"] = item.description
    if isinstance(item, CustomItem):
        data["homebrew"] = True
        data["uid"] = item.uid
    return data


def item_from_dict(data: Dict[str, Any], *, custom: Optional[bool] = None) -> Item:
    """
    Inverse of item_to_dict. `custom` forces the variant; by default the
    `homebrew` marker decides. Raises ValueError on malformed data.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Item must be a mapping, got {type(data).__name__}")
    name = str(data.get("name") or "").strip()
    if not name:
        raise ValueError("Item is missing 'name'")

    features = []
    for raw in data.get("features", []) or []:
        if not isinstance(raw, dict):
            continue
        features.append(Feature(name=str(raw.get("name") or ""),
                                description=str(raw.get("description") or "")))

    kwargs: Dict[str, Any] = dict(
        name=name,
        category=_enum_value(Category, data.get("category", Category.UTILITY.value), "category"),
        rarity=_enum_value(Rarity, data.get("rarity", Rarity.COMMON.value), "rarity"),
        tier=_enum_value(Tier, data.get("tier", Tier.T1.value), "tier"),
        max_quantity=int(data.get("maxQuantity", 1) or 1),
        cost=_parse_cost(data.get("cost")),
        is_consumable=bool(data.get("isConsumable", False)),
        features=tuple(features),
        description=data.get("description") or None,
    )

    is_custom = bool(data.get("homebrew", False)) if custom is None else custom
    if is_custom:
        if data.get("uid"):
            kwargs["uid"] = str(data["uid"])
        return CustomItem(**kwargs)
    return CatalogItem(**kwargs)
