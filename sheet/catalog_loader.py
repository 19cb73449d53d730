from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from satchel.rules.catalog import Catalog
from satchel.rules.items import CatalogItem, item_from_dict
from sheet.resources import data_path, project_path

logger = logging.getLogger(__name__)

# Cache key: resolved path string
_catalog_cache: Dict[str, Catalog] = {}


def load_catalog_file(path: str | Path) -> Catalog:
    """
    Loads a single YAML file containing:
        items: [ {name, category, rarity, tier, maxQuantity, features: [...]}, ... ]
    Returns a Catalog. Malformed entries raise ValueError naming the file.
    """
    p = project_path(path)
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{p}: top level must be a mapping")
    raw_items = data.get("items", [])
    if not isinstance(raw_items, list):
        raise ValueError(f"{p}: 'items' must be a list")

    items: List[CatalogItem] = []
    for idx, raw in enumerate(raw_items):
        try:
            item = item_from_dict(raw, custom=False)
        except ValueError as e:
            raise ValueError(f"{p}: item #{idx}: {e}") from e
        items.append(item)  # type: ignore[arg-type]

    try:
        catalog = Catalog(items)
    except ValueError as e:
        raise ValueError(f"{p}: {e}") from e

    logger.info("Loaded %d catalog items from %s", len(catalog), p)
    return catalog


def load_catalog(path: Optional[str | Path] = None) -> Catalog:
    """Cached load; defaults to the bundled satchel/data/catalog.yaml."""
    p = project_path(path) if path is not None else data_path("catalog.yaml")
    key = str(p.resolve())
    cached = _catalog_cache.get(key)
    if cached is not None:
        return cached
    catalog = load_catalog_file(p)
    _catalog_cache[key] = catalog
    return catalog


def default_catalog() -> Catalog:
    return load_catalog()


def clear_catalog_cache() -> None:
    _catalog_cache.clear()
