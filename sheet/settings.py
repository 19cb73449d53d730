from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict
import logging

import yaml

from satchel.rules.inventory import DEFAULT_MAX_SLOTS, InventoryState
from sheet.resources import project_path

DEFAULTS_PATH = "sheet/config/defaults.yaml"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class InventoryCfg:
    max_slots: int = DEFAULT_MAX_SLOTS
    unlimited_slots: bool = False
    unlimited_quantity: bool = False


@dataclass
class CatalogCfg:
    path: str = "satchel/data/catalog.yaml"   # relative paths resolve from the project root


@dataclass
class LoggingCfg:
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class AppCfg:
    inventory: InventoryCfg = field(default_factory=InventoryCfg)
    catalog: CatalogCfg = field(default_factory=CatalogCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)


def _get(d: dict, path: str, default: Any):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _as_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)


def read_yaml(path: str | Path) -> Dict[str, Any]:
    """Parse a YAML mapping; a missing file reads as empty."""
    p = project_path(path)
    if not p.exists():
        return {}
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{p}: top level must be a mapping")
    return data


def load_settings(path: str | Path = DEFAULTS_PATH) -> AppCfg:
    data = read_yaml(path)

    return AppCfg(
        inventory=InventoryCfg(
            max_slots=max(0, int(_get(data, "inventory.max_slots", DEFAULT_MAX_SLOTS))),
            unlimited_slots=_as_bool(_get(data, "inventory.unlimited_slots", False)),
            unlimited_quantity=_as_bool(_get(data, "inventory.unlimited_quantity", False)),
        ),
        catalog=CatalogCfg(
            path=str(_get(data, "catalog.path", CatalogCfg.path)),
        ),
        logging=LoggingCfg(
            level=str(_get(data, "logging.level", "INFO")).upper(),
            format=str(_get(data, "logging.format", DEFAULT_LOG_FORMAT)),
        ),
    )


def new_inventory(cfg: InventoryCfg) -> InventoryState:
    """Empty document using the configured ceiling and override flags."""
    return InventoryState(
        entries=(),
        max_slots=cfg.max_slots,
        unlimited_slots=cfg.unlimited_slots,
        unlimited_quantity=cfg.unlimited_quantity,
    )


def configure_logging(cfg: LoggingCfg) -> None:
    level = logging.getLevelName(cfg.level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=cfg.format)
