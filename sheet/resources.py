from __future__ import annotations

import sys
from pathlib import Path

# --- Project / data root ------------------------------------------------------

def _project_root() -> Path:
    """
    Works in dev and with PyInstaller/pyoxidizer-like bundles.
    """
    if getattr(sys, "_MEIPASS", None):  # PyInstaller temp dir
        return Path(sys._MEIPASS)  # type: ignore[attr-defined]
    return Path(__file__).resolve().parents[1]  # sheet/ -> [project root]

_DATA_ROOT = _project_root() / "satchel" / "data"


def project_path(path: str | Path) -> Path:
    """
    Absolute paths pass through; relative ones resolve from the project root.
        project_path("sheet/config/defaults.yaml")
    """
    p = Path(path)
    if p.is_absolute():
        return p
    return _project_root() / p


def data_path(*parts: str) -> Path:
    """
    Build an absolute path into satchel/data. Example:
        data_path("catalog.yaml")
    """
    return _DATA_ROOT.joinpath(*parts)
