import logging

from satchel.rules.stacking import StackingEngine, default_can_equip
from sheet.catalog_loader import load_catalog
from sheet.codec import dump_yaml
from sheet.editor import InventoryEditor
from sheet.settings import configure_logging, load_settings, new_inventory

logger = logging.getLogger("run")


def main():
    cfg = load_settings()
    configure_logging(cfg.logging)

    catalog = load_catalog(cfg.catalog.path)
    editor = InventoryEditor(
        new_inventory(cfg.inventory),
        on_change=lambda s: logger.info("inventory now %d/%s", s.total_quantity, s.remaining_slots),
        engine=StackingEngine(can_equip=default_can_equip),
        catalog=catalog,
    )

    picker = editor.open_picker()
    for name in ("Stride Potion", "Alistair's Torch"):
        item = catalog.get(name)
        if item is not None:
            picker.toggle(item)
    potion = catalog.get("Stride Potion")
    if potion is not None:
        picker.change_quantity(potion, 2)
    editor.confirm_picker()

    print(dump_yaml(editor.state))

if __name__ == "__main__":
    main()
