# test_items.py
import unittest

from satchel.rules.inventory import InventoryEntry, InventoryState, check_invariants
from satchel.rules.items import (
    CatalogItem,
    Category,
    CustomItem,
    Feature,
    Rarity,
    Tier,
    build_custom_item,
    item_from_dict,
    item_to_dict,
)


class TestItemModels(unittest.TestCase):
    def test_max_quantity_below_one_is_normalized(self):
        self.assertEqual(CatalogItem(name="Odd", max_quantity=0).max_quantity, 1)

    def test_catalog_items_compare_by_value(self):
        self.assertEqual(CatalogItem(name="Rope"), CatalogItem(name="Rope"))
        self.assertFalse(CatalogItem(name="Rope").is_custom)

    def test_custom_items_are_distinct_values(self):
        a = CustomItem(name="Charm")
        b = CustomItem(name="Charm")
        self.assertNotEqual(a, b)
        self.assertTrue(a.is_custom)

    def test_edited_keeps_identity_marker(self):
        a = CustomItem(name="Charm")
        b = a.edited(name="Lucky Charm", max_quantity=3)
        self.assertEqual(b.uid, a.uid)
        self.assertEqual(b.name, "Lucky Charm")
        self.assertEqual(a.name, "Charm")

    def test_to_custom_copies_fields(self):
        item = CatalogItem(name="Bloodstone", category=Category.WEAPON_MODIFICATION,
                           rarity=Rarity.UNCOMMON, tier=Tier.T2, max_quantity=3,
                           features=[Feature("Weapon Enhancement", "Adds Brutal.")])
        custom = item.to_custom()
        self.assertIsInstance(custom, CustomItem)
        self.assertEqual(custom.name, item.name)
        self.assertEqual(custom.max_quantity, 3)
        self.assertEqual(custom.features, item.features)


class TestBuildCustomItem(unittest.TestCase):
    def test_blank_name_is_rejected(self):
        self.assertIsNone(build_custom_item("   "))
        self.assertIsNone(build_custom_item(""))

    def test_normalizes_form_values(self):
        item = build_custom_item("  Grappling Hook ", "Utility", tier="2",
                                 max_quantity="0", cost="12.5", description="  ")
        self.assertEqual(item.name, "Grappling Hook")
        self.assertEqual(item.tier, Tier.T2)
        self.assertEqual(item.max_quantity, 1)
        self.assertEqual(item.cost, 12)
        self.assertIsNone(item.description)

    def test_bad_cost_is_dropped(self):
        self.assertIsNone(build_custom_item("Pebble", cost="lots").cost)

    def test_category_rules(self):
        self.assertTrue(build_custom_item("Tonic", Category.POTION).is_consumable)
        self.assertTrue(build_custom_item("Snack", "Consumable").is_consumable)
        self.assertEqual(build_custom_item("Idol", "Relic", rarity="Common").rarity, Rarity.LEGENDARY)

    def test_unknown_category_raises(self):
        with self.assertRaises(ValueError):
            build_custom_item("Thing", "Furniture")


class TestItemMapping(unittest.TestCase):
    def test_catalog_round_trip(self):
        item = CatalogItem(name="Stride Potion", category=Category.CONSUMABLE,
                           max_quantity=5, is_consumable=True, cost=3,
                           features=(Feature("Agility Enhancement", "+1 Agility"),))
        self.assertEqual(item_from_dict(item_to_dict(item)), item)

    def test_custom_marker_keeps_variant(self):
        item = CustomItem(name="Charm")
        back = item_from_dict(item_to_dict(item))
        self.assertIsInstance(back, CustomItem)
        self.assertEqual(back.uid, item.uid)

    def test_missing_name_raises(self):
        with self.assertRaises(ValueError):
            item_from_dict({"category": "Utility"})

    def test_unknown_rarity_raises(self):
        with self.assertRaises(ValueError):
            item_from_dict({"name": "X", "rarity": "Mythic"})


class TestDocumentQueries(unittest.TestCase):
    def test_by_location_groups_in_order(self):
        rope = InventoryEntry(item=CatalogItem(name="Rope"))
        torch = InventoryEntry(item=CatalogItem(name="Torch"), location="belt")
        stone = InventoryEntry(item=CatalogItem(name="Whetstone"), location="")
        s = InventoryState(entries=[rope, torch, stone])
        groups = s.by_location()
        self.assertEqual(list(groups), ["backpack", "belt"])
        self.assertEqual(groups["backpack"], [rope, stone])

    def test_check_invariants_reports_problems(self):
        rope = CatalogItem(name="Rope", max_quantity=2)
        s = InventoryState(
            entries=(InventoryEntry(item=rope, quantity=3), InventoryEntry(item=rope)),
            max_slots=3,
        )
        problems = check_invariants(s)
        self.assertEqual(len(problems), 3)

    def test_remaining_slots(self):
        s = InventoryState(entries=(InventoryEntry(item=CatalogItem(name="Rope"), quantity=2),), max_slots=2)
        self.assertEqual(s.remaining_slots, 0)
        self.assertTrue(s.is_full)
        self.assertEqual(s.count("Rope"), 2)


if __name__ == "__main__":
    unittest.main()
