# test_catalog_loader.py
import os
import tempfile
import unittest

from satchel.rules.items import CatalogItem, Category, Tier
from sheet.catalog_loader import clear_catalog_cache, default_catalog, load_catalog, load_catalog_file


def _write(text: str) -> str:
    fd, path = tempfile.mkstemp(suffix=".yaml")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    return path


class TestCatalogLoader(unittest.TestCase):
    def tearDown(self):
        clear_catalog_cache()

    def test_bundled_catalog(self):
        cat = default_catalog()
        potion = cat.get("Stride Potion")
        self.assertIsInstance(potion, CatalogItem)
        self.assertEqual(potion.category, Category.CONSUMABLE)
        self.assertEqual(potion.max_quantity, 5)
        self.assertTrue(potion.is_consumable)
        self.assertEqual(cat.get("Stride Relic").tier, Tier.T4)
        self.assertGreater(len(cat.by_category(Category.UTILITY)), 0)

    def test_load_is_cached(self):
        self.assertIs(load_catalog(), load_catalog())
        first = load_catalog()
        clear_catalog_cache()
        self.assertIsNot(load_catalog(), first)

    def test_minimal_file(self):
        path = _write("items:\n  - name: Rope\n    maxQuantity: 3\n")
        self.addCleanup(os.remove, path)
        cat = load_catalog_file(path)
        self.assertEqual(cat.get("Rope").max_quantity, 3)
        self.assertEqual(cat.get("Rope").category, Category.UTILITY)

    def test_homebrew_marker_is_ignored(self):
        path = _write("items:\n  - name: Rope\n    homebrew: true\n")
        self.addCleanup(os.remove, path)
        self.assertFalse(load_catalog_file(path).get("Rope").is_custom)

    def test_errors_name_the_file(self):
        cases = [
            "items: nope\n",
            "items:\n  - name: Rope\n  - name: Rope\n",
            "items:\n  - category: Utility\n",
            "items:\n  - name: Gem\n    rarity: Mythic\n",
            "- not a mapping\n",
        ]
        for text in cases:
            path = _write(text)
            self.addCleanup(os.remove, path)
            with self.assertRaises(ValueError) as ctx:
                load_catalog_file(path)
            self.assertIn(path, str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
