import unittest
from datetime import datetime, timezone
from decimal import Decimal

from apps.catalog.dtos import ProductDTO
from apps.catalog.store import CatalogStore


def product(pid, name="P"):
    return ProductDTO(product_id=pid, name=name, price=Decimal("1"))


class CatalogStoreTests(unittest.TestCase):
    def test_empty_store_answers_none(self):
        store = CatalogStore()
        self.assertIsNone(store.find_by_id(1))
        self.assertEqual(store.all(), ())
        self.assertFalse(store.is_loaded)
        self.assertFalse(store.fetch_attempted)

    def test_duplicate_ids_keep_first(self):
        store = CatalogStore([product(1, "first"), product(1, "second"), product(2)])
        self.assertEqual(len(store), 2)
        self.assertEqual(store.find_by_id(1).name, "first")
        self.assertIn(2, store)

    def test_replace_swaps_products_and_marks_loaded(self):
        store = CatalogStore([product(1)])
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        store.replace([product(5)], fetched_at=now)
        self.assertNotIn(1, store)
        self.assertIn(5, store)
        self.assertTrue(store.is_loaded)
        self.assertTrue(store.fetch_attempted)
        self.assertEqual(store.fetched_at, now)

    def test_mark_attempted_keeps_products(self):
        store = CatalogStore([product(1)])
        store.mark_attempted()
        self.assertTrue(store.fetch_attempted)
        self.assertEqual(len(store), 1)
