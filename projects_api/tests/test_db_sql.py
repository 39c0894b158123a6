import unittest

from projects_api.db import InMemoryProjectStore, SqlProjectStore


class SqlProjectStoreTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL store.
    """

    def setUp(self):
        self.store = SqlProjectStore("sqlite+pysqlite:///:memory:")

    def test_create_and_get(self):
        created = self.store.create_project({"name": "Atlas", "description": "maps"})
        self.assertIsInstance(created.id, int)
        self.assertTrue(created.created_at.endswith("Z"))

        fetched = self.store.get_project(created.id)
        self.assertIsNotNone(fetched)
        self.assertEqual(fetched.name, "Atlas")
        self.assertEqual(fetched.description, "maps")
        self.assertEqual(fetched.created_at, created.created_at)

    def test_list_newest_first(self):
        older = self.store.create_project({"name": "older"})
        newer = self.store.create_project({"name": "newer"})
        listed = self.store.list_projects()
        self.assertEqual([p.id for p in listed], [newer.id, older.id])

    def test_partial_update(self):
        created = self.store.create_project({"name": "a", "description": "keep"})
        updated = self.store.update_project(created.id, {"name": "b"})
        self.assertEqual(updated.name, "b")
        self.assertEqual(updated.description, "keep")

        cleared = self.store.update_project(created.id, {"description": None})
        self.assertIsNone(cleared.description)
        self.assertIsNone(self.store.update_project(9999, {"name": "x"}))

    def test_delete(self):
        created = self.store.create_project({"name": "gone"})
        self.assertTrue(self.store.delete_project(created.id))
        self.assertFalse(self.store.delete_project(created.id))
        self.assertIsNone(self.store.get_project(created.id))


class InMemoryProjectStoreTests(unittest.TestCase):
    def test_ids_are_unique_and_reset(self):
        store = InMemoryProjectStore()
        first = store.create_project({"name": "one"})
        second = store.create_project({"name": "two"})
        self.assertNotEqual(first.id, second.id)
        self.assertIsNone(first.description)

        store.reset()
        self.assertEqual(store.list_projects(), [])
        self.assertEqual(store.create_project({"name": "three"}).id, 1)


if __name__ == "__main__":
    unittest.main()
