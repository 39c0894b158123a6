import unittest
from unittest.mock import MagicMock

import requests

from projects_api.db import StoreError
from projects_api.postgrest import RestProjectStore

ROW = {
    "id": 7,
    "name": "Atlas",
    "description": None,
    "created_at": "2024-05-01T10:00:00.000Z",
}


def _response(status_code=200, payload=None, content=b"[]"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = "Bad Request" if status_code >= 400 else "OK"
    response.content = content
    response.text = content.decode("utf-8")
    response.json.return_value = payload
    return response


class RestProjectStoreTests(unittest.TestCase):
    def setUp(self):
        self.session = MagicMock()
        self.store = RestProjectStore(
            "https://db.example.supabase.co/", "service-key", session=self.session
        )

    def test_list_orders_and_authenticates(self):
        self.session.request.return_value = _response(payload=[ROW], content=b"[...]")
        projects = self.store.list_projects()
        self.assertEqual([p.id for p in projects], [7])

        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("GET", "https://db.example.supabase.co/rest/v1/projects"))
        self.assertEqual(kwargs["params"]["order"], "created_at.desc,id.desc")
        self.assertEqual(kwargs["headers"]["apikey"], "service-key")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer service-key")

    def test_get_uses_eq_filter(self):
        self.session.request.return_value = _response(payload=[], content=b"[]")
        self.assertIsNone(self.store.get_project(3))
        self.assertEqual(self.session.request.call_args.kwargs["params"]["id"], "eq.3")

    def test_create_requests_representation(self):
        self.session.request.return_value = _response(
            status_code=201, payload=[ROW], content=b"[...]"
        )
        created = self.store.create_project({"name": "Atlas"})
        self.assertEqual(created.name, "Atlas")

        kwargs = self.session.request.call_args.kwargs
        self.assertEqual(kwargs["json"], {"name": "Atlas"})
        self.assertEqual(kwargs["headers"]["Prefer"], "return=representation")

    def test_update_and_delete_missing_rows(self):
        self.session.request.return_value = _response(payload=[], content=b"[]")
        self.assertIsNone(self.store.update_project(9, {"name": "x"}))
        self.assertFalse(self.store.delete_project(9))

    def test_delete_existing(self):
        self.session.request.return_value = _response(
            payload=[{"id": 7}], content=b"[...]"
        )
        self.assertTrue(self.store.delete_project(7))
        self.assertEqual(self.session.request.call_args.args[0], "DELETE")

    def test_error_status_raises_store_error(self):
        self.session.request.return_value = _response(
            status_code=400,
            payload={"message": "column projects.nope does not exist"},
            content=b"{...}",
        )
        with self.assertRaises(StoreError) as ctx:
            self.store.list_projects()
        self.assertEqual(ctx.exception.status_code, 502)
        self.assertIn("column projects.nope does not exist", str(ctx.exception))

    def test_network_failure_raises_store_error(self):
        self.session.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(StoreError):
            self.store.get_project(1)

    def test_requires_credentials(self):
        with self.assertRaises(ValueError):
            RestProjectStore("", "key")
        with self.assertRaises(ValueError):
            RestProjectStore("https://db.example.supabase.co", "")


if __name__ == "__main__":
    unittest.main()
