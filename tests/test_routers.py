import unittest

from fastapi.testclient import TestClient
from fakes import FakeRemoteStore, make_record, seeded_store

from stockcount.config import Settings
from stockcount.core.constants import EntityKind
from stockcount.core.errors import RemoteUnavailable
from stockcount.main import create_app


class RouterTest(unittest.TestCase):
    def setUp(self):
        self.store = seeded_store()
        self.store.seed(EntityKind.INVENTORY, make_record("i100"))
        app = create_app(gateway=self.store, settings=Settings())
        self.client_context = TestClient(app)
        self.client = self.client_context.__enter__()

    def tearDown(self):
        self.client_context.__exit__(None, None, None)

    def test_initial_load_and_state(self):
        response = self.client.get("/state")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertFalse(payload["loading"])
        self.assertEqual(payload["categories"], [{"id": "c100", "name": "Dairy"}])
        self.assertEqual(payload["inventory"][0]["productName"], "Milk")

    def test_health(self):
        payload = self.client.get("/health").json()
        self.assertEqual(payload["status"], "ok")
        self.assertTrue(payload["remote_configured"])

    def test_create_and_delete_category(self):
        response = self.client.post("/categories", json={"name": "Drinks"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), {"id": "c1", "name": "Drinks"})

        duplicate = self.client.post("/categories", json={"name": "drinks"})
        self.assertEqual(duplicate.status_code, 400)

        deleted = self.client.delete("/categories/c1")
        self.assertEqual(deleted.json(), {"status": "deleted", "id": "c1"})
        names = [item["name"] for item in self.client.get("/categories").json()]
        self.assertEqual(names, ["Dairy"])

    def test_create_product_and_search(self):
        response = self.client.post("/products", json={"name": "Yogurt", "category": "Dairy"})
        self.assertEqual(response.status_code, 201)

        listed = self.client.get("/products").json()
        self.assertEqual([item["name"] for item in listed], ["Yogurt", "Milk"])
        found = self.client.get("/products/search", params={"category": "Dairy", "q": "yog"}).json()
        self.assertEqual([item["id"] for item in found], ["p1"])
        self.assertEqual(self.client.get("/products/categories").json(), {"categories": ["Dairy"]})

    def test_inventory_entry(self):
        response = self.client.post(
            "/inventory",
            json={"productId": "p100", "location": "Aisle1", "quantity": "4"},
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["id"], "i1")
        self.assertEqual(body["productName"], "Milk")
        self.assertEqual(body["quantity"], 4)

        ids = [item["id"] for item in self.client.get("/inventory").json()]
        self.assertEqual(ids, ["i1", "i100"])

        invalid = self.client.post(
            "/inventory",
            json={"productId": "p100", "location": "Aisle1", "quantity": "-2"},
        )
        self.assertEqual(invalid.status_code, 400)

    def test_remote_failure_maps_to_service_unavailable(self):
        self.store.fail(
            "insert",
            EntityKind.LOCATION,
            RemoteUnavailable("offline", kind=EntityKind.LOCATION, operation="insert"),
        )
        response = self.client.post("/locations", json={"name": "Dock"})
        self.assertEqual(response.status_code, 503)
        names = [item["name"] for item in self.client.get("/locations").json()]
        self.assertEqual(names, ["Aisle1"])

    def test_remote_rejection_maps_to_conflict(self):
        self.store.fail("delete", EntityKind.INVENTORY)
        response = self.client.delete("/inventory/i100")
        self.assertEqual(response.status_code, 409)
        ids = [item["id"] for item in self.client.get("/inventory").json()]
        self.assertEqual(ids, ["i100"])

    def test_clear_requires_confirmation(self):
        self.assertEqual(self.client.delete("/inventory").status_code, 400)
        response = self.client.delete("/inventory", params={"confirm": "true"})
        self.assertEqual(response.json(), {"status": "cleared", "removed": 1})
        self.assertEqual(self.client.get("/inventory").json(), [])

    def test_summary_and_csv_export(self):
        summary = self.client.get("/inventory/summary").json()
        self.assertEqual(summary["recordCount"], 1)
        self.assertEqual(summary["products"][0]["totalQuantity"], 5)

        response = self.client.get("/inventory/export.csv")
        self.assertEqual(response.status_code, 200)
        self.assertIn("attachment; filename=inventory_", response.headers["content-disposition"])
        self.assertIn('"i100","Dairy","Milk","Aisle1",5,', response.text)

    def test_backup_export_and_disabled_import(self):
        backup = self.client.get("/backup").json()
        self.assertEqual(backup["version"], 1)
        self.assertEqual(len(backup["inventory"]), 1)
        response = self.client.post("/backup/import", json=backup)
        self.assertEqual(response.status_code, 409)

    def test_views_and_home(self):
        response = self.client.post("/views/entry")
        self.assertEqual(response.json(), {"view": "entry", "redirect": None})
        self.assertEqual(self.client.post("/views/nowhere").status_code, 400)

        calls_before = self.store.calls.count(("list", EntityKind.CATEGORY))
        page = self.client.get("/home")
        self.assertEqual(page.status_code, 200)
        self.assertIn("Stock Count", page.text)
        self.assertEqual(self.store.calls.count(("list", EntityKind.CATEGORY)), calls_before + 1)

        root = self.client.get("/", follow_redirects=False)
        self.assertEqual(root.status_code, 302)


class UnconfiguredRouterTest(unittest.TestCase):
    def test_changes_are_refused(self):
        app = create_app(gateway=FakeRemoteStore(configured=False), settings=Settings())
        with TestClient(app) as client:
            response = client.post("/categories", json={"name": "Dairy"})
            self.assertEqual(response.status_code, 503)
            self.assertIn("not configured", response.json()["detail"])
            self.assertFalse(client.get("/health").json()["remote_configured"])


if __name__ == "__main__":
    unittest.main()
