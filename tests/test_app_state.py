import unittest
from unittest.mock import patch

import httpx

from fakes import FakeRemoteStore, make_record, seeded_store

from stockcount.config import Settings
from stockcount.core.constants import EntityKind
from stockcount.core.errors import (
    GatewayNotConfigured,
    InvalidEntry,
    RemoteRejected,
    RemoteUnavailable,
)
from stockcount.schemas.product import Category, Location
from stockcount.services.app_state import ViewStateController
from stockcount.services.remote_store import RemoteStoreGateway


class ViewStateControllerTest(unittest.IsolatedAsyncioTestCase):
    def make_controller(self, store):
        return ViewStateController(store, settings=Settings(OPTIMISTIC_TIMEOUT_SECONDS=5))

    async def test_reload_replaces_all_collections(self):
        store = seeded_store()
        store.seed(EntityKind.INVENTORY, make_record("i1", minutes_ago=30))
        store.seed(EntityKind.INVENTORY, make_record("i2", minutes_ago=5))
        controller = self.make_controller(store)

        self.assertTrue(await controller.reload_all())

        state = controller.state
        self.assertFalse(state.loading)
        self.assertEqual(state.categories.ids(), ["c100"])
        self.assertEqual(state.locations.ids(), ["l100"])
        self.assertEqual(state.products.ids(), ["p100"])
        self.assertEqual(state.inventory.ids(), ["i2", "i1"])
        self.assertIsNotNone(state.last_loaded_at)

    async def test_reload_twice_is_idempotent(self):
        store = seeded_store()
        store.seed(EntityKind.INVENTORY, make_record("i1"))
        controller = self.make_controller(store)

        await controller.reload_all()
        first = {kind: controller.state.collection(kind).items for kind in EntityKind}
        await controller.reload_all()
        second = {kind: controller.state.collection(kind).items for kind in EntityKind}
        self.assertEqual(first, second)

    async def test_failed_reload_keeps_existing_data(self):
        store = seeded_store()
        controller = self.make_controller(store)
        await controller.reload_all()

        store.seed(EntityKind.CATEGORY, Category(id="c200", name="Drinks"))
        store.fail("list", EntityKind.PRODUCT, RemoteUnavailable("offline"))
        with self.assertLogs("stockcount.services.app_state", level="ERROR"):
            self.assertFalse(await controller.reload_all())
        self.assertEqual(controller.state.categories.ids(), ["c100"])

    async def test_reload_collects_every_failed_list(self):
        store = seeded_store()
        controller = self.make_controller(store)
        await controller.reload_all()

        store.fail("list", EntityKind.CATEGORY, RemoteUnavailable("offline"))
        store.fail("list", EntityKind.INVENTORY, RemoteRejected("bad filter"))
        with self.assertLogs("stockcount.services.app_state", level="ERROR"):
            self.assertFalse(await controller.reload_all())
        listed = [kind for operation, kind in store.calls[-4:] if operation == "list"]
        self.assertEqual(sorted(listed), sorted(EntityKind))
        self.assertEqual(controller.state.products.ids(), ["p100"])

    async def test_reload_with_out_of_range_row_keeps_existing_data(self):
        def handler(request):
            if request.url.path.endswith("/inventory"):
                row = {
                    "id": 7,
                    "product_name": "Milk",
                    "category": "Dairy",
                    "location": "Aisle1",
                    "quantity": 2,
                    "timestamp": 10**22,
                }
                return httpx.Response(200, json=[row])
            return httpx.Response(200, json=[])

        gateway = RemoteStoreGateway(
            "https://demo.supabase.co",
            "anon-key",
            transport=httpx.MockTransport(handler),
        )
        controller = self.make_controller(gateway)
        controller.state.locations.insert(Location(id="l1", name="Aisle1"))
        try:
            with self.assertLogs("stockcount.services.app_state", level="ERROR"):
                self.assertFalse(await controller.reload_all())
        finally:
            await gateway.aclose()
        self.assertEqual(controller.state.locations.ids(), ["l1"])
        self.assertFalse(controller.state.loading)

    async def test_reload_discards_unresolved_optimistic_entries(self):
        store = seeded_store()
        controller = self.make_controller(store)
        controller.state.categories.insert(Category(id="tmp-1", name="Ghost"))
        await controller.reload_all()
        self.assertEqual(controller.state.categories.ids(), ["c100"])

    async def test_scenario_category_add_and_case_varied_duplicate(self):
        store = FakeRemoteStore()
        controller = self.make_controller(store)
        await controller.reload_all()

        await controller.add_category("Dairy")
        self.assertEqual(controller.state.categories.items, [Category(id="c1", name="Dairy")])

        reconciler = controller.reconcilers[EntityKind.CATEGORY]
        with patch.object(reconciler, "add") as add_mock:
            with self.assertRaises(InvalidEntry):
                await controller.add_category("dairy")
        add_mock.assert_not_called()
        self.assertEqual(store.calls.count(("insert", EntityKind.CATEGORY)), 1)

    async def test_add_location_trims_and_rejects_blank(self):
        controller = self.make_controller(FakeRemoteStore())
        created = await controller.add_location("  Aisle 3  ")
        self.assertEqual(created, Location(id="l1", name="Aisle 3"))
        with self.assertRaises(InvalidEntry):
            await controller.add_location("   ")

    async def test_failed_inventory_add_surfaces_rejection(self):
        store = seeded_store()
        controller = self.make_controller(store)
        await controller.reload_all()
        store.fail("insert", EntityKind.INVENTORY)

        with self.assertRaises(RemoteRejected):
            await controller.add_inventory_record("p100", "Aisle1", 5)
        self.assertEqual(len(controller.state.inventory), 0)

    async def test_inventory_record_keeps_product_values_after_product_delete(self):
        store = seeded_store()
        controller = self.make_controller(store)
        await controller.reload_all()

        record = await controller.add_inventory_record("p100", "Aisle1", "5")
        await controller.delete_product("p100")

        self.assertEqual(len(controller.state.products), 0)
        stored = controller.state.inventory.get(record.id)
        self.assertEqual((stored.product_name, stored.category), ("Milk", "Dairy"))
        self.assertEqual(stored.quantity, 5)

    async def test_deleted_id_absent_after_reload(self):
        store = seeded_store()
        controller = self.make_controller(store)
        await controller.reload_all()

        await controller.delete_location("l100")
        await controller.reload_all()
        self.assertNotIn("l100", controller.state.locations)

    async def test_clear_all_inventory(self):
        store = seeded_store()
        for index in range(10):
            store.seed(EntityKind.INVENTORY, make_record("i{}".format(index), minutes_ago=index))
        controller = self.make_controller(store)
        await controller.reload_all()
        self.assertEqual(len(controller.state.inventory), 10)

        removed = await controller.clear_all_inventory()
        self.assertEqual(removed, 10)
        self.assertEqual(len(controller.state.inventory), 0)

        await controller.reload_all()
        self.assertEqual(len(controller.state.inventory), 0)

    async def test_failed_clear_reloads_from_store(self):
        store = seeded_store()
        store.seed(EntityKind.INVENTORY, make_record("i1"))
        store.seed(EntityKind.INVENTORY, make_record("i2", minutes_ago=1))
        controller = self.make_controller(store)
        await controller.reload_all()
        store.fail("delete_all", EntityKind.INVENTORY, RemoteUnavailable("offline"))

        with self.assertRaises(RemoteUnavailable):
            await controller.clear_all_inventory()
        self.assertEqual(controller.state.inventory.ids(), ["i1", "i2"])

    async def test_unconfigured_gateway_blocks_changes(self):
        store = FakeRemoteStore(configured=False)
        controller = self.make_controller(store)

        with self.assertRaises(GatewayNotConfigured):
            await controller.add_category("Dairy")
        with self.assertRaises(GatewayNotConfigured):
            await controller.clear_all_inventory()
        self.assertFalse(await controller.reload_all())
        self.assertEqual(store.calls, [])

    async def test_navigate_home_reloads(self):
        store = seeded_store()
        controller = self.make_controller(store)

        await controller.navigate("settings")
        self.assertEqual(store.calls, [])
        self.assertEqual(controller.state.current_view, "settings")

        await controller.navigate("home")
        self.assertEqual(controller.state.current_view, "home")
        self.assertIn(("list", EntityKind.CATEGORY), store.calls)

        with self.assertRaises(InvalidEntry):
            await controller.navigate("reports")


if __name__ == "__main__":
    unittest.main()
