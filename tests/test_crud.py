import unittest
from datetime import datetime, timedelta

from base import TempDBTestCase

from db import crud, models, store
from db.store import STORAGE_KEYS
from utils.errors import NotFoundError, StorageError, ValidationError

ARENA = {
    "name": "Arena 5kg",
    "location": "Oruro",
    "quantity": 10,
    "cost": 20,
    "sale_price": 35,
}


class FixedClock:
    """Always returns the same instant unless advanced by hand."""

    def __init__(self, when=datetime(2025, 1, 31, 10, 0, 0)):
        self.when = when

    def __call__(self):
        return self.when


class AuthTestCase(TempDBTestCase):
    async def test_login_with_the_fixed_pair_persists_session(self):
        user = await crud.login("Anahi", "2025")
        self.assertEqual(user, models.User("Anahi"))

        self.assertEqual(
            await store.get_item(STORAGE_KEYS["auth"]),
            {"isAuthenticated": True, "user": {"username": "Anahi"}},
        )
        session = await crud.load_session()
        self.assertTrue(session.is_authenticated)
        self.assertEqual(session.user.username, "Anahi")

    async def test_any_other_pair_fails_and_stays_logged_out(self):
        for username, pwd in [
            ("anahi", "2025"),
            ("Anahi", "2024"),
            ("Anahi ", "2025"),
            ("", ""),
            ("admin", "admin"),
        ]:
            self.assertIsNone(await crud.login(username, pwd))
        self.assertIsNone(await store.get_item(STORAGE_KEYS["auth"]))
        self.assertFalse((await crud.load_session()).is_authenticated)

    async def test_logout_clears_session(self):
        await crud.login("Anahi", "2025")
        await crud.logout()
        self.assertIsNone(await store.get_item(STORAGE_KEYS["auth"]))
        self.assertFalse((await crud.load_session()).is_authenticated)

    async def test_partial_or_false_session_means_logged_out(self):
        for record in [
            {"isAuthenticated": False, "user": {"username": "Anahi"}},
            {"isAuthenticated": True, "user": None},
            {"isAuthenticated": True},
            "yes",
            [],
        ]:
            await store.set_item(STORAGE_KEYS["auth"], record)
            self.assertFalse((await crud.load_session()).is_authenticated, record)

    async def test_theme_defaults_to_light_and_persists(self):
        self.assertEqual(await crud.load_theme(), "light")
        await crud.save_theme("dark")
        self.assertEqual(await crud.load_theme(), "dark")
        await store.set_item(STORAGE_KEYS["theme"], "purple")
        self.assertEqual(await crud.load_theme(), "light")


class ProductCollectionTestCase(TempDBTestCase):
    async def asyncSetUp(self):
        self.clock = FixedClock()
        self.products = crud.ProductCollection(clock=self.clock)
        await self.products.load()

    async def reloaded(self):
        fresh = crud.ProductCollection()
        await fresh.load()
        return fresh.list()

    async def test_create_appends_one_entity_with_input_fields(self):
        before = self.products.list()
        product = await self.products.create(ARENA)
        after = self.products.list()

        self.assertEqual(len(after), len(before) + 1)
        self.assertEqual(after[-1], product)
        self.assertEqual(product.name, "Arena 5kg")
        self.assertEqual(product.location, "Oruro")
        self.assertEqual(product.quantity, 10)
        self.assertEqual(product.cost, 20.0)
        self.assertEqual(product.sale_price, 35.0)
        self.assertEqual(product.created_at, product.updated_at)

    async def test_ids_are_unique_even_at_the_same_instant(self):
        for i in range(25):
            await self.products.create({**ARENA, "name": f"Arena {i}"})
        ids = [p.id for p in self.products.list()]
        self.assertEqual(len(ids), len(set(ids)))

    async def test_create_strips_and_coerces(self):
        product = await self.products.create(
            {"name": "  Arena  ", "location": " La Paz ", "quantity": "7", "cost": "2,5"}
        )
        self.assertEqual(product.name, "Arena")
        self.assertEqual(product.location, "La Paz")
        self.assertEqual(product.quantity, 7)
        self.assertEqual(product.cost, 2.5)
        self.assertEqual(product.sale_price, 0.0)

    async def test_create_rejects_blank_required_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            await self.products.create({**ARENA, "name": "   ", "location": ""})
        self.assertEqual(ctx.exception.fields, ("name", "location"))
        self.assertEqual(self.products.list(), [])
        self.assertEqual(await self.reloaded(), [])

    async def test_create_rejects_negative_numbers(self):
        with self.assertRaises(ValidationError) as ctx:
            await self.products.create({**ARENA, "quantity": -1})
        self.assertEqual(ctx.exception.fields, ("quantity",))

    async def test_writes_through_to_the_store(self):
        a = await self.products.create(ARENA)
        b = await self.products.create({**ARENA, "name": "Arena 10kg"})
        self.assertEqual(await self.reloaded(), [a, b])

        raw = await store.get_item(STORAGE_KEYS["products"])
        self.assertEqual(raw[0]["salePrice"], 35.0)
        self.assertIn("createdAt", raw[0])

    async def test_update_sets_field_and_bumps_updated_at(self):
        a = await self.products.create(ARENA)
        b = await self.products.create({**ARENA, "name": "Arena 10kg"})

        # clock has not moved, updated_at must still increase
        updated = await self.products.update(a.id, {"quantity": 3})
        self.assertEqual(updated.quantity, 3)
        self.assertGreater(updated.updated_at, a.updated_at)
        self.assertEqual(updated.created_at, a.created_at)
        self.assertEqual(updated.id, a.id)

        self.clock.when += timedelta(hours=1)
        again = await self.products.update(a.id, {"location": "Sucre"})
        self.assertEqual(again.updated_at, self.clock.when)

        # order and the other entity are untouched
        self.assertEqual(self.products.list(), [again, b])
        self.assertEqual(await self.reloaded(), [again, b])

    async def test_update_ignores_identity_fields(self):
        a = await self.products.create(ARENA)
        updated = await self.products.update(
            a.id, {"id": "other", "created_at": "x", "bogus": 1}
        )
        self.assertEqual(updated.id, a.id)
        self.assertEqual(updated.created_at, a.created_at)

    async def test_update_missing_id_raises_not_found(self):
        await self.products.create(ARENA)
        with self.assertRaises(NotFoundError):
            await self.products.update("missing", {"quantity": 1})

    async def test_update_to_blank_required_field_is_rejected(self):
        a = await self.products.create(ARENA)
        with self.assertRaises(ValidationError):
            await self.products.update(a.id, {"name": ""})
        self.assertEqual(self.products.get(a.id), a)

    async def test_delete_is_idempotent(self):
        a = await self.products.create(ARENA)
        b = await self.products.create({**ARENA, "name": "Arena 10kg"})

        self.assertTrue(await self.products.delete(a.id))
        once = self.products.list()
        self.assertFalse(await self.products.delete(a.id))
        self.assertEqual(self.products.list(), once)
        self.assertEqual(once, [b])
        self.assertEqual(await self.reloaded(), [b])

    async def test_clear_empties_and_persists(self):
        await self.products.create(ARENA)
        await self.products.clear()
        self.assertEqual(len(self.products), 0)
        self.assertEqual(await self.reloaded(), [])

    async def test_extend_appends_valid_records_with_fresh_ids(self):
        existing = await self.products.create(ARENA)
        added = await self.products.extend(
            [
                {"name": "Arena 3kg", "location": "Potosí", "quantity": 4},
                {"name": "", "location": "Potosí"},
                {"name": "Arena 1kg", "location": "Tarija", "cost": 5.5},
            ]
        )
        self.assertEqual([p.name for p in added], ["Arena 3kg", "Arena 1kg"])
        self.assertEqual(self.products.list(), [existing, *added])
        self.assertNotIn(existing.id, [p.id for p in added])
        self.assertEqual(len(await self.reloaded()), 3)

    async def test_distinct_locations_in_first_seen_order(self):
        await self.products.create({**ARENA, "location": "Oruro"})
        await self.products.create({**ARENA, "location": "La Paz"})
        await self.products.create({**ARENA, "location": "Oruro"})
        self.assertEqual(self.products.distinct("location"), ["Oruro", "La Paz"])

    async def test_load_skips_malformed_records(self):
        good = await self.products.create(ARENA)
        raw = await store.get_item(STORAGE_KEYS["products"])
        await store.set_item(
            STORAGE_KEYS["products"], [{"id": "broken"}, raw[0], {"name": 1}]
        )
        self.assertEqual(await self.reloaded(), [good])

    async def test_load_tolerates_absent_or_non_list_value(self):
        self.assertEqual(await self.reloaded(), [])
        await store.set_item(STORAGE_KEYS["products"], {"not": "a list"})
        self.assertEqual(await self.reloaded(), [])

    async def test_failed_write_keeps_in_memory_change(self):
        self.break_store()
        product = await self.products.create(ARENA)
        self.assertEqual(self.products.list(), [product])

    async def test_strict_writes_raise_storage_error(self):
        strict = crud.ProductCollection(strict_writes=True)
        self.break_store()
        with self.assertRaises(StorageError):
            await strict.create(ARENA)
        self.assertEqual(len(strict), 1)


class ClientCollectionTestCase(TempDBTestCase):
    async def test_all_three_fields_are_required(self):
        clients = crud.ClientCollection()
        with self.assertRaises(ValidationError) as ctx:
            await clients.create({"name": "Ana", "contact": "", "shipping_location": ""})
        self.assertEqual(ctx.exception.fields, ("contact", "shipping_location"))

        client = await clients.create(
            {"name": "Ana", "contact": "70000000", "shipping_location": "Cochabamba"}
        )
        raw = await store.get_item(STORAGE_KEYS["clients"])
        self.assertEqual(raw[0]["shippingLocation"], "Cochabamba")
        self.assertEqual(raw[0]["id"], client.id)


if __name__ == "__main__":
    unittest.main()
