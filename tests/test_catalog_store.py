# tests/test_catalog_store.py

"""Tests for the catalog store: load, seed, fallback and optimistic CRUD."""

import unittest
from unittest.mock import MagicMock, patch

from storefront.data.seed_products import SEED_PRODUCTS
from storefront.models.product import Product
from storefront.services.catalog_store import CatalogStore, error_kind
from storefront.storage.catalog_gateway import (
    GatewayError,
    GatewayNotConfiguredError,
    MissingSchemaError,
    PermissionDeniedError,
)


def _echo_insert(rows: list[dict]) -> list[dict]:
    """Gateway insert that returns what it stored."""
    return [dict(row) for row in rows]


class TestErrorKind(unittest.TestCase):
    """Exception to error-kind mapping."""

    def test_kinds(self) -> None:
        """Gateway exceptions map to kinds; anything else is generic."""
        self.assertEqual(error_kind(MissingSchemaError("x")), "missing_schema")
        self.assertEqual(error_kind(PermissionDeniedError("x")), "permission")
        self.assertEqual(
            error_kind(GatewayNotConfiguredError("x")), "not_configured"
        )
        self.assertEqual(error_kind(GatewayError("x")), "generic")
        self.assertEqual(error_kind(OSError("x")), "generic")


class TestCatalogLoad(unittest.IsolatedAsyncioTestCase):
    """CatalogStore.load outcomes."""

    def setUp(self) -> None:
        self.gateway = MagicMock()
        self.store = CatalogStore(self.gateway)

    async def test_remote_rows_are_normalized(self) -> None:
        """Remote rows are normalized before they are shown."""
        self.gateway.select_all.return_value = [
            {"id": "a", "name": "Gloss", "category": "lips", "price": 10},
        ]
        result = await self.store.load()
        self.assertEqual(result.source, "remote")
        self.assertEqual(result.count, 1)
        self.assertEqual(self.store.products[0].category, "Lips")
        self.assertFalse(self.store.loading)

    async def test_empty_gateway_is_seeded(self) -> None:
        """An empty table is seeded with the defaults in row format."""
        self.gateway.select_all.return_value = []
        self.gateway.insert.side_effect = _echo_insert
        result = await self.store.load()

        self.assertEqual(result.source, "seeded")
        self.assertEqual(len(self.store.products), 10)
        inserted = self.gateway.insert.call_args.args[0]
        self.assertEqual(len(inserted), len(SEED_PRODUCTS))
        self.assertEqual(inserted[0]["discounted_price"], 3950)

    async def test_seed_attempted_only_once(self) -> None:
        """A seed that stores nothing is not retried on the next load."""
        self.gateway.select_all.return_value = []
        self.gateway.insert.return_value = []
        first = await self.store.load()
        second = await self.store.load()

        self.assertEqual(first.source, "fallback")
        self.assertEqual(second.source, "fallback")
        self.assertEqual(len(self.store.products), 10)
        self.gateway.insert.assert_called_once()

    async def test_seed_failure_uses_defaults(self) -> None:
        """A refused seed falls back to the defaults in memory."""
        self.gateway.select_all.return_value = []
        self.gateway.insert.side_effect = PermissionDeniedError("rls")
        result = await self.store.load()
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.error_kind, "permission")
        self.assertEqual(len(self.store.products), 10)

    async def test_missing_table_falls_back_silently(self) -> None:
        """A missing table is logged but not shown to the shopper."""
        self.gateway.select_all.side_effect = MissingSchemaError("gone")
        with self.assertLogs("storefront.catalog", level="WARNING"):
            result = await self.store.load()
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.error_kind, "missing_schema")
        self.assertEqual(len(self.store.products), 10)
        self.assertEqual(self.store.notifications, [])

    async def test_not_configured_has_no_notification(self) -> None:
        """Offline demo mode is silent."""
        self.gateway.select_all.side_effect = GatewayNotConfiguredError("x")
        result = await self.store.load()
        self.assertEqual(result.error_kind, "not_configured")
        self.assertEqual(self.store.notifications, [])

    async def test_permission_error_notifies(self) -> None:
        """A permission failure is reported as an error."""
        self.gateway.select_all.side_effect = PermissionDeniedError("rls")
        result = await self.store.load()
        self.assertEqual(result.error_kind, "permission")
        self.assertEqual(len(self.store.notifications), 1)
        self.assertEqual(self.store.notifications[0].severity, "error")

    async def test_generic_error_notifies(self) -> None:
        """Other load failures warn and show the defaults."""
        self.gateway.select_all.side_effect = GatewayError("timeout")
        result = await self.store.load()
        self.assertEqual(result.error_kind, "generic")
        self.assertEqual(self.store.notifications[0].severity, "warning")
        self.assertEqual(len(self.store.products), 10)


class TestCatalogMutations(unittest.IsolatedAsyncioTestCase):
    """Optimistic add/update/delete with best-effort sync."""

    async def asyncSetUp(self) -> None:
        self.gateway = MagicMock()
        self.gateway.select_all.return_value = [dict(r) for r in SEED_PRODUCTS]
        self.store = CatalogStore(self.gateway)
        await self.store.load()

    async def test_add_prepends_even_when_insert_fails(self) -> None:
        """The product is added locally and the failure only notifies."""
        self.gateway.insert.side_effect = GatewayError("offline")
        added = await self.store.add(
            {"name": "New Gloss", "category": "Lips", "discounted_price": 1200}
        )

        self.assertIs(self.store.products[0], added)
        self.assertEqual(len(self.store.products), 11)
        self.assertTrue(added.id.startswith("p"))
        self.assertEqual(added.sales, 0)
        self.assertEqual(added.rating, 0)
        self.assertEqual(added.reviews, [])
        self.assertEqual(len(self.store.notifications), 1)
        self.assertIn("insert failed", self.store.notifications[0].message)

    async def test_add_adopts_gateway_row(self) -> None:
        """When the gateway answers, its stored row wins over the draft."""
        self.gateway.insert.side_effect = lambda rows: [
            {**rows[0], "name": "Stored Name"}
        ]
        added = await self.store.add({"name": "Draft", "price": 5})
        self.assertEqual(added.name, "Stored Name")
        self.assertEqual(self.store.notifications, [])

    async def test_add_ignores_draft_sales_and_reviews(self) -> None:
        """New products start with no sales, rating or reviews."""
        self.gateway.insert.side_effect = _echo_insert
        added = await self.store.add(
            {"name": "X", "sales": 900, "rating": 5, "reviews": [{"id": "r"}]}
        )
        self.assertEqual(added.sales, 0)
        self.assertEqual(added.rating, 0)
        self.assertEqual(added.reviews, [])

    async def test_bulk_add_distinct_ids(self) -> None:
        """Each product in a batch gets its own positional id."""
        self.gateway.insert.side_effect = _echo_insert
        added = await self.store.bulk_add(
            [{"name": "One"}, {"name": "Two"}, {"name": "Three"}]
        )
        ids = [p.id for p in added]
        self.assertEqual(len(set(ids)), 3)
        self.assertTrue(ids[0].endswith("-0"))
        self.assertTrue(ids[2].endswith("-2"))
        self.assertEqual(
            [p.name for p in self.store.products[:3]], ["One", "Two", "Three"]
        )

    async def test_bulk_add_same_millisecond_batches(self) -> None:
        """Two batches created in the same millisecond never share an id."""
        self.gateway.insert.side_effect = _echo_insert
        with patch(
            "storefront.services.catalog_store._now_ms", return_value=1_000_000
        ):
            first = await self.store.bulk_add([{"name": "One"}, {"name": "Two"}])
            second = await self.store.bulk_add([{"name": "Three"}])
            single = await self.store.add({"name": "Four"})

        ids = [p.id for p in (*first, *second, single)]
        self.assertEqual(len(set(ids)), 4)
        self.assertEqual(ids[:2], ["p1000000-0", "p1000000-1"])
        self.assertEqual(ids[2], "p1000001-0")
        self.assertEqual(len({p.id for p in self.store.products}), 14)

    async def test_bulk_add_failure_keeps_local(self) -> None:
        """A failed import still shows the products locally."""
        self.gateway.insert.side_effect = GatewayError("offline")
        await self.store.bulk_add([{"name": "One"}, {"name": "Two"}])
        self.assertEqual(len(self.store.products), 12)
        self.assertIn("import failed", self.store.notifications[0].message)

    async def test_update_applies_locally_on_failure(self) -> None:
        """A rejected update still changes the local product."""
        self.gateway.update.side_effect = PermissionDeniedError("rls")
        p1 = self.store.get("p1")
        assert p1 is not None
        edited = Product(
            id=p1.id, name="Renamed", category=p1.category, price=p1.price,
        )
        await self.store.update(edited)

        current = self.store.get("p1")
        assert current is not None
        self.assertEqual(current.name, "Renamed")
        self.assertIn("row-level security", self.store.notifications[0].message)

    async def test_update_sends_full_row(self) -> None:
        """Updates send the whole row, reviews included, in gateway format."""
        p2 = self.store.get("p2")
        assert p2 is not None
        await self.store.update(p2)
        row = self.gateway.update.call_args.args[0]
        self.assertEqual(row["id"], "p2")
        self.assertEqual(row["discounted_price"], 12500)
        self.assertEqual(row["reviews"][0]["userName"], "Emily R.")

    async def test_delete_removes_locally_on_failure(self) -> None:
        """A failed delete still removes the product locally."""
        self.gateway.delete.side_effect = GatewayError("offline")
        await self.store.delete("p3")
        self.assertIsNone(self.store.get("p3"))
        self.assertEqual(len(self.store.notifications), 1)

    async def test_upload_image_success(self) -> None:
        """Object names are a timestamp plus the sanitized file name."""
        self.gateway.upload_image.return_value = "https://cdn/x.png"
        url = await self.store.upload_image("my photo.png", b"data", "image/png")
        self.assertEqual(url, "https://cdn/x.png")
        path = self.gateway.upload_image.call_args.args[0]
        self.assertTrue(path.endswith("-my-photo.png"))

    async def test_upload_image_failure_notifies(self) -> None:
        """A missing bucket yields no URL and the storage SQL hint."""
        self.gateway.upload_image.side_effect = MissingSchemaError("bucket")
        url = await self.store.upload_image("a.png", b"data")
        self.assertIsNone(url)
        note = self.store.notifications[0]
        self.assertEqual(note.severity, "error")
        self.assertIn("storage.buckets", note.message)
