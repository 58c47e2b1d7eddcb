# tests/test_product_filter.py

"""Tests for shop listing filters."""

import unittest

from storefront.filters.product_filter import ProductFilter
from storefront.services.catalog_store import seed_catalog


class TestProductFilter(unittest.TestCase):
    """Category, search and best-seller derivations."""

    def setUp(self) -> None:
        self.products = seed_catalog()

    def test_all_without_query(self) -> None:
        """All with no query returns every product."""
        self.assertEqual(
            len(ProductFilter.filter_products(self.products, "All", "")), 10
        )

    def test_category_only(self) -> None:
        kept = ProductFilter.filter_products(self.products, "Lips")
        self.assertEqual([p.id for p in kept], ["p1", "p8"])

    def test_search_name_case_insensitive(self) -> None:
        """Name search ignores case."""
        kept = ProductFilter.filter_products(self.products, "All", "SERUM")
        self.assertEqual([p.name for p in kept], ["Radiance Renewal Serum"])

    def test_search_matches_subcategory(self) -> None:
        """The query also matches subcategories."""
        kept = ProductFilter.filter_products(self.products, "All", "palettes")
        self.assertEqual([p.id for p in kept], ["p10"])

    def test_search_matches_category(self) -> None:
        kept = ProductFilter.filter_products(self.products, "All", "skincare")
        self.assertEqual({p.id for p in kept}, {"p5", "p7"})

    def test_category_and_query_combined(self) -> None:
        """Category and query must both match."""
        kept = ProductFilter.filter_products(self.products, "Face", "lip")
        self.assertEqual(kept, [])

    def test_best_sellers_by_sales(self) -> None:
        """Best sellers are ordered by sales, highest first."""
        top = ProductFilter.best_sellers(self.products)
        self.assertEqual([p.id for p in top], ["p3", "p10", "p2", "p8"])

    def test_best_sellers_limit(self) -> None:
        self.assertEqual(len(ProductFilter.best_sellers(self.products, 2)), 2)

    def test_subcategories(self) -> None:
        """Subcategories are listed in catalog order for one category."""
        self.assertEqual(
            ProductFilter.subcategories(self.products, "Eyes"),
            ["Mascara", "Eyeliner", "Eyeshadow Palettes"],
        )
        self.assertEqual(ProductFilter.subcategories(self.products, "All"), [])
