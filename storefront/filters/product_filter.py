# storefront/filters/product_filter.py

"""Shop listing filters: category, free-text search and best sellers."""

import logging

from storefront.config.settings import Settings
from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


class ProductFilter:
    """Derive the product lists the shop and home screens display."""

    @staticmethod
    def filter_products(
        products: list[Product],
        category: str = Settings.ALL_CATEGORIES,
        query: str = "",
    ) -> list[Product]:
        """Keep products in *category* whose name, category or subcategory matches *query*.

        Matching is a case-insensitive substring test; an empty query
        matches everything.
        """
        needle = query.strip().lower()
        kept: list[Product] = []
        for product in products:
            if (
                category != Settings.ALL_CATEGORIES
                and product.category != category
            ):
                continue
            if needle and not (
                needle in product.name.lower()
                or needle in product.category.lower()
                or needle in product.subcategory.lower()
            ):
                continue
            kept.append(product)

        logger.debug(
            "Filter category=%s query=%r kept %d of %d",
            category,
            query,
            len(kept),
            len(products),
        )
        return kept

    @staticmethod
    def best_sellers(
        products: list[Product],
        limit: int = Settings.BEST_SELLER_COUNT,
    ) -> list[Product]:
        """Top *limit* products by sales, highest first."""
        return sorted(products, key=lambda p: p.sales, reverse=True)[:limit]

    @staticmethod
    def subcategories(
        products: list[Product], category: str,
    ) -> list[str]:
        """Distinct subcategories of *category* in first-seen order."""
        if category == Settings.ALL_CATEGORIES:
            return []
        return list(
            dict.fromkeys(
                p.subcategory
                for p in products
                if p.category == category and p.subcategory
            )
        )
