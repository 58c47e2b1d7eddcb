# storefront/services/normalizer.py

"""Boundary decoding of loosely-shaped product records.

Gateway rows, seed records and bulk-import items all arrive as plain
mappings whose shape has drifted over time (``price`` versus
``discounted_price``, camelCase versus snake_case review keys, ``null``
arrays).  :func:`normalize_product` turns any of them into a canonical
:class:`Product`, degrading every malformed field to a safe default
instead of raising.  Normalizing an already-normalized product returns
an equal product.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from storefront.config.settings import Settings
from storefront.models.product import Product, Review

logger = logging.getLogger("storefront.normalizer")

# Current price candidates, most specific first
_PRICE_KEYS = ("discounted_price", "discountedPrice", "price")
_ORIGINAL_PRICE_KEYS = ("original_price", "originalPrice")


def _to_float(value: Any, default: float = 0.0) -> float:
    """Coerce *value* to a finite float, or return *default*."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _to_int(value: Any, default: int = 0) -> int:
    return int(round(_to_float(value, float(default))))


def _to_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _first_present(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    """Return the first non-null value among *keys*."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _normalize_category(value: Any) -> str:
    """Match a category case-insensitively, defaulting to the first one."""
    text = _to_text(value).lower()
    for category in Settings.CATEGORIES:
        if category.lower() == text:
            return category
    if text:
        logger.debug("Unknown category %r, using default", value)
    return Settings.CATEGORIES[0]


def _normalize_benefits(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [
        text
        for text in (_to_text(item) for item in value)
        if text
    ]


def normalize_review(raw: Any) -> Review | None:
    """Decode one review entry; returns ``None`` for non-record input."""
    if isinstance(raw, Review):
        raw = {
            "id": raw.id,
            "user_name": raw.user_name,
            "rating": raw.rating,
            "comment": raw.comment,
            "date": raw.date,
            "helpful_count": raw.helpful_count,
            "verified": raw.verified,
        }
    if not isinstance(raw, Mapping):
        return None

    rating = _to_int(raw.get("rating"), 5)
    return Review(
        id=_to_text(raw.get("id")),
        user_name=_to_text(
            _first_present(raw, ("userName", "user_name")), "Anonymous"
        ),
        rating=min(5, max(1, rating)),
        comment=_to_text(raw.get("comment")),
        date=_to_text(raw.get("date")),
        helpful_count=max(
            0,
            _to_int(_first_present(raw, ("helpfulCount", "helpful_count"))),
        ),
        verified=bool(raw.get("verified", False)),
    )


def _normalize_reviews(value: Any) -> list[Review]:
    if not isinstance(value, (list, tuple)):
        return []
    reviews: list[Review] = []
    for item in value:
        review = normalize_review(item)
        if review is not None:
            reviews.append(review)
    return reviews


def _product_fields(product: Product) -> dict[str, Any]:
    """Expose a Product under canonical field names."""
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "subcategory": product.subcategory,
        "price": product.price,
        "original_price": product.original_price,
        "description": product.description,
        "image": product.image,
        "rating": product.rating,
        "sales": product.sales,
        "benefits": list(product.benefits),
        "reviews": list(product.reviews),
    }


def normalize_product(raw: Any) -> Product:
    """Convert a raw record (or an existing Product) into a canonical Product.

    Never raises: a non-mapping input yields a placeholder product.
    """
    if isinstance(raw, Product):
        raw = _product_fields(raw)
    if not isinstance(raw, Mapping):
        logger.debug(
            "Cannot normalize %s record, using placeholder",
            type(raw).__name__,
        )
        raw = {}

    original = _to_float(_first_present(raw, _ORIGINAL_PRICE_KEYS))

    return Product(
        id=_to_text(raw.get("id")),
        name=_to_text(raw.get("name"), Settings.PLACEHOLDER_NAME),
        category=_normalize_category(raw.get("category")),
        subcategory=_to_text(raw.get("subcategory")),
        price=max(0.0, _to_float(_first_present(raw, _PRICE_KEYS))),
        original_price=original if original > 0 else None,
        description=_to_text(raw.get("description")),
        image=_to_text(raw.get("image"), Settings.PLACEHOLDER_IMAGE),
        rating=min(5.0, max(0.0, _to_float(raw.get("rating")))),
        sales=max(0, _to_int(raw.get("sales"))),
        benefits=_normalize_benefits(raw.get("benefits")),
        reviews=_normalize_reviews(raw.get("reviews")),
    )


def review_to_row(review: Review) -> dict[str, Any]:
    """Render a review in the gateway's JSON column format."""
    return {
        "id": review.id,
        "userName": review.user_name,
        "rating": review.rating,
        "comment": review.comment,
        "date": review.date,
        "helpfulCount": review.helpful_count,
        "verified": review.verified,
    }


def product_to_row(product: Product) -> dict[str, Any]:
    """Render a Product as a gateway row."""
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "subcategory": product.subcategory,
        "discounted_price": product.price,
        "original_price": product.original_price,
        "description": product.description,
        "image": product.image,
        "rating": product.rating,
        "sales": product.sales,
        "benefits": list(product.benefits),
        "reviews": [review_to_row(r) for r in product.reviews],
    }
