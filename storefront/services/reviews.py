# storefront/services/reviews.py

"""Verified-purchaser review submission and ordering."""

import logging
import time
from dataclasses import replace
from datetime import date

from storefront.models.product import Product, Review
from storefront.services.ledger import PurchaseLedger

logger = logging.getLogger("storefront.reviews")

NOT_PURCHASED_MESSAGE = (
    "Only verified purchasers can leave a review. "
    "Please purchase this item first."
)


class ReviewNotAllowedError(Exception):
    """The product is not in the purchase ledger."""


def submit_review(
    product: Product,
    ledger: PurchaseLedger,
    user_name: str,
    rating: int,
    comment: str,
) -> Product:
    """Return a copy of *product* with a new verified review first.

    Raises:
        ReviewNotAllowedError: the product was never checked out.
        ValueError: name or comment is blank.
    """
    if product.id not in ledger:
        logger.info("Review rejected for unpurchased product %s", product.id)
        raise ReviewNotAllowedError(NOT_PURCHASED_MESSAGE)
    if not user_name.strip() or not comment.strip():
        raise ValueError("Name and comment are required.")

    review = Review(
        id=str(int(time.time() * 1000)),
        user_name=user_name.strip(),
        rating=min(5, max(1, int(rating))),
        comment=comment.strip(),
        date=date.today().isoformat(),
        helpful_count=0,
        verified=True,
    )
    logger.info("Review %s added to %s", review.id, product.id)
    return replace(product, reviews=[review, *product.reviews])


def sort_reviews(reviews: list[Review], by: str = "helpful") -> list[Review]:
    """Most helpful first, or newest first when *by* is ``"date"``."""
    if by == "date":
        return sorted(reviews, key=lambda r: r.date, reverse=True)
    return sorted(reviews, key=lambda r: r.helpful_count, reverse=True)
