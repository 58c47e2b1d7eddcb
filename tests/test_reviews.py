# tests/test_reviews.py

"""Tests for verified-purchaser reviews."""

import unittest
from datetime import date

from storefront.models.product import Product, Review
from storefront.services.ledger import PurchaseLedger
from storefront.services.reviews import (
    NOT_PURCHASED_MESSAGE,
    ReviewNotAllowedError,
    sort_reviews,
    submit_review,
)


def _review(rid: str, helpful: int, day: str) -> Review:
    return Review(
        id=rid, user_name="U", rating=5, comment="c", date=day,
        helpful_count=helpful, verified=True,
    )


class TestSubmitReview(unittest.TestCase):
    """Gatekeeping and construction of new reviews."""

    def setUp(self) -> None:
        self.product = Product(
            id="p1", name="Lipstick", category="Lips", price=3950,
            reviews=[_review("r1", 12, "2023-10-15")],
        )
        self.ledger = PurchaseLedger()

    def test_rejected_without_purchase(self) -> None:
        """Only buyers may review a product."""
        with self.assertRaises(ReviewNotAllowedError) as ctx:
            submit_review(self.product, self.ledger, "Ana", 5, "Lovely")
        self.assertEqual(str(ctx.exception), NOT_PURCHASED_MESSAGE)
        self.assertEqual(len(self.product.reviews), 1)

    def test_blank_fields_rejected(self) -> None:
        """Blank names or comments are refused."""
        self.ledger.record(["p1"])
        with self.assertRaises(ValueError):
            submit_review(self.product, self.ledger, "  ", 5, "Lovely")
        with self.assertRaises(ValueError):
            submit_review(self.product, self.ledger, "Ana", 5, "")

    def test_verified_review_prepended(self) -> None:
        """New reviews are verified and go first."""
        self.ledger.record(["p1"])
        updated = submit_review(self.product, self.ledger, " Ana ", 4, "Lovely")

        self.assertEqual(len(updated.reviews), 2)
        new = updated.reviews[0]
        self.assertEqual(new.user_name, "Ana")
        self.assertEqual(new.rating, 4)
        self.assertTrue(new.verified)
        self.assertEqual(new.helpful_count, 0)
        self.assertEqual(new.date, date.today().isoformat())
        # Input product untouched
        self.assertEqual(len(self.product.reviews), 1)

    def test_rating_clamped(self) -> None:
        """Ratings outside 1 to 5 are clamped."""
        self.ledger.record(["p1"])
        updated = submit_review(self.product, self.ledger, "Ana", 11, "Wow")
        self.assertEqual(updated.reviews[0].rating, 5)


class TestSortReviews(unittest.TestCase):
    """Review ordering for display."""

    def setUp(self) -> None:
        self.reviews = [
            _review("a", 3, "2023-11-02"),
            _review("b", 20, "2023-09-10"),
            _review("c", 7, "2024-01-05"),
        ]

    def test_most_helpful_first(self) -> None:
        """The helpful sort puts the most helpful review first."""
        ordered = sort_reviews(self.reviews)
        self.assertEqual([r.id for r in ordered], ["b", "c", "a"])

    def test_newest_first(self) -> None:
        """The date sort puts the newest review first."""
        ordered = sort_reviews(self.reviews, "date")
        self.assertEqual([r.id for r in ordered], ["c", "a", "b"])
