"""
Tests for the content rating order and its expansion
"""

import pytest

from video_curator.models.video import ContentRating

RESTRICTED = ["7+", "12+", "16+", "18+"]


class TestContentRatingOrder:
    """Ratings compare by strictness, not as strings"""

    def test_declared_order_is_strictness(self):
        ratings = list(ContentRating)
        assert [r.value for r in ratings] == ["Anyone"] + RESTRICTED
        assert ratings == sorted(ratings)

    def test_comparison_is_not_lexicographic(self):
        # As plain strings "7+" > "12+"
        assert ContentRating.SEVEN_PLUS < ContentRating.TWELVE_PLUS
        assert ContentRating.EIGHTEEN_PLUS > ContentRating.SIXTEEN_PLUS
        assert ContentRating.ANYONE <= ContentRating.ANYONE
        assert ContentRating.SEVEN_PLUS >= ContentRating.ANYONE

    def test_parse(self):
        assert ContentRating.parse("16+") is ContentRating.SIXTEEN_PLUS
        assert ContentRating.parse("21+") is None
        assert ContentRating.parse(None) is None


class TestContentRatingExpansion:
    """A rating expands to itself and every stricter rating"""

    @pytest.mark.parametrize("rating", RESTRICTED)
    def test_at_least_is_suffix(self, rating):
        expected = RESTRICTED[RESTRICTED.index(rating):]
        assert [r.value for r in ContentRating(rating).at_least()] == expected

    def test_twelve_plus(self):
        assert ContentRating.TWELVE_PLUS.at_least() == [
            ContentRating.TWELVE_PLUS,
            ContentRating.SIXTEEN_PLUS,
            ContentRating.EIGHTEEN_PLUS,
        ]

    def test_restricted_excludes_anyone(self):
        assert [r.value for r in ContentRating.restricted()] == RESTRICTED
