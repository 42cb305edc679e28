"""Unit tests for the recommendation service."""

import asyncio
import random
from collections import Counter

import pytest

from app.services.recommendation import ReasonType, RecommendationService, coerce_limit
from app.services.recommendation.service import SOURCE_SHARES, source_quota


class TestLimitParsing:
    """Test client limit coercion."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, 20),
            (7, 7),
            (0, 20),
            (-5, 20),
            ("12", 12),
            (" 12", 12),
            ("15abc", 15),
            ("abc", 20),
            ("", 20),
            ("-3", 20),
            (True, 20),
            (2.5, 20),
        ],
    )
    def test_coerce_limit(self, raw, expected):
        """Test limit parsing for assorted client values."""
        assert coerce_limit(raw) == expected

    def test_custom_default(self):
        """Test that the caller's default is used."""
        assert coerce_limit("nope", default=10) == 10


class TestQuotas:
    """Test per-source share of the limit."""

    def test_shares_sum_to_hundred(self):
        """Test that source shares cover the whole feed."""
        assert sum(SOURCE_SHARES.values()) == 100

    def test_quotas_truncate(self):
        """Test that quotas round down."""
        quotas = {reason: source_quota(10, share) for reason, share in SOURCE_SHARES.items()}
        assert quotas == {
            ReasonType.SIMILAR: 4,
            ReasonType.FRIEND: 2,
            ReasonType.CATEGORY: 2,
            ReasonType.TRENDING: 1,
            ReasonType.SERENDIPITY: 0,
        }

    def test_quotas_for_default_limit(self):
        """Test quotas for the default limit of 20."""
        assert [source_quota(20, share) for share in SOURCE_SHARES.values()] == [8, 5, 4, 2, 1]


def _service(store, book_service, **kwargs):
    kwargs.setdefault("rng", random.Random(7))
    return RecommendationService(store, book_service, **kwargs)


class TestAnonymousRecommendations:
    """Test the trending-only path."""

    @pytest.mark.asyncio
    async def test_trending_only(self, store, book_service, book_factory):
        """Test that anonymous callers get trending books only."""
        store.trending = [book_factory(f"t{i}") for i in range(10)]

        feed = await _service(store, book_service).get_recommendations(None, 5)

        assert feed.count == 5
        assert [c.book.id for c in feed.recommendations] == ["t0", "t1", "t2", "t3", "t4"]
        assert all(c.reason.type is ReasonType.TRENDING for c in feed.recommendations)
        assert store.calls == ["trending_books"]

    @pytest.mark.asyncio
    async def test_invalid_limit_uses_default(self, store, book_service, book_factory):
        """Test that unusable limits fall back to 20."""
        store.trending = [book_factory(f"t{i}") for i in range(30)]

        for limit in (0, -5, "zero"):
            feed = await _service(store, book_service).get_recommendations(None, limit)
            assert feed.count == 20

    @pytest.mark.asyncio
    async def test_random_fallback_when_nothing_trending(self, store, book_service, book_factory):
        """Test that random books fill in when nothing trends."""
        store.random = [book_factory("r1")]

        feed = await _service(store, book_service).get_recommendations(None, 5)

        assert [c.book.id for c in feed.recommendations] == ["r1"]


class TestPersonalizedRecommendations:
    """Test the five-source path for identified users."""

    @pytest.mark.asyncio
    async def test_category_only_profile(self, store, book_service, catalog, book_factory, user_id):
        """Test a profile with only favorite categories."""
        store.categories = [("sci-fi", 3, 4.5)]
        store.trending = [book_factory(f"t{i}") for i in range(5)]
        store.quality = [book_factory("q1")]
        catalog.results["subject:sci-fi"] = [book_factory(f"c{i}") for i in range(5)]

        feed = await _service(store, book_service).get_recommendations(user_id, 10)

        reasons = Counter(c.reason.type for c in feed.recommendations)
        assert reasons == {ReasonType.CATEGORY: 2, ReasonType.TRENDING: 1}
        assert catalog.searches == [("subject:sci-fi", 2)]
        assert "random_quality_books" not in store.calls

    @pytest.mark.asyncio
    async def test_source_quotas_for_default_limit(self, store, book_service, book_factory, user_id):
        """Test that each source stays within its quota."""
        store.friends = [(f"f{i}", 1) for i in range(10)]
        store.books = {f"f{i}": book_factory(f"f{i}") for i in range(10)}
        store.trending = [book_factory(f"t{i}") for i in range(10)]
        store.quality = [book_factory(f"q{i}") for i in range(10)]

        feed = await _service(store, book_service).get_recommendations(user_id, None)

        reasons = Counter(c.reason.type for c in feed.recommendations)
        assert reasons == {
            ReasonType.FRIEND: 5,
            ReasonType.TRENDING: 2,
            ReasonType.SERENDIPITY: 1,
        }

    @pytest.mark.asyncio
    async def test_all_sources_blend(self, store, book_service, catalog, book_factory, user_id):
        """Test that every source contributes to one feed."""
        store.favorites = [("fav1", 5)]
        store.books = {"fav1": book_factory("fav1", categories=["Fantasy"]), "f1": book_factory("f1")}
        store.categories = [("Poetry", 2, 4.5)]
        store.friends = [("f1", 2)]
        store.trending = [book_factory("t1")]
        store.quality = [book_factory("q1")]
        catalog.results["subject:Fantasy"] = [book_factory("s1"), book_factory("s2")]
        catalog.results["subject:Poetry"] = [book_factory("p1")]

        feed = await _service(store, book_service).get_recommendations(user_id, 20)

        ids = [c.book.id for c in feed.recommendations]
        assert sorted(ids) == ["f1", "p1", "q1", "s1", "s2", "t1"]
        assert [c.score for c in feed.recommendations[3:]] == [0.7, 0.6, 0.5]

    @pytest.mark.asyncio
    async def test_logged_books_excluded(self, store, book_service, book_factory, user_id):
        """Test that logged books never appear in the feed."""
        store.logged = {"t1", "q1"}
        store.trending = [book_factory("t1"), book_factory("t2")]
        store.quality = [book_factory("q1")]

        feed = await _service(store, book_service).get_recommendations(user_id, 20)

        assert [c.book.id for c in feed.recommendations] == ["t2"]

    @pytest.mark.asyncio
    async def test_duplicate_across_sources_keeps_first(self, store, book_service, catalog, book_factory, user_id):
        """Test that a book found twice keeps the first reason."""
        store.categories = [("Horror", 1, 5.0)]
        catalog.results["subject:Horror"] = [book_factory("same")]
        store.trending = [book_factory("same")]
        store.quality = [book_factory("same")]

        feed = await _service(store, book_service).get_recommendations(user_id, 20)

        assert feed.count == 1
        assert feed.recommendations[0].reason.type is ReasonType.CATEGORY

    @pytest.mark.asyncio
    async def test_failing_queries_degrade_to_partial_feed(self, store, book_service, book_factory, user_id):
        """Test that failing queries still leave a feed."""
        store.failing = {"favorite_categories", "friend_logs", "logged_book_ids", "random_quality_books"}
        store.trending = [book_factory("t1"), book_factory("t2")]

        feed = await _service(store, book_service).get_recommendations(user_id, 20)

        assert [c.book.id for c in feed.recommendations] == ["t1", "t2"]

    @pytest.mark.asyncio
    async def test_catalog_outage_degrades(self, store, book_service, catalog, book_factory, user_id):
        """Test that a catalog outage leaves store-backed sources."""
        store.favorites = [("fav1", 5)]
        store.categories = [("Poetry", 2, 4.5)]
        store.trending = [book_factory("t1")]
        catalog.fail = True

        feed = await _service(store, book_service).get_recommendations(user_id, 20)

        assert [c.book.id for c in feed.recommendations] == ["t1"]

    @pytest.mark.asyncio
    async def test_empty_everything(self, store, book_service, user_id):
        """Test that no data gives an empty feed."""
        feed = await _service(store, book_service).get_recommendations(user_id, 20)
        assert feed.count == 0
        assert feed.recommendations == []

    @pytest.mark.asyncio
    async def test_slow_source_bounded_by_deadline(self, store, book_service, book_factory, user_id):
        """Test that a slow source cannot outlast the request deadline."""
        store.trending = [book_factory("t1")]
        store.delays = {"random_quality_books": 5.0}
        service = _service(store, book_service, request_timeout=0.2)

        loop = asyncio.get_running_loop()
        started = loop.time()
        feed = await service.get_recommendations(user_id, 20)
        elapsed = loop.time() - started

        assert elapsed < 2.0
        assert [c.book.id for c in feed.recommendations] == ["t1"]

    @pytest.mark.asyncio
    async def test_logged_filter_survives_slow_source(self, store, book_service, book_factory, user_id):
        """Test that logged books are filtered even when a source times out."""
        store.logged = {"t1"}
        store.trending = [book_factory("t1"), book_factory("t2")]
        store.delays = {"random_quality_books": 5.0}
        service = _service(store, book_service, request_timeout=0.2)

        feed = await service.get_recommendations(user_id, 20)

        assert [c.book.id for c in feed.recommendations] == ["t2"]
        assert store.calls[0] == "logged_book_ids"
