"""Merging, filtering and ranking of candidate lists."""

import random
from collections.abc import Iterable

from app.services.recommendation.types import Candidate

SHUFFLE_HEAD = 3


def dedupe_and_rank(
    candidates: Iterable[Candidate],
    logged_book_ids: set[str],
    limit: int,
    rng: random.Random | None = None,
) -> list[Candidate]:
    """Turn concatenated source output into the final ranking.

    Candidates must arrive in source order (similar, friend, category,
    trending, serendipity). The first candidate seen for a book wins, even
    if a later source scored it higher. Ties in score keep arrival order.

    When more than ``SHUFFLE_HEAD`` results remain, the first
    ``SHUFFLE_HEAD`` are shuffled among themselves so the top of the feed
    varies between calls; everything below stays in score order.
    """
    seen: set[str] = set()
    unique: list[Candidate] = []
    for candidate in candidates:
        book_id = candidate.book.id
        if not book_id or book_id in logged_book_ids or book_id in seen:
            continue
        seen.add(book_id)
        unique.append(candidate)

    # sorted() is stable
    ranked = sorted(unique, key=lambda c: c.score, reverse=True)[: max(limit, 0)]

    if len(ranked) > SHUFFLE_HEAD:
        head = ranked[:SHUFFLE_HEAD]
        (rng or random.Random()).shuffle(head)
        ranked[:SHUFFLE_HEAD] = head

    return ranked
