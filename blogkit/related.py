#!/usr/bin/env python3
"""Pick the "related articles" shown under a post.

Selection runs in two phases.  Slugs the author listed in ``related`` come
first, in the order given, as long as they exist in the catalog.  The rest of
the candidate pool is filled with the best scoring posts and, when scores run
out, with the most recent posts.  The displayed subset is then taken from the
pool, optionally shuffled with an injected random source.

Scoring for a candidate ``p`` against the target ``t``::

    3 * |shared tags| + 2 * (any shared tag) + 1 * (dates < 30 days apart)
        + 1 * (same non-empty author)

Equal scores keep catalog order.  Only positive scores enter the pool; posts
with nothing in common with the target arrive through the recency backfill.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import os
import pathlib
import random
import sys
from typing import Iterable, Sequence

from .catalog import POSTS_JSON, find_post, load_catalog
from .models import Post
from .utils import positive_int

TAG_WEIGHT = 3
SHARED_TAG_BONUS = 2
RECENT_BONUS = 1
AUTHOR_BONUS = 1
RECENT_WINDOW_DAYS = 30

DEFAULT_LIMIT = positive_int(os.getenv("RELATED_LIMIT"), 3)
DEFAULT_POOL_SIZE = positive_int(os.getenv("RELATED_POOL_SIZE"), 6)

OUTPUT_PATH = POSTS_JSON.parent / "related.json"

__all__ = [
    "score_post",
    "rank_candidates",
    "curated_posts",
    "build_candidate_pool",
    "select_related",
    "build_related_index",
]


def _check_target(target: Post) -> None:
    slug = getattr(target, "slug", None)
    if not isinstance(slug, str) or not slug.strip():
        raise ValueError("target post must have a non-empty slug")


def _unique_by_slug(catalog: Iterable[Post]) -> list[Post]:
    seen: set[str] = set()
    unique: list[Post] = []
    for post in catalog:
        if post.slug in seen:
            continue
        seen.add(post.slug)
        unique.append(post)
    return unique


def score_post(target: Post, post: Post) -> int:
    """Return the relatedness score of ``post`` with respect to ``target``."""

    score = 0

    shared = len(target.tags & post.tags)
    if shared:
        score += TAG_WEIGHT * shared + SHARED_TAG_BONUS

    target_date = target.published
    post_date = post.published
    if target_date is not None and post_date is not None:
        if abs((target_date - post_date).days) < RECENT_WINDOW_DAYS:
            score += RECENT_BONUS

    if target.author and target.author == post.author:
        score += AUTHOR_BONUS

    return score


def rank_candidates(target: Post, catalog: Sequence[Post]) -> list[tuple[Post, int]]:
    """Score every post except ``target``, best first.

    Zero scores are kept so callers can still see the full ordering.
    ``sorted`` is stable, so ties stay in catalog order.
    """

    _check_target(target)
    scored = [
        (post, score_post(target, post))
        for post in _unique_by_slug(catalog)
        if post.slug != target.slug
    ]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def curated_posts(target: Post, catalog: Sequence[Post]) -> list[Post]:
    """Resolve ``target.related`` against the catalog, keeping curated order."""

    _check_target(target)
    by_slug = {post.slug: post for post in reversed(list(catalog))}
    curated: list[Post] = []
    seen: set[str] = {target.slug}
    for slug in target.related:
        post = by_slug.get(slug)
        if post is None or slug in seen:
            continue
        seen.add(slug)
        curated.append(post)
    return curated


def _by_recency(posts: Sequence[Post]) -> list[Post]:
    dated = [(post.published, index, post) for index, post in enumerate(posts)]
    dated.sort(key=lambda rec: (rec[0] is None, -(rec[0] or _dt.date.min).toordinal(), rec[1]))
    return [rec[2] for rec in dated]


def build_candidate_pool(
    target: Post,
    catalog: Sequence[Post],
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> list[Post]:
    """Return the deterministic candidate pool for ``target``.

    Curated entries come first, then positive-score entries, then the newest
    remaining posts, with no slug repeated and never more than ``pool_size``.
    """

    _check_target(target)
    if pool_size < 1:
        raise ValueError(f"pool_size must be at least 1, got {pool_size}")

    catalog = _unique_by_slug(catalog)
    pool = curated_posts(target, catalog)[:pool_size]
    in_pool = {post.slug for post in pool}

    if len(pool) < pool_size:
        for post, score in rank_candidates(target, catalog):
            if len(pool) >= pool_size or score <= 0:
                break
            if post.slug in in_pool:
                continue
            pool.append(post)
            in_pool.add(post.slug)

    if len(pool) < pool_size:
        for post in _by_recency(catalog):
            if len(pool) >= pool_size:
                break
            if post.slug == target.slug or post.slug in in_pool:
                continue
            pool.append(post)
            in_pool.add(post.slug)

    return pool


def select_related(
    target: Post,
    catalog: Sequence[Post],
    limit: int = DEFAULT_LIMIT,
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
    rng: random.Random | None = None,
) -> list[Post]:
    """Return up to ``limit`` posts related to ``target``.

    With ``rng`` the pool is shuffled before truncation, so the displayed
    subset varies per render but is reproducible for a seeded generator.
    Without it the first ``limit`` pool entries are returned in pool order.
    The pool grows to ``limit`` when ``limit`` exceeds ``pool_size``.
    """

    _check_target(target)
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")
    if pool_size < 1:
        raise ValueError(f"pool_size must be at least 1, got {pool_size}")
    if limit == 0:
        return []

    pool = build_candidate_pool(target, catalog, pool_size=max(pool_size, limit))
    if rng is not None:
        pool = list(pool)
        rng.shuffle(pool)
    return pool[:limit]


def build_related_index(
    catalog: Sequence[Post],
    *,
    limit: int = DEFAULT_LIMIT,
    pool_size: int = DEFAULT_POOL_SIZE,
    rng: random.Random | None = None,
) -> dict[str, list[str]]:
    """Map every slug in ``catalog`` to the slugs of its related posts."""

    index: dict[str, list[str]] = {}
    for post in _unique_by_slug(catalog):
        related = select_related(post, catalog, limit, pool_size=pool_size, rng=rng)
        index[post.slug] = [item.slug for item in related]
    return index


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compute related posts from the post catalog.")
    parser.add_argument("--catalog", type=pathlib.Path, default=POSTS_JSON, help="Path to posts.json")
    parser.add_argument("--output", type=pathlib.Path, default=OUTPUT_PATH, help="Where to write related.json")
    parser.add_argument("--slug", help="Only print the related posts for this slug")
    parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Related posts per entry")
    parser.add_argument("--pool-size", type=int, default=DEFAULT_POOL_SIZE, help="Candidate pool size")
    parser.add_argument("--seed", type=int, default=None, help="Shuffle the pool with this seed")

    args = parser.parse_args(argv)

    catalog = load_catalog(args.catalog)
    rng = random.Random(args.seed) if args.seed is not None else None

    try:
        if args.slug:
            target = find_post(catalog, args.slug)
            if target is None:
                print(f"Unknown slug: {args.slug}", file=sys.stderr)
                return 1
            for post in select_related(target, catalog, args.limit, pool_size=args.pool_size, rng=rng):
                print(f"{post.slug}\t{post.title}")
            return 0

        index = build_related_index(catalog, limit=args.limit, pool_size=args.pool_size, rng=rng)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    output_path = args.output
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(index, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    print(f"Wrote related posts for {len(index)} posts to {output_path}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
