"""Load the post catalog from ``data/posts.json``.

The catalog is a JSON list of post objects, or an object wrapping that list
under ``posts``, ``items`` or ``data``.  Loading is lenient: a missing or
broken file yields an empty catalog and malformed entries are skipped.
"""

from __future__ import annotations

import json
import os
import pathlib
import sys
from typing import Any, Iterable, Sequence

from .models import Post

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
POSTS_JSON = pathlib.Path(os.getenv("POSTS_JSON") or (PROJECT_ROOT / "data" / "posts.json"))

__all__ = ["POSTS_JSON", "load_catalog", "parse_catalog", "find_post"]


def _load_payload(path: pathlib.Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Catalog unreadable at {path}: {exc}", file=sys.stderr)
        return []


def _entries(payload: Any) -> Iterable[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("posts", "items", "data"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


def parse_catalog(payload: Any) -> list[Post]:
    """Coerce a decoded JSON payload into ``Post`` records, first slug wins."""

    posts: list[Post] = []
    seen: set[str] = set()
    for index, entry in enumerate(_entries(payload)):
        try:
            post = Post.from_dict(entry)
        except ValueError as exc:
            print(f"Skipping catalog entry {index}: {exc}", file=sys.stderr)
            continue
        if post.slug in seen:
            print(f"Skipping duplicate slug {post.slug!r} at entry {index}", file=sys.stderr)
            continue
        seen.add(post.slug)
        posts.append(post)
    return posts


def load_catalog(path: pathlib.Path | str | None = None) -> list[Post]:
    path = pathlib.Path(path) if path is not None else POSTS_JSON
    path = path.expanduser()
    if not path.exists():
        return []
    return parse_catalog(_load_payload(path))


def find_post(catalog: Sequence[Post], slug: str) -> Post | None:
    for post in catalog:
        if post.slug == slug:
            return post
    return None
