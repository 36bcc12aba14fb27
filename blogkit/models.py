"""Post records consumed by the related-content selector."""

from __future__ import annotations

import dataclasses
import datetime as _dt
from typing import Any, Mapping

from .utils import coerce_string, coerce_string_list, first_string, parse_date, slugify

__all__ = ["Post"]


def _date_text(value: Any) -> str:
    if isinstance(value, (_dt.date, _dt.datetime)):
        return value.isoformat()
    return coerce_string(value)


def _unique_refs(value: Any) -> tuple[str, ...]:
    refs: list[str] = []
    for ref in coerce_string_list(value):
        if ref not in refs:
            refs.append(ref)
    return tuple(refs)


@dataclasses.dataclass(frozen=True, slots=True)
class Post:
    """A single blog post as seen by the selector.

    Fields are normalised on construction: ``tags`` becomes a ``frozenset``,
    ``related`` a de-duplicated ``tuple`` and the text fields plain strings,
    so absent front-matter values never surface as ``None``.
    """

    slug: str
    title: str = ""
    excerpt: str = ""
    date: str = ""
    tags: frozenset[str] = frozenset()
    author: str = ""
    related: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "slug", coerce_string(self.slug))
        object.__setattr__(self, "title", coerce_string(self.title))
        object.__setattr__(self, "excerpt", coerce_string(self.excerpt))
        object.__setattr__(self, "date", _date_text(self.date))
        object.__setattr__(self, "tags", frozenset(coerce_string_list(self.tags)))
        object.__setattr__(self, "author", coerce_string(self.author))
        object.__setattr__(self, "related", _unique_refs(self.related))

    @property
    def published(self) -> _dt.date | None:
        return parse_date(self.date)

    @classmethod
    def from_dict(cls, item: Mapping[str, Any]) -> "Post":
        """Build a ``Post`` from a loosely shaped mapping.

        Raises ``ValueError`` when neither ``slug`` nor ``title`` is usable.
        """

        if not isinstance(item, Mapping):
            raise ValueError(f"post must be a mapping, got {type(item).__name__}")

        data = dict(item)
        title = first_string(data, ("title", "name", "headline"))
        slug = first_string(data, ("slug", "id"))
        if not slug:
            if not title:
                raise ValueError("post has neither a slug nor a title")
            slug = slugify(title)

        raw_date = data.get("date")
        if raw_date is None:
            raw_date = data.get("published_at")

        return cls(
            slug=slug,
            title=title,
            excerpt=first_string(data, ("excerpt", "summary", "description")),
            date=raw_date,
            tags=data.get("tags"),
            author=data.get("author"),
            related=data.get("related"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "excerpt": self.excerpt,
            "date": self.date,
            "tags": sorted(self.tags),
            "author": self.author,
            "related": list(self.related),
        }
