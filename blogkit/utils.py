"""Small coercion helpers shared by the catalog loader and the selector."""

from __future__ import annotations

import datetime as _dt
import re
import unicodedata
from typing import Any, Iterable, Mapping


def coerce_string(value: Any) -> str:
    """Return ``value`` as stripped text; ``None`` and booleans become ``""``."""

    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip()


def first_string(item: Mapping[str, Any], keys: Iterable[str]) -> str:
    """Return the first non-blank value among ``keys`` in ``item``."""

    for text in (coerce_string(item.get(key)) for key in keys):
        if text:
            return text
    return ""


def coerce_string_list(value: Any) -> list[str]:
    """Return ``value`` as a list of non-empty strings.

    Accepts a list/tuple/set of values or a single comma-separated string.
    ``None`` and anything unrecognised become an empty list.
    """

    if value is None:
        return []
    if isinstance(value, str):
        raw_items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        raw_items = value
    else:
        return []

    cleaned: list[str] = []
    for raw in raw_items:
        text = coerce_string(raw)
        if text:
            cleaned.append(text)
    return cleaned


def slugify(s: str) -> str:
    s = unicodedata.normalize("NFKD", s or "")
    s = s.encode("ascii", "ignore").decode("ascii").lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-") or "post"


def parse_date(value: Any) -> _dt.date | None:
    """Convert ``value`` into a :class:`datetime.date` when possible."""

    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value

    raw = coerce_string(value)
    if not raw:
        return None

    candidate = raw
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        return _dt.datetime.fromisoformat(candidate).date()
    except ValueError:
        pass

    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%d %b %Y", "%d %B %Y", "%b %d, %Y", "%B %d, %Y"):
        try:
            return _dt.datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def positive_int(value: Any, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default
