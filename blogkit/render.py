"""Render the related-articles block with Jinja2."""

from __future__ import annotations

import functools
import pathlib
from typing import Sequence

from jinja2 import Environment, FileSystemLoader

from .models import Post

TEMPLATES_DIR = pathlib.Path(__file__).resolve().parent / "templates"


@functools.lru_cache(maxsize=None)
def get_environment() -> Environment:
    return Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=True)


def render_related(
    posts: Sequence[Post],
    *,
    heading: str = "Related Articles",
    base_url: str = "/blog",
) -> str:
    """Return the HTML partial for ``posts``, or ``""`` when there are none."""

    if not posts:
        return ""
    template = get_environment().get_template("related.html")
    return template.render(posts=list(posts), heading=heading, base_url=base_url.rstrip("/"))
