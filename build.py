"""Write a related-articles partial for every post in the catalog."""

import os
import random
import sys
from pathlib import Path

from blogkit.catalog import POSTS_JSON, load_catalog
from blogkit.related import DEFAULT_LIMIT, DEFAULT_POOL_SIZE, select_related
from blogkit.render import render_related


def _env_seed():
    raw = os.getenv("RELATED_SEED", "").strip()
    try:
        return int(raw) if raw else None
    except ValueError:
        return None


def partial_path(out_dir, slug):
    """Return the partial path for ``slug`` or ``None`` if it would leave ``out_dir``."""
    out_dir = Path(out_dir).resolve()
    if not slug or "/" in slug or "\\" in slug:
        return None
    path = (out_dir / f"{slug}.html").resolve()
    if path.parent != out_dir:
        return None
    return path


def build(catalog_path=POSTS_JSON, dest=Path("dist"), *, seed=None):
    catalog = load_catalog(catalog_path)
    out_dir = Path(dest) / "related"
    out_dir.mkdir(parents=True, exist_ok=True)

    rng = random.Random(seed)
    written = 0
    for post in catalog:
        path = partial_path(out_dir, post.slug)
        if path is None:
            print(f"Skipping unsafe slug {post.slug!r}", file=sys.stderr)
            continue
        related = select_related(post, catalog, DEFAULT_LIMIT, pool_size=DEFAULT_POOL_SIZE, rng=rng)
        path.write_text(render_related(related), encoding="utf-8")
        written += 1

    print(f"Wrote {written} related partials to {out_dir}")
    return written


if __name__ == "__main__":
    build(seed=_env_seed())
