import json

from blogkit.models import Post
from blogkit.render import render_related

import build


def test_render_related_empty_is_blank():
    assert render_related([]) == ""


def test_render_related_lists_posts_with_tags_and_links():
    posts = [
        Post(slug="docker-basics", title="Docker <Basics>", excerpt="Ship it.", tags=frozenset({"docker", "devops"})),
        Post(slug="no-title"),
    ]
    html = render_related(posts, heading="Keep reading")

    assert "<h3>Keep reading</h3>" in html
    assert 'href="/blog/docker-basics"' in html
    assert "Docker &lt;Basics&gt;" in html
    assert "<p>Ship it.</p>" in html
    assert html.index('<span class="tag">devops</span>') < html.index('<span class="tag">docker</span>')
    assert "<h4>no-title</h4>" in html


def test_build_writes_one_partial_per_post(tmp_path, capsys):
    catalog_path = tmp_path / "posts.json"
    catalog_path.write_text(
        json.dumps(
            [
                {"slug": "a", "title": "A", "tags": ["react"], "date": "2024-01-01"},
                {"slug": "b", "title": "B", "tags": ["react"], "date": "2024-01-02"},
                {"slug": "c", "title": "C", "date": "2024-01-03"},
            ]
        ),
        encoding="utf-8",
    )

    written = build.build(catalog_path, tmp_path / "dist", seed=3)

    assert written == 3
    out_dir = tmp_path / "dist" / "related"
    assert sorted(path.name for path in out_dir.iterdir()) == ["a.html", "b.html", "c.html"]
    partial = (out_dir / "a.html").read_text(encoding="utf-8")
    assert 'href="/blog/b"' in partial
    assert 'href="/blog/a"' not in partial
    assert "Wrote 3 related partials" in capsys.readouterr().out


def test_build_skips_slugs_that_escape_the_output_dir(tmp_path, capsys):
    catalog_path = tmp_path / "posts.json"
    catalog_path.write_text(
        json.dumps(
            [
                {"slug": "a", "title": "A", "tags": ["react"]},
                {"slug": "guides/b", "title": "B", "tags": ["react"]},
                {"slug": "../evil", "title": "Evil"},
                {"slug": "c", "title": "C"},
            ]
        ),
        encoding="utf-8",
    )

    written = build.build(catalog_path, tmp_path / "dist", seed=1)

    assert written == 2
    out_dir = tmp_path / "dist" / "related"
    assert sorted(path.name for path in out_dir.iterdir()) == ["a.html", "c.html"]
    assert not (tmp_path / "dist" / "evil.html").exists()
    err = capsys.readouterr().err
    assert "Skipping unsafe slug 'guides/b'" in err
    assert "Skipping unsafe slug '../evil'" in err


def test_partial_path_stays_inside_output_dir(tmp_path):
    assert build.partial_path(tmp_path, "hello") == (tmp_path / "hello.html").resolve()
    assert build.partial_path(tmp_path, "a/b") is None
    assert build.partial_path(tmp_path, "..\\x") is None
    assert build.partial_path(tmp_path, "") is None
