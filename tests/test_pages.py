import datetime as dt
from pathlib import Path

from bloggen.cache import CacheStore
from bloggen.content import Post, PostCollection, load_posts
from bloggen.highlight import HighlightCache
from bloggen.pages import build_index, build_posts
from bloggen.render import load_templates

from conftest import write_post


def templates_for(site):
    return load_templates(site / "layouts" / "post.html", site / "layouts" / "index.html")


def test_build_posts_paths(site, highlighter):
    write_post(site, "2023-05-01-hello.md", "Hello\n---\nbody\n")
    write_post(site, "2023-06-01-later.md", "Later\n---\nbody\n")
    posts = load_posts(site / "posts")

    pages = build_posts(posts, templates_for(site), HighlightCache(CacheStore(site / ".cache"), highlighter))

    assert [page.path for page in pages] == [Path("later/index.html"), Path("hello/index.html")]
    assert b"<title>Later</title>" in pages[0].data


def test_build_index_lists_recent_posts(site):
    posts = PostCollection(
        [
            Post(Path("c.md"), "c", "/c", dt.date(2023, 3, 1), title="Third"),
            Post(Path("b.md"), "b", "/b", dt.date(2023, 2, 1), title="Second"),
            Post(Path("a.md"), "a", "/a", dt.date(2023, 1, 1), title="First"),
        ]
    )

    page = build_index(posts, templates_for(site))

    assert page.path == Path("index.html")
    text = page.data.decode("utf-8")
    assert text.index('href="/c"') < text.index('href="/b"') < text.index('href="/a"')
    assert "Third</a> 2023-03-01" in text


def test_build_index_limit(site):
    posts = PostCollection(
        [
            Post(Path("b.md"), "b", "/b", dt.date(2023, 2, 1), title="Second"),
            Post(Path("a.md"), "a", "/a", dt.date(2023, 1, 1), title="First"),
        ]
    )

    text = build_index(posts, templates_for(site), limit=1).data.decode("utf-8")

    assert 'href="/b"' in text
    assert 'href="/a"' not in text


def test_build_index_does_not_highlight(site):
    (site / "layouts" / "index.html").write_text(
        '<pre><code class="language-python">x</code></pre>{{ recent|length }}', encoding="utf-8"
    )
    page = build_index(PostCollection(), templates_for(site))
    assert page.data == b'<pre><code class="language-python">x</code></pre>0'
