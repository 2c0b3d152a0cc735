from __future__ import annotations

import html
from pathlib import Path

import pytest

POST_LAYOUT = """<html><head><title>{{ title }}</title></head>
<body><h1 class="title">{{ title }}</h1><time>{{ date.isoformat() }}</time>
<main>{{ content }}</main></body></html>
"""

INDEX_LAYOUT = """<ul>
{%- for post in recent %}
<li><a href="{{ post.url }}">{{ post.title }}</a> {{ post.date.isoformat() }}</li>
{%- endfor %}
</ul>
"""


class FakeHighlighter:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def highlight(self, language: str, code: str) -> bytes:
        self.calls.append((language, code))
        return f'<div class="highlight" data-lang="{language}">{html.escape(code)}</div>'.encode("utf-8")


@pytest.fixture
def highlighter() -> FakeHighlighter:
    return FakeHighlighter()


@pytest.fixture
def site(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A site directory laid out with the default paths, used as cwd."""
    (tmp_path / "posts").mkdir()
    (tmp_path / "layouts").mkdir()
    (tmp_path / "layouts" / "post.html").write_text(POST_LAYOUT, encoding="utf-8")
    (tmp_path / "layouts" / "index.html").write_text(INDEX_LAYOUT, encoding="utf-8")
    (tmp_path / "static" / "css").mkdir(parents=True)
    (tmp_path / "static" / "css" / "site.css").write_text("body {}\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_post(site_dir: Path, name: str, text: str) -> Path:
    path = site_dir / "posts" / name
    path.write_text(text, encoding="utf-8")
    return path
