from __future__ import annotations

from pathlib import Path
from typing import Optional

from .content import Post, PostCollection
from .highlight import HighlightCache
from .render import RenderedPage, Templates, render_post, render_template

INDEX_PAGE = "index.html"


def post_output_path(post: Post) -> Path:
    return Path(post.slug) / INDEX_PAGE


def build_post_page(post: Post, templates: Templates, cache: HighlightCache) -> RenderedPage:
    return RenderedPage(path=post_output_path(post), data=render_post(post, templates, cache))


def build_posts(posts: PostCollection, templates: Templates, cache: HighlightCache) -> list[RenderedPage]:
    return [build_post_page(post, templates, cache) for post in posts]


def build_index(posts: PostCollection, templates: Templates, limit: Optional[int] = None) -> RenderedPage:
    # No highlighting here: the index only lists post metadata.
    recent = posts.limit(limit)
    return RenderedPage(path=Path(INDEX_PAGE), data=render_template(templates.index, recent=recent))
