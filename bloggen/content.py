from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from markupsafe import Markup

from .errors import DuplicateSlugError, FilenameFormatError, FilesystemError

POST_EXTENSION = ".md"
DATE_FMT = "%Y-%m-%d"
DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class Post:
    source_path: Path
    slug: str
    url: str
    date: dt.date
    title: str = ""
    content: Markup = Markup("")


class PostCollection(list):
    """Posts ordered newest first once sort_by_date() has run."""

    def sort_by_date(self) -> None:
        self.sort(key=lambda post: post.date, reverse=True)

    def limit(self, n: Optional[int]) -> "PostCollection":
        if n is None:
            return PostCollection(self)
        if n < 0:
            raise ValueError(f"limit must be non-negative, got {n}")
        return PostCollection(self[:n])


def discover_posts(directory: Path, pattern: str = f"*{POST_EXTENSION}") -> list[Path]:
    if not directory.is_dir():
        raise FilesystemError(f"Posts directory not found: {directory}")
    return sorted((path for path in directory.glob(pattern) if path.is_file()), key=lambda p: p.name)


def parse_post_filename(name: str) -> tuple[dt.date, str]:
    # YYYY-MM-DD, one separator character, then <slug>.md
    date_part = name[:10]
    name_part = name[11:]
    if len(name) < 11 or not DATE_PREFIX_RE.match(date_part):
        raise FilenameFormatError(f"Post filename must start with a YYYY-MM-DD date: {name}")
    try:
        date = dt.datetime.strptime(date_part, DATE_FMT).date()
    except ValueError as exc:
        raise FilenameFormatError(f"Invalid date prefix in post filename {name}: {exc}") from exc
    if not name_part.endswith(POST_EXTENSION):
        raise FilenameFormatError(f"Post filename must end with {POST_EXTENSION}: {name}")
    slug = name_part[: -len(POST_EXTENSION)]
    if not slug:
        raise FilenameFormatError(f"Post filename has an empty slug: {name}")
    return date, slug


def load_post(path: Path) -> Post:
    date, slug = parse_post_filename(path.name)
    return Post(source_path=path, slug=slug, url=f"/{slug}", date=date)


def load_posts(directory: Path) -> PostCollection:
    posts = PostCollection(load_post(path) for path in discover_posts(directory))
    posts.sort_by_date()
    return posts


def check_unique_slugs(posts: Iterable[Post]) -> None:
    seen: dict[str, Post] = {}
    for post in posts:
        other = seen.get(post.slug)
        if other is not None:
            raise DuplicateSlugError(
                f"Duplicate slug {post.slug!r}: {other.source_path} and {post.source_path}"
            )
        seen[post.slug] = post
