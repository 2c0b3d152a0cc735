from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

import jinja2
import markdown
from markupsafe import Markup

from .content import Post
from .errors import FilesystemError, FrontMatterError, TemplateError
from .highlight import HighlightCache

FRONT_MATTER_SEPARATOR = "---"
MARKDOWN_EXTENSIONS = [
    "fenced_code",
    "tables",
    "toc",
    "def_list",
    "smarty",
    "pymdownx.tilde",
    "pymdownx.magiclink",
]


@dataclass
class Templates:
    post: jinja2.Template
    index: jinja2.Template


@dataclass
class RenderedPage:
    path: Path
    data: bytes


def split_source(text: str, source: Path) -> tuple[str, str]:
    parts = text.split("\n", 2)
    if len(parts) < 3:
        raise FrontMatterError(f"Improperly formatted post {source}: expected a title line and a separator line")
    title, separator, body = parts
    if separator.rstrip("\r") != FRONT_MATTER_SEPARATOR:
        raise FrontMatterError(
            f"Improperly formatted post {source}: second line must be {FRONT_MATTER_SEPARATOR!r}, got {separator!r}"
        )
    return title.rstrip("\r"), body


def markdown_to_html(text: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    return md.convert(text)


def read_post_source(post: Post) -> str:
    try:
        return post.source_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Cannot read post {post.source_path}: {exc}") from exc


def load_template(path: Path) -> jinja2.Template:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(path.parent)),
        autoescape=jinja2.select_autoescape(["html", "xml"]),
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
    )
    try:
        return env.get_template(path.name)
    except jinja2.TemplateNotFound as exc:
        raise TemplateError(f"Template not found: {path}") from exc
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateError(f"Syntax error in template {path}, line {exc.lineno}: {exc.message}") from exc


def load_templates(post_layout: Path, index_layout: Path) -> Templates:
    return Templates(post=load_template(post_layout), index=load_template(index_layout))


def render_template(template: jinja2.Template, **context: object) -> bytes:
    try:
        return template.render(**context).encode("utf-8")
    except jinja2.TemplateError as exc:
        raise TemplateError(f"Cannot render template {template.name}: {exc}") from exc


def render_post(post: Post, templates: Templates, cache: HighlightCache) -> bytes:
    post.title, body = split_source(read_post_source(post), post.source_path)
    post.content = Markup(markdown_to_html(body))
    document = render_template(
        templates.post,
        post=post,
        title=post.title,
        slug=post.slug,
        url=post.url,
        date=post.date,
        content=post.content,
    )
    return cache.highlight(document)


def write_page(build_dir: Path, page: RenderedPage) -> Path:
    path = build_dir / page.path
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(page.data)
    except OSError as exc:
        raise FilesystemError(f"Cannot write {path}: {exc}") from exc
    return path


def copy_static(static_dir: Path, build_dir: Path) -> Path:
    if not static_dir.is_dir():
        raise FilesystemError(f"Static directory not found: {static_dir}")
    dest = build_dir / static_dir.name
    try:
        shutil.copytree(static_dir, dest, dirs_exist_ok=True)
    except (OSError, shutil.Error) as exc:
        raise FilesystemError(f"Cannot copy static assets from {static_dir} to {dest}: {exc}") from exc
    return dest
