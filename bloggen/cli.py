from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .cache import CacheStore
from .config import HIGHLIGHTERS, SiteConfig, load_config, parse_limit
from .content import check_unique_slugs, load_posts
from .errors import BuildError, FilesystemError
from .highlight import HighlightCache, Highlighter, PygmentizeHighlighter, PygmentsHighlighter
from .pages import build_index, build_posts
from .render import copy_static, load_templates, write_page


@dataclass
class BuildResult:
    posts: int
    pages_written: list[Path]
    cache_hits: int
    cache_misses: int
    cache_entries: int


def make_highlighter(config: SiteConfig) -> Highlighter:
    if config.highlighter == "pygments":
        return PygmentsHighlighter()
    return PygmentizeHighlighter(config.pygmentize_command)


def build_site(config: SiteConfig, highlighter: Optional[Highlighter] = None) -> BuildResult:
    if not config.static_dir.is_dir():
        raise FilesystemError(f"Static directory not found: {config.static_dir}")
    posts = load_posts(config.posts_dir)
    check_unique_slugs(posts)
    templates = load_templates(config.post_layout, config.index_layout)
    cache = HighlightCache(CacheStore(config.cache_dir), highlighter or make_highlighter(config))

    # Render everything before touching the build directory so a bad post leaves no output.
    pages = build_posts(posts, templates, cache)
    pages.append(build_index(posts, templates, config.index_limit))

    written = [write_page(config.build_dir, page) for page in pages]
    copy_static(config.static_dir, config.build_dir)
    return BuildResult(
        posts=len(posts),
        pages_written=written,
        cache_hits=cache.hits,
        cache_misses=cache.misses,
        cache_entries=len(cache.store),
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    defaults = SiteConfig.from_mapping(load_config(Path(pre_args.config)))

    parser = argparse.ArgumentParser(description="Build a static blog from dated Markdown posts.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--posts", default=str(defaults.posts_dir), help="Directory containing Markdown posts.")
    parser.add_argument("--output", default=str(defaults.build_dir), help="Output directory for the site.")
    parser.add_argument("--static", default=str(defaults.static_dir), help="Directory copied into the output.")
    parser.add_argument("--post-layout", default=str(defaults.post_layout), help="Template for post pages.")
    parser.add_argument("--index-layout", default=str(defaults.index_layout), help="Template for the index page.")
    parser.add_argument(
        "--cache-dir",
        default=str(defaults.cache_dir),
        help="Directory holding highlighted code blocks between builds.",
    )
    parser.add_argument(
        "--highlighter",
        default=defaults.highlighter,
        choices=HIGHLIGHTERS,
        help="Run the pygmentize command or call Pygments in-process.",
    )
    parser.add_argument(
        "--pygmentize-command",
        default=defaults.pygmentize_command,
        help="Executable used by the pygmentize highlighter.",
    )
    parser.add_argument(
        "--index-limit",
        default=defaults.index_limit or 0,
        type=int,
        help="Maximum number of posts on the index page (0 = all).",
    )
    parser.add_argument("--quiet", action="store_true", help="Only report errors.")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> SiteConfig:
    return SiteConfig(
        posts_dir=Path(args.posts),
        build_dir=Path(args.output),
        static_dir=Path(args.static),
        post_layout=Path(args.post_layout),
        index_layout=Path(args.index_layout),
        cache_dir=Path(args.cache_dir),
        highlighter=args.highlighter,
        pygmentize_command=args.pygmentize_command,
        index_limit=parse_limit(args.index_limit),
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        args = parse_args(argv)
        config = config_from_args(args)
        start = time.perf_counter()
        result = build_site(config)
    except BuildError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    if args.quiet:
        return
    print(f"Built {result.posts} posts in {elapsed:.2f}s.")
    print(
        f"Highlighted code blocks: {result.cache_hits} cached, {result.cache_misses} new, "
        f"{result.cache_entries} stored."
    )
    print(f"Site generated in: {config.build_dir}")
