from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

try:
    import tomllib
except ImportError:  # Python < 3.11
    import tomli as tomllib

from .errors import ConfigError

HIGHLIGHTERS = ("pygmentize", "pygments")


@dataclass
class SiteConfig:
    posts_dir: Path = Path("posts")
    build_dir: Path = Path("public")
    static_dir: Path = Path("static")
    post_layout: Path = Path("layouts/post.html")
    index_layout: Path = Path("layouts/index.html")
    cache_dir: Path = Path(".pygments-cache")
    highlighter: str = "pygmentize"
    pygmentize_command: str = "pygmentize"
    index_limit: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: dict) -> "SiteConfig":
        config = cls()
        for field in fields(cls):
            value = data.get(field.name)
            if value is None:
                continue
            default = getattr(config, field.name)
            if isinstance(default, Path):
                value = Path(str(value))
            elif field.name == "index_limit":
                value = parse_limit(value)
            else:
                value = str(value)
            setattr(config, field.name, value)
        if config.highlighter not in HIGHLIGHTERS:
            raise ConfigError(f"Unknown highlighter {config.highlighter!r}, expected one of {', '.join(HIGHLIGHTERS)}")
        return config


def parse_limit(value: object) -> Optional[int]:
    """Index limits of zero or less mean "no limit"."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"Invalid index limit: {value!r}")
    try:
        limit = int(str(value).strip())
    except ValueError:
        raise ConfigError(f"Invalid index limit: {value!r}") from None
    return limit if limit > 0 else None


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return data
