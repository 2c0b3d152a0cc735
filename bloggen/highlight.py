from __future__ import annotations

import html
import re
import subprocess
from typing import Protocol

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .cache import CacheStore, cache_key
from .errors import HighlighterProcessError

CODE_BLOCK_RE = re.compile(rb'<pre><code class="(.*?)">(.*?)</code></pre>', re.DOTALL)
LANGUAGE_PREFIX = "language-"


class Highlighter(Protocol):
    def highlight(self, language: str, code: str) -> bytes: ...


class PygmentizeHighlighter:
    """Runs the pygmentize command once per block."""

    def __init__(self, command: str = "pygmentize") -> None:
        self.command = command

    def highlight(self, language: str, code: str) -> bytes:
        cmd = [self.command, "-fhtml", "-l", language]
        try:
            result = subprocess.run(cmd, input=code.encode("utf-8"), capture_output=True)
        except OSError as exc:
            raise HighlighterProcessError(f'Running "{" ".join(cmd)}" failed: {exc}') from exc
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise HighlighterProcessError(
                f'Running "{" ".join(cmd)}" failed with exit code {result.returncode}: {stderr}',
                returncode=result.returncode,
                stderr=stderr,
            )
        return result.stdout


class PygmentsHighlighter:
    """Same markup as `pygmentize -fhtml`, without the subprocess."""

    def __init__(self) -> None:
        self.formatter = HtmlFormatter()

    def highlight(self, language: str, code: str) -> bytes:
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound as exc:
            raise HighlighterProcessError(f"No Pygments lexer for language {language!r}") from exc
        return pygments_highlight(code, lexer, self.formatter).encode("utf-8")


def language_from_class(css_class: str) -> str:
    tokens = css_class.split()
    language = tokens[0] if tokens else ""
    if language.startswith(LANGUAGE_PREFIX):
        language = language[len(LANGUAGE_PREFIX) :]
    return language


class HighlightCache:
    def __init__(self, store: CacheStore, highlighter: Highlighter) -> None:
        self.store = store
        self.highlighter = highlighter
        self.hits = 0
        self.misses = 0

    def highlight(self, document: bytes) -> bytes:
        return CODE_BLOCK_RE.sub(lambda match: self.highlight_block(match.group(0)), document)

    def highlight_block(self, raw: bytes) -> bytes:
        # The key covers the tags too, so a new language class means a new entry.
        key = cache_key(raw)
        cached = self.store.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        match = CODE_BLOCK_RE.fullmatch(raw)
        if match is None:
            raise ValueError("highlight_block expects a single <pre><code> block")
        language = language_from_class(match.group(1).decode("utf-8"))
        code = html.unescape(match.group(2).decode("utf-8"))
        output = self.highlighter.highlight(language, code)
        self.store.put(key, output)
        self.misses += 1
        return output
