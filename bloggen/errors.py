from __future__ import annotations


class BuildError(Exception):
    """Base class for every error that aborts a build."""


class ConfigError(BuildError):
    pass


class FilesystemError(BuildError):
    pass


class TemplateError(BuildError):
    pass


class PostFormatError(BuildError):
    pass


class FilenameFormatError(PostFormatError):
    pass


class FrontMatterError(PostFormatError):
    pass


class DuplicateSlugError(PostFormatError):
    pass


class HighlighterProcessError(BuildError):
    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
