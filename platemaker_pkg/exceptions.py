"""Exception types raised while building a Platemaker site."""

from typing import List


class PlatemakerError(Exception):
    """Base class for recoverable build errors."""


class ParseError(PlatemakerError):
    """An article could not be turned into an Article; the build may skip it."""


class InvalidStructureError(ParseError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid article path {path}: {reason}")


class NoFrontmatterError(ParseError):
    def __init__(self, path: str = None):
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"No frontmatter block found{where}")


class InvalidTomlError(ParseError):
    def __init__(self, message: str, path: str = None):
        self.message = message
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"Invalid frontmatter{where}: {message}")


class InvalidEncodingError(ParseError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Article {path} is not valid UTF-8: {reason}")


class WebsiteGenerationError(PlatemakerError):
    """A page could not be generated from its template."""


class InvalidPlaceholderError(WebsiteGenerationError):
    def __init__(self, names: List[str], template: str = None):
        self.names = list(names)
        self.template = template
        where = f" in {template}" if template else ""
        super().__init__(f"These placeholders are invalid{where}: {', '.join(self.names)}")


class SlugCollisionError(WebsiteGenerationError):
    def __init__(self, output_path: str, sources: List[str]):
        self.output_path = output_path
        self.sources = list(sources)
        super().__init__(
            f"Multiple articles would be written to {output_path}: {', '.join(self.sources)}"
        )


class MarkdownProtocolError(AssertionError):
    """The token stream broke an invariant the Markdown pipeline depends on.

    This is a programming error and is never caught by the build.
    """
