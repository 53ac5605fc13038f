"""
Platemaker - a static site generator for dated Markdown articles.

Platemaker reads articles laid out as ``YYYY/MM/slug.md`` with a TOML
frontmatter, renders them through HTML templates with ``${name}``
placeholders, and writes an article page per article plus an index page.
"""

__version__ = "1.0.0"

from .core import BuildReport, Platemaker
from .parse import MarkdownParser

__all__ = ['BuildReport', 'MarkdownParser', 'Platemaker']
