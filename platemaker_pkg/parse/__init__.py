"""Markdown to HTML conversion for articles."""

from .article import decode_metadata, make_article_from_markdown, parse_markdown_file
from .emoji import EmojiDataset
from .pipeline import MarkdownParser, ParsedContent

__all__ = [
    'EmojiDataset',
    'MarkdownParser',
    'ParsedContent',
    'decode_metadata',
    'make_article_from_markdown',
    'parse_markdown_file',
]
