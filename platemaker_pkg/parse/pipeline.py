"""
The Markdown pipeline.

Every event produced by the tokenizer runs through a fixed chain of
sub-transformers. Each one sees the event as left by the previous one and
answers with ``Continue``, ``Discard`` or ``ReplaceWith``. When the token
stream is exhausted every sub-transformer may append trailing events.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from ..exceptions import NoFrontmatterError
from .code_block import CodeBlockTransformer, SyntaxHighlighter
from .control import Continue, Discard, Ignore, ReplaceWith
from .emoji import EmojiDataset
from .events import ArticleRenderer, Event, flatten
from .footnote import FootnoteTransformer
from .frontmatter import FrontmatterTransformer
from .text import TextTransformer
from .tokenizer import create_tokenizer


@dataclass(frozen=True)
class ParsedContent:
    frontmatter: str
    html: str


class TransformerChain:
    """Drive events through the sub-transformers of one document."""

    def __init__(self, transformers):
        self.transformers = list(transformers)
        self._ignore: Optional[Ignore] = None

    def receive(self, event: Event) -> List[Event]:
        if self._ignore is not None:
            suppress, self._ignore = self._ignore.next(event)
            if suppress:
                return []

        result = Continue()
        for transformer in self.transformers:
            control = transformer.receive(result.current(event))
            if isinstance(control, Discard):
                return []
            if isinstance(control, ReplaceWith):
                return list(control.events)
            result = result.merge(control)

        if result.ignore is not None:
            self._ignore = result.ignore
        return [result.current(event)]

    def finalize(self) -> List[Event]:
        events = []
        for transformer in self.transformers:
            events.extend(transformer.finalize())
        return events

    def run(self, events: Iterable[Event]) -> Iterator[Event]:
        for event in events:
            yield from self.receive(event)
        yield from self.finalize()


class MarkdownParser:
    """Turn article Markdown into frontmatter text and HTML.

    The parser itself is reusable; per-document state lives in the
    sub-transformers created by each ``parse`` call.
    """

    def __init__(self, logger: logging.Logger = None, emoji_dataset: EmojiDataset = None):
        self.logger = logger or logging.getLogger('Platemaker.Markdown')
        self.emoji_dataset = emoji_dataset
        self.tokenizer = create_tokenizer()
        self.renderer = ArticleRenderer()
        self.highlighter = SyntaxHighlighter(self.logger)

    def parse(self, raw_text: str) -> ParsedContent:
        frontmatter = FrontmatterTransformer()
        chain = TransformerChain([
            frontmatter,
            CodeBlockTransformer(self.logger, self.highlighter),
            FootnoteTransformer(),
            TextTransformer(self.logger, self.emoji_dataset),
        ])

        tokens = self.tokenizer(raw_text)
        html = self.renderer.render_events(chain.run(flatten(tokens)))

        if frontmatter.frontmatter is None:
            raise NoFrontmatterError()

        return ParsedContent(frontmatter=frontmatter.frontmatter, html=html)
