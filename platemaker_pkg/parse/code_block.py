import logging
from typing import Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import find_lexer_class, get_lexer_by_name, get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from ..exceptions import MarkdownProtocolError
from .control import discard, use_html, use_next
from .events import Event, EventKind

CODE_BLOCK_TAG = 'block_code'
HIGHLIGHT_STYLE = 'solarized-light'


class SyntaxHighlighter:
    """Render source code to inline-styled HTML with Pygments."""

    def __init__(self, logger: logging.Logger, style: str = HIGHLIGHT_STYLE):
        self.logger = logger
        self.formatter = HtmlFormatter(noclasses=True, nowrap=True, style=style)
        self.background = get_style_by_name(style).background_color

    def find_lexer(self, lang: str):
        """Look a lexer up by name, then by file extension, then by alias."""
        if not lang:
            return TextLexer()

        lexer_class = find_lexer_class(lang)
        if lexer_class is not None:
            return lexer_class()

        for lookup in (lambda: get_lexer_for_filename(f"file.{lang}"), lambda: get_lexer_by_name(lang)):
            try:
                return lookup()
            except ClassNotFound:
                continue

        self.logger.warning(f"Unknown syntax highlight language: {lang}")
        return TextLexer()

    def render(self, lang: str, code: str) -> str:
        html = highlight(code, self.find_lexer(lang), self.formatter) if code else ''
        return f'<code class="block"><pre style="background-color: {self.background}">{html}</pre></code>'


class CodeBlockTransformer:
    """Replace fenced code blocks with highlighted HTML."""

    def __init__(self, logger: logging.Logger, highlighter: SyntaxHighlighter = None):
        self.highlighter = highlighter or SyntaxHighlighter(logger)
        self._lang: Optional[str] = None
        self._has_content = False

    def receive(self, event: Event):
        if self._lang is None:
            if event.is_start(CODE_BLOCK_TAG) and event.token.get('style') == 'fenced':
                info = (event.token.get('attrs') or {}).get('info') or ''
                self._lang = info.split(None, 1)[0] if info.strip() else ''
                self._has_content = False
                return discard()
            return use_next()

        if event.kind is EventKind.TEXT and not self._has_content:
            self._has_content = True
            return use_html(self.highlighter.render(self._lang, event.text))

        if event.is_end(CODE_BLOCK_TAG):
            had_content = self._has_content
            self._lang = None
            if had_content:
                return discard()
            return use_html(self.highlighter.render('', ''))

        raise MarkdownProtocolError(f"Unexpected {event!r} inside a fenced code block")

    def finalize(self):
        return []
