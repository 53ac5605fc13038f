"""
A flat event view over mistune's token tree.

The tokenizer produces a nested AST; the transformers in this package work on
a single forward-only stream of events instead. ``flatten`` turns the tree into
events and ``rebuild`` folds the (transformed) events back into tokens that
the HTML renderer understands.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional

import mistune
from mistune.core import BlockState
from mistune.plugins.formatting import render_strikethrough
from mistune.plugins.table import (
    render_table,
    render_table_body,
    render_table_cell,
    render_table_head,
    render_table_row,
)
from mistune.plugins.task_lists import render_task_list_item

from ..exceptions import MarkdownProtocolError

# Containers whose content is a single raw string instead of child tokens.
RAW_CONTAINERS = frozenset({'block_code', 'frontmatter'})

# Containers whose children are blocks; raw HTML placed directly inside them
# is rendered as block HTML.
BLOCK_CONTAINERS = frozenset({
    'block_quote',
    'list',
    'list_item',
    'task_list_item',
    'footnote_definition',
})


class EventKind(Enum):
    START = 'start'
    END = 'end'
    TEXT = 'text'
    HTML = 'html'
    SOFT_BREAK = 'soft_break'
    HARD_BREAK = 'hard_break'
    FOOTNOTE_REFERENCE = 'footnote_reference'
    LEAF = 'leaf'


@dataclass
class Event:
    kind: EventKind
    text: str = ''
    token: Optional[Dict[str, Any]] = None

    @classmethod
    def html(cls, html: str) -> 'Event':
        return cls(EventKind.HTML, html)

    @property
    def tag(self) -> Optional[str]:
        if self.token is None:
            return None
        return self.token['type']

    def is_start(self, tag: str) -> bool:
        return self.kind is EventKind.START and self.tag == tag

    def is_end(self, tag: str) -> bool:
        return self.kind is EventKind.END and self.tag == tag

    def __repr__(self):
        if self.token is not None:
            return f"Event({self.kind.name}, {self.tag})"
        return f"Event({self.kind.name}, {self.text!r})"


def is_soft_break(event: Event) -> bool:
    return event.kind is EventKind.SOFT_BREAK


def _head(token: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in token.items() if key not in ('children', 'raw')}


def _merge_text(tokens: Iterable[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
    """Join runs of adjacent text tokens into one."""
    pending = None
    for token in tokens:
        if token['type'] == 'text':
            if pending is None:
                pending = {'type': 'text', 'raw': token['raw']}
            else:
                pending['raw'] += token['raw']
            continue
        if pending is not None:
            yield pending
            pending = None
        yield token
    if pending is not None:
        yield pending


def flatten(tokens: Iterable[Dict[str, Any]]) -> Iterator[Event]:
    """Turn a mistune AST into a stream of events, depth first."""
    for token in _merge_text(tokens):
        kind = token['type']

        if kind == 'text':
            yield Event(EventKind.TEXT, token['raw'])
        elif kind == 'softbreak':
            yield Event(EventKind.SOFT_BREAK)
        elif kind == 'linebreak':
            yield Event(EventKind.HARD_BREAK)
        elif kind in ('inline_html', 'block_html'):
            yield Event(EventKind.HTML, token['raw'])
        elif kind == 'footnote_ref':
            yield Event(EventKind.FOOTNOTE_REFERENCE, token['raw'])
        elif kind in RAW_CONTAINERS:
            head = _head(token)
            yield Event(EventKind.START, token=head)
            if token.get('raw'):
                yield Event(EventKind.TEXT, token['raw'])
            yield Event(EventKind.END, token=head)
        elif 'children' in token:
            head = _head(token)
            yield Event(EventKind.START, token=head)
            yield from flatten(token['children'])
            yield Event(EventKind.END, token=head)
        else:
            yield Event(EventKind.LEAF, token=dict(token))


def rebuild(events: Iterable[Event]) -> List[Dict[str, Any]]:
    """Fold an event stream back into a token tree."""
    root: List[Dict[str, Any]] = []
    stack = []

    def siblings() -> List[Dict[str, Any]]:
        return stack[-1][1] if stack else root

    for event in events:
        kind = event.kind

        if kind is EventKind.START:
            stack.append((dict(event.token), []))
        elif kind is EventKind.END:
            if not stack or stack[-1][0]['type'] != event.tag:
                raise MarkdownProtocolError(f"Unbalanced end of '{event.tag}' in the event stream")
            token, children = stack.pop()
            if token['type'] in RAW_CONTAINERS:
                token['raw'] = ''.join(child.get('raw', '') for child in children)
            else:
                token['children'] = children
            siblings().append(token)
        elif kind is EventKind.TEXT:
            siblings().append({'type': 'text', 'raw': event.text})
        elif kind is EventKind.HTML:
            in_block = not stack or stack[-1][0]['type'] in BLOCK_CONTAINERS
            siblings().append({'type': 'block_html' if in_block else 'inline_html', 'raw': event.text})
        elif kind is EventKind.SOFT_BREAK:
            siblings().append({'type': 'softbreak'})
        elif kind is EventKind.HARD_BREAK:
            siblings().append({'type': 'linebreak'})
        elif kind is EventKind.FOOTNOTE_REFERENCE:
            siblings().append({'type': 'footnote_ref', 'raw': event.text})
        else:
            siblings().append(dict(event.token))

    if stack:
        unclosed = ', '.join(token['type'] for token, _ in stack)
        raise MarkdownProtocolError(f"Event stream ended inside: {unclosed}")

    return root


class ArticleRenderer(mistune.HTMLRenderer):
    """HTML renderer for rebuilt article tokens."""

    def __init__(self):
        super().__init__(escape=False)
        self.register('table', render_table)
        self.register('table_head', render_table_head)
        self.register('table_body', render_table_body)
        self.register('table_row', render_table_row)
        self.register('table_cell', render_table_cell)
        self.register('task_list_item', render_task_list_item)
        self.register('strikethrough', render_strikethrough)

    def frontmatter(self, text):
        return ''

    def footnote_ref(self, key):
        return f'<sup>[^{mistune.escape(key)}]</sup>'

    def footnote_definition(self, text, key):
        return f'<div id="fn_{mistune.escape(key)}">{text}</div>\n'

    def render_events(self, events: Iterable[Event]) -> str:
        return self(rebuild(events), BlockState())
