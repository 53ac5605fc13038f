from typing import Optional

from ..exceptions import MarkdownProtocolError
from .control import discard, use_next
from .events import Event, EventKind

FRONTMATTER_TAG = 'frontmatter'


class FrontmatterTransformer:
    """Capture the raw text of the frontmatter block and drop it from the output."""

    def __init__(self):
        self.frontmatter: Optional[str] = None
        self._inside = False
        self._seen = False

    def receive(self, event: Event):
        if self._inside:
            if event.kind is EventKind.TEXT:
                self.frontmatter += event.text
                return discard()
            if event.is_end(FRONTMATTER_TAG):
                self._inside = False
                return discard()
            raise MarkdownProtocolError(f"Unexpected {event!r} inside the frontmatter block")

        if event.is_start(FRONTMATTER_TAG):
            if self._seen:
                raise MarkdownProtocolError("A document can only have one frontmatter block")
            self._inside = True
            self._seen = True
            self.frontmatter = ''
            return discard()

        return use_next()

    def finalize(self):
        return []
