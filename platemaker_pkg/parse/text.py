import logging

from mistune import safe_entity

from .control import Continue, Ignore, use_next
from .emoji import EmojiDataset, EmojiResolver
from .events import Event, EventKind, RAW_CONTAINERS, is_soft_break


class TextTransformer:
    """Escape literal text and turn emoji shortcodes into images."""

    def __init__(self, logger: logging.Logger, dataset: EmojiDataset = None):
        self.resolver = EmojiResolver(logger, dataset)
        self._raw_depth = 0

    def receive(self, event: Event):
        if event.kind is EventKind.START and event.tag in RAW_CONTAINERS:
            self._raw_depth += 1
        elif event.kind is EventKind.END and event.tag in RAW_CONTAINERS:
            self._raw_depth -= 1
        elif event.kind is EventKind.TEXT and not self._raw_depth:
            html = self.resolver.replace(safe_entity(event.text))
            return Continue(
                replacement=Event.html(html),
                ignore=Ignore.for_next_if(1, is_soft_break),
            )

        return use_next()

    def finalize(self):
        return []
