"""
Results returned by sub-transformers, and how results for one event combine.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..exceptions import MarkdownProtocolError
from .events import Event

Predicate = Callable[[Event], bool]


@dataclass(frozen=True)
class Ignore:
    """Suppress up to ``count`` following events.

    With a predicate, each of those events is only suppressed if the predicate
    holds for it; the count is consumed either way.
    """
    count: int
    predicate: Optional[Predicate] = None

    @classmethod
    def for_next(cls, count: int) -> 'Ignore':
        return cls(count)

    @classmethod
    def for_next_if(cls, count: int, predicate: Predicate) -> 'Ignore':
        return cls(count, predicate)

    def next(self, event: Event) -> Tuple[bool, Optional['Ignore']]:
        """Return whether ``event`` is suppressed and what remains of the instruction."""
        if self.count <= 0:
            return False, None

        suppress = self.predicate(event) if self.predicate is not None else True
        remaining = Ignore(self.count - 1, self.predicate) if self.count > 1 else None
        return suppress, remaining


@dataclass(frozen=True)
class Continue:
    replacement: Optional[Event] = None
    ignore: Optional[Ignore] = None

    def merge(self, other: 'Continue') -> 'Continue':
        if self.ignore is not None and other.ignore is not None:
            raise MarkdownProtocolError("Multiple sub-transformers requested to ignore the following events")

        return Continue(
            replacement=other.replacement if other.replacement is not None else self.replacement,
            ignore=other.ignore if other.ignore is not None else self.ignore,
        )

    def current(self, event: Event) -> Event:
        """The event as seen by the next sub-transformer in the chain."""
        return self.replacement if self.replacement is not None else event


@dataclass(frozen=True)
class Discard:
    pass


@dataclass(frozen=True)
class ReplaceWith:
    events: List[Event] = field(default_factory=list)


def use_next() -> Continue:
    return Continue()


def use_html(html: str) -> ReplaceWith:
    return ReplaceWith([Event.html(html)])


def discard() -> Discard:
    return Discard()
