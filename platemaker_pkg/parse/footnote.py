from dataclasses import dataclass, field
from typing import List, Optional

from mistune import escape

from .control import discard, use_html, use_next
from .events import Event, EventKind

DEFINITION_TAG = 'footnote_definition'

SECTION_START = '<aside class="footnote-def"><h1>脚注</h1><ol>'
SECTION_END = '</ol></aside>'


@dataclass
class FootnoteDefinition:
    id: str
    events: List[Event] = field(default_factory=list)


@dataclass
class FootnoteReference:
    id: str
    count: int = 0


class FootnoteTransformer:
    """Move footnote definitions to the end of the document.

    References are numbered in order of their first occurrence. Definitions are
    listed in that order, followed by unreferenced definitions in the order
    they were written.
    """

    def __init__(self):
        self.definitions: List[FootnoteDefinition] = []
        self.references: List[FootnoteReference] = []
        self._building: Optional[FootnoteDefinition] = None
        self._depth = 0

    def receive(self, event: Event):
        if self._building is not None:
            self._buffer(event)
            return discard()

        if event.is_start(DEFINITION_TAG):
            self._building = FootnoteDefinition(event.token['attrs']['key'])
            self._depth = 1
            return discard()

        if event.kind is EventKind.FOOTNOTE_REFERENCE:
            return use_html(self.add_reference(event.text))

        return use_next()

    def _buffer(self, event: Event):
        if event.is_start(DEFINITION_TAG):
            self._depth += 1
        elif event.is_end(DEFINITION_TAG):
            self._depth -= 1
            if self._depth == 0:
                self.definitions.append(self._building)
                self._building = None
                return
        self._building.events.append(event)

    def add_reference(self, footnote_id: str) -> str:
        for index, reference in enumerate(self.references):
            if reference.id == footnote_id:
                break
        else:
            reference = FootnoteReference(footnote_id)
            self.references.append(reference)
            index = len(self.references) - 1

        reference.count += 1
        key = escape(footnote_id)
        return (
            f'<a id="fnref_{key}_{reference.count}" class="fnref-anchor"></a>'
            f'<sup><a href="#fn_{key}">#{index + 1}</a></sup>'
        )

    def _sort_key(self, item):
        position, definition = item
        for index, reference in enumerate(self.references):
            if reference.id == definition.id:
                return (0, index, position)
        return (1, position, position)

    def _reference_for(self, footnote_id: str) -> Optional[FootnoteReference]:
        for reference in self.references:
            if reference.id == footnote_id:
                return reference
        return None

    def finalize(self) -> List[Event]:
        if self._building is not None:
            self.definitions.append(self._building)
            self._building = None

        if not self.definitions:
            return []

        events = [Event.html(SECTION_START)]
        for _, definition in sorted(enumerate(self.definitions), key=self._sort_key):
            key = escape(definition.id)
            events.append(Event.html(f'<li id="fn_{key}">'))
            events.extend(definition.events)

            reference = self._reference_for(definition.id)
            if reference is not None:
                events.extend(
                    Event.html(f'<sub><a href="#fnref_{key}_{count}">戻る</a></sub>')
                    for count in range(1, reference.count + 1)
                )

            events.append(Event.html('</li>'))
        events.append(Event.html(SECTION_END))

        return events
