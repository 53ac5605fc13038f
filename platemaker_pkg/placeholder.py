"""Regex based ``<start>name<end>`` placeholders."""

import re
from typing import Callable, Optional

CAPTURE_GROUP = 'name'


class Placeholder:
    """Find and replace delimited placeholders in a string.

    >>> Placeholder.from_delimiters('${', '}').fill('${a}, ${b}', str.upper)
    'A, B'
    """

    def __init__(self, regex):
        if isinstance(regex, str):
            regex = re.compile(regex)
        if CAPTURE_GROUP not in regex.groupindex:
            raise ValueError(f"Placeholder regex must have a capture group named '{CAPTURE_GROUP}'")
        self.regex = regex

    @classmethod
    def from_delimiters(cls, start: str, end: str, content: Optional[str] = None) -> 'Placeholder':
        if content is None:
            content = f"[^{re.escape(end)}]*?"
        return cls(rf"{re.escape(start)}\s*(?P<{CAPTURE_GROUP}>{content})\s*{re.escape(end)}")

    def fill(self, haystack: str, filler: Callable[[str], str]) -> str:
        return self.regex.sub(lambda match: filler(match.group(CAPTURE_GROUP)), haystack)

