"""Emoji shortcodes (``:smile:``) rendered as Twemoji images."""

import html
import logging
from functools import lru_cache
from importlib import resources
from typing import Dict, Mapping, Optional

import yaml

from ..placeholder import Placeholder

TWEMOJI_URL = 'https://cdn.jsdelivr.net/gh/jdecked/twemoji@latest/assets/svg/{codepoint}.svg'
SHORTCODE = Placeholder.from_delimiters(':', ':', content=r'[a-zA-Z_-]+')

ZERO_WIDTH_JOINER = '\u200d'
VARIATION_SELECTOR_16 = '\ufe0f'


class EmojiDataset:
    """Mapping of shortcode names to emoji characters."""

    def __init__(self, emojis: Mapping[str, str]):
        self.emojis: Dict[str, str] = dict(emojis)

    @classmethod
    def from_yaml(cls, text: str) -> 'EmojiDataset':
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Emoji dataset must be a mapping of shortcode to emoji")
        return cls({str(name): str(emoji) for name, emoji in data.items()})

    @classmethod
    def from_file(cls, path: str) -> 'EmojiDataset':
        with open(path, 'r', encoding='utf-8') as f:
            return cls.from_yaml(f.read())

    def get(self, shortcode: str) -> Optional[str]:
        return self.emojis.get(shortcode)

    def __len__(self):
        return len(self.emojis)


@lru_cache(maxsize=None)
def default_dataset() -> EmojiDataset:
    """The dataset shipped with the package."""
    source = resources.files('platemaker_pkg').joinpath('data', 'emoji.yml')
    return EmojiDataset.from_yaml(source.read_text(encoding='utf-8'))


def twemoji_codepoint(emoji: str) -> str:
    """File name Twemoji uses for ``emoji``: hex code points joined by ``-``."""
    if ZERO_WIDTH_JOINER not in emoji:
        emoji = emoji.replace(VARIATION_SELECTOR_16, '')
    return '-'.join(f"{ord(char):x}" for char in emoji)


def emoji_image(emoji: str) -> str:
    src = TWEMOJI_URL.format(codepoint=twemoji_codepoint(emoji))
    return f'<img src="{src}" class="emoji" alt="{html.escape(emoji)}" draggable="false">'


def unresolved(shortcode: str) -> str:
    return f'<!-- Unresolved emoji --> :{shortcode}:'


class EmojiResolver:
    """Replace shortcodes in already escaped text. One instance per document."""

    def __init__(self, logger: logging.Logger, dataset: EmojiDataset = None):
        self.logger = logger
        self.dataset = dataset if dataset is not None else default_dataset()
        self._resolved: Dict[str, str] = {}

    def resolve(self, shortcode: str) -> str:
        if shortcode in self._resolved:
            return self._resolved[shortcode]

        emoji = self.dataset.get(shortcode)
        if emoji is None:
            self.logger.warning(f"emoji {shortcode} is not resolved")
            replacement = unresolved(shortcode)
        else:
            replacement = emoji_image(emoji)

        self._resolved[shortcode] = replacement
        return replacement

    def replace(self, text: str) -> str:
        return SHORTCODE.fill(text, self.resolve)
