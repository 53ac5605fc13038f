"""Test configuration and fixtures for Platemaker tests."""

import pytest
import tempfile
import shutil
import os
import logging
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from platemaker_pkg.parse import EmojiDataset, MarkdownParser
from platemaker_pkg.settings import Configuration

ARTICLE_TEMPLATE = """<html><head><title>${title}</title><style>${widget_styles}</style></head>
<body>${type}${ai}<h1>${title}</h1><p class="date">${date}</p>
${if-debug}<p class="debug">debug build</p>${end-if-debug}${if-release}<p class="release">release build</p>${end-if-release}
<div class="content">${content}</div>${sources}</body></html>
"""

INDEX_TEMPLATE = """<html><body><ul>
${articles}</ul></body></html>
"""

INDEX_LIST_TEMPLATE = """<li><a href="${path}">${title}</a> ${date} ${brief}</li>
"""


def write_article(content_dir, relative_path, title, body="Some text.", extra=""):
    """Write an article with a TOML frontmatter below ``content_dir``."""
    path = Path(content_dir) / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'+++\ntitle = "{title}"\n{extra}+++\n\n{body}\n', encoding='utf-8')
    return str(path)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def content_dir(temp_dir):
    """Create a content directory with two groups, an asset and some ignored files."""
    content_dir = Path(temp_dir) / 'articles'

    write_article(content_dir, '2024/03/15_hello.md', 'Hello', body='Hello :smile: world.',
                  extra='brief = "First post"\n')
    write_article(content_dir, '2024/03/20-2_second.md', 'Second')
    write_article(content_dir, '2023/12/winter.md', 'Winter', extra='date = 2023-12-24\n')

    assets_dir = content_dir / '2024' / '03' / 'assets' / 'img'
    assets_dir.mkdir(parents=True)
    (assets_dir / 'pic.png').write_bytes(b'\x89PNG\r\n\x1a\n')

    (content_dir / 'README.md').write_text('Not an article\n')
    (content_dir / 'drafts').mkdir()
    (content_dir / 'drafts' / 'idea.md').write_text('+++\ntitle = "Draft"\n+++\n')

    return str(content_dir)


@pytest.fixture
def templates_dir(temp_dir):
    """Create a templates directory with the three page templates and a stylesheet."""
    templates_dir = Path(temp_dir) / 'templates'
    templates_dir.mkdir()

    (templates_dir / '_article.html').write_text(ARTICLE_TEMPLATE)
    (templates_dir / '_index.html').write_text(INDEX_TEMPLATE)
    (templates_dir / '_index-list.html').write_text(INDEX_LIST_TEMPLATE)
    (templates_dir / 'style.css').write_text('body { color: black; }\n')

    return str(templates_dir)


@pytest.fixture
def destination_dir(temp_dir):
    """Path of the output directory; it is created by the build."""
    return os.path.join(temp_dir, 'dist')


@pytest.fixture
def config(templates_dir, content_dir, destination_dir):
    """A validated build configuration."""
    return Configuration.from_paths(templates_dir, content_dir, destination_dir)


@pytest.fixture
def emoji_dataset():
    """A small emoji dataset independent of the bundled one."""
    return EmojiDataset({'smile': '\U0001F604', 'technologist': '\U0001F9D1\u200d\U0001F4BB', 'heart': '\u2764\ufe0f'})


@pytest.fixture
def parser(emoji_dataset):
    """A MarkdownParser logging to the Platemaker.Markdown logger."""
    return MarkdownParser(logger=logging.getLogger('Platemaker.Markdown'), emoji_dataset=emoji_dataset)
