"""Tests for frontmatter decoding, widgets and article parsing."""

import pytest
import os

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from platemaker_pkg.exceptions import InvalidEncodingError, InvalidTomlError, NoFrontmatterError, ParseError
from platemaker_pkg.parse import decode_metadata, parse_markdown_file
from platemaker_pkg.structure import classify_path
from platemaker_pkg.widgets import AiUsage, ArticleType, Source, Widgets

from conftest import write_article


class TestDecodeMetadata:
    """Test cases for decode_metadata."""

    def test_minimal(self):
        """Test that only a title is required."""
        metadata = decode_metadata('title = "Hello"\n')

        assert metadata.title == 'Hello'
        assert metadata.brief == ''
        assert metadata.widgets.ai is AiUsage.UNUSED

    def test_extra_keys_are_kept(self):
        """Test that unknown keys are accepted and kept."""
        metadata = decode_metadata('title = "Hello"\ntags = ["a", "b"]\n')

        assert metadata.model_extra == {'tags': ['a', 'b']}

    def test_toml_date(self):
        """Test that a TOML date is kept as an ISO string."""
        metadata = decode_metadata('title = "Hello"\ndate = 2024-03-15\n')

        assert metadata.date == '2024-03-15'

    def test_widgets(self):
        """Test decoding the widgets table."""
        metadata = decode_metadata(
            'title = "Hello"\n'
            '[widgets]\n'
            'ai = "MainText"\n'
            'article_type = "Research"\n'
            'sources = [{ name = "Docs", url = "https://example.com" }]\n'
        )

        widgets = metadata.widgets
        assert widgets.ai is AiUsage.MAIN_TEXT
        assert widgets.article_type is ArticleType.RESEARCH
        assert widgets.sources == [Source(name='Docs', url='https://example.com')]

    def test_invalid_toml(self):
        """Test that malformed TOML raises InvalidTomlError."""
        with pytest.raises(InvalidTomlError):
            decode_metadata('title = \n')

    def test_missing_title(self):
        """Test that a frontmatter without title raises InvalidTomlError."""
        with pytest.raises(InvalidTomlError):
            decode_metadata('brief = "no title"\n')

    def test_unknown_widget_value(self):
        """Test that an unknown AI usage value is rejected."""
        with pytest.raises(InvalidTomlError):
            decode_metadata('title = "x"\n[widgets]\nai = "Sometimes"\n')


class TestWidgets:
    """Test cases for widget rendering."""

    def test_unused_ai_renders_nothing(self):
        """Test that the default AI usage renders no badge."""
        assert AiUsage.UNUSED.build() == ''

    def test_heavy_ai_usage(self):
        """Test that heavy AI usage is marked."""
        assert 'aiusage-heavy' in AiUsage.MAIN_TEXT.build()
        assert 'aiusage-heavy' not in AiUsage.REVIEW.build()

    def test_article_type(self):
        """Test the article type heading."""
        assert ArticleType.RESEARCH.build() == '<h2 class="article-type article-research">学習記録</h2>'

    def test_sources_escaped(self):
        """Test that source names and URLs are escaped."""
        widgets = Widgets(sources=[Source(name='A <b>', url='https://example.com/?a=1&b=2')])

        html = widgets.render_to_placeholder_content()['sources']

        assert 'A &lt;b&gt;' in html
        assert 'a=1&amp;b=2' in html

    def test_no_sources(self):
        """Test that an empty source list renders nothing."""
        assert Widgets().render_to_placeholder_content()['sources'] == ''

    def test_placeholder_values(self):
        """Test the names widgets supply to templates."""
        values = Widgets().render_to_placeholder_content()

        assert set(values) == {'ai', 'type', 'sources', 'widget_styles'}
        assert '.aiusage' in values['widget_styles']


class TestParseMarkdownFile:
    """Test cases for parse_markdown_file."""

    def test_article(self, temp_dir, parser):
        """Test that a file is parsed into an Article."""
        path = write_article(temp_dir, '2024/03/05_post.md', 'Post', body='Hi :smile:',
                             extra='brief = "Short"\n')

        article = parse_markdown_file(classify_path(temp_dir, path), parser)

        assert article.slug == 'post'
        assert article.metadata.brief == 'Short'
        assert article.date == '2024-03-05'
        assert article.output_path == '202403/post.html'
        assert 'class="emoji"' in article.content
        assert article.source_path == path

    def test_no_frontmatter_has_path(self, temp_dir, parser):
        """Test that parse errors name the article file."""
        path = os.path.join(temp_dir, '2024', '03', 'bare.md')
        os.makedirs(os.path.dirname(path))
        with open(path, 'w', encoding='utf-8') as f:
            f.write('# No frontmatter\n')

        with pytest.raises(NoFrontmatterError) as excinfo:
            parse_markdown_file(classify_path(temp_dir, path), parser)

        assert excinfo.value.path == path

    def test_invalid_toml_has_path(self, temp_dir, parser):
        """Test that TOML errors name the article file."""
        path = write_article(temp_dir, '2024/03/broken.md', 'Broken', extra='oops = \n')

        with pytest.raises(InvalidTomlError) as excinfo:
            parse_markdown_file(classify_path(temp_dir, path), parser)

        assert excinfo.value.path == path

    def test_invalid_encoding_has_path(self, temp_dir, parser):
        """Test that an article that is not UTF-8 raises a parse error naming the file."""
        path = os.path.join(temp_dir, '2024', '03', 'latin1.md')
        os.makedirs(os.path.dirname(path))
        with open(path, 'wb') as f:
            f.write('+++\ntitle = "Café"\n+++\n'.encode('latin-1'))

        with pytest.raises(InvalidEncodingError) as excinfo:
            parse_markdown_file(classify_path(temp_dir, path), parser)

        assert excinfo.value.path == path
        assert isinstance(excinfo.value, ParseError)
