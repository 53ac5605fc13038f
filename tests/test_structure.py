"""Tests for content directory classification."""

import pytest
import os
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from platemaker_pkg.exceptions import InvalidStructureError
from platemaker_pkg.structure import (
    ArticleFile,
    ArticleGroup,
    ArticleIdentity,
    AssetFile,
    ContentDirectory,
    DirectoryWalker,
    classify_path,
)


class TestClassifyPath:
    """Test cases for classify_path."""

    def test_article_in_group_directory(self, temp_dir):
        """Test that $year/$month/$slug.md is an article of that group."""
        classified = classify_path(temp_dir, os.path.join(temp_dir, '2024', '03', 'foo.md'))

        assert isinstance(classified, ArticleFile)
        assert classified.group == ArticleGroup(2024, 3)
        assert classified.identity.slug == 'foo'
        assert classified.identity.day is None

    def test_article_with_day_and_number(self, temp_dir):
        """Test that the day and number prefix is split from the slug."""
        classified = classify_path(temp_dir, os.path.join(temp_dir, '2024', '03', '15-2_bar.md'))

        assert isinstance(classified, ArticleFile)
        assert classified.identity.slug == 'bar'
        assert classified.identity.day == 15
        assert classified.identity.num == 2
        assert classified.identity.date_string == '2024-03-15'

    def test_asset_in_assets_directory(self, temp_dir):
        """Test that files below $year/$month/assets are assets of that group."""
        classified = classify_path(temp_dir, os.path.join(temp_dir, '2024', '03', 'assets', 'img.png'))

        assert isinstance(classified, AssetFile)
        assert classified.group == ArticleGroup(2024, 3)
        assert classified.relative_path == 'img.png'

    def test_nested_asset_keeps_relative_path(self, temp_dir):
        """Test that nested assets keep their path inside the assets directory."""
        classified = classify_path(temp_dir, os.path.join(temp_dir, '2024', '03', 'assets', 'a', 'b.svg'))

        assert isinstance(classified, AssetFile)
        assert classified.relative_path == os.path.join('a', 'b.svg')

    @pytest.mark.parametrize('relative', [
        os.path.join('2024', '03', 'sub', 'extra', 'file.md'),
        os.path.join('2024', '03', 'notes.txt'),
        os.path.join('2024', '03', 'assets'),
        os.path.join('drafts', '03', 'foo.md'),
        os.path.join('2024', 'march', 'foo.md'),
        os.path.join('2024', 'foo.md'),
        'foo.md',
    ])
    def test_other_paths_are_ignored(self, temp_dir, relative):
        """Test that paths not matching the layout are filtered out."""
        assert classify_path(temp_dir, os.path.join(temp_dir, relative)) is None

    def test_path_outside_root_is_ignored(self, temp_dir):
        """Test that a path outside the content root is never classified."""
        outside = os.path.join(os.path.dirname(temp_dir), '2024', '03', 'foo.md')

        assert classify_path(temp_dir, outside) is None


class TestArticleIdentity:
    """Test cases for ArticleIdentity."""

    def test_rejects_non_markdown_file(self):
        """Test that only .md files are articles."""
        with pytest.raises(InvalidStructureError):
            ArticleIdentity.from_filename(ArticleGroup(2024, 3), 'foo.html')

    def test_sort_key_orders_by_group_then_day(self):
        """Test that identities sort by group, day, number and slug."""
        group = ArticleGroup(2024, 3)
        identities = [
            ArticleIdentity(group, 'c', day=20),
            ArticleIdentity(ArticleGroup(2023, 12), 'z', day=31),
            ArticleIdentity(group, 'b', day=5, num=2),
            ArticleIdentity(group, 'a', day=5, num=1),
        ]

        ordered = sorted(identities, key=lambda identity: identity.sort_key)

        assert [identity.slug for identity in ordered] == ['z', 'a', 'b', 'c']


class TestArticleGroup:
    """Test cases for ArticleGroup."""

    def test_names(self):
        """Test the directory, flat and display names of a group."""
        group = ArticleGroup(2024, 3)

        assert group.group_dir_path == os.path.join('2024', '03')
        assert group.flat_name == '202403'
        assert str(group) == '2024-03'

    def test_from_components_requires_numbers(self):
        """Test that non-numeric components do not form a group."""
        assert ArticleGroup.from_components('2024', '03') == ArticleGroup(2024, 3)
        assert ArticleGroup.from_components('2024', 'assets') is None
        assert ArticleGroup.from_components('year', '03') is None


class TestContentDirectory:
    """Test cases for ContentDirectory.scan."""

    def test_scan_classifies_files(self, content_dir):
        """Test that articles and assets are found and everything else is ignored."""
        content = ContentDirectory.scan(content_dir)

        slugs = sorted(article.identity.slug for article in content.article_files)
        assert slugs == ['hello', 'second', 'winter']
        assert [asset.relative_path for asset in content.asset_files] == [os.path.join('img', 'pic.png')]

    def test_groups_sorted_and_deduplicated(self, content_dir):
        """Test that groups are listed once each, oldest first."""
        Path(content_dir, '2024', '01').mkdir()

        content = ContentDirectory.scan(content_dir)

        assert content.groups == [ArticleGroup(2023, 12), ArticleGroup(2024, 1), ArticleGroup(2024, 3)]

    def test_missing_directory(self, temp_dir):
        """Test that scanning a missing directory raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Content directory"):
            ContentDirectory.scan(os.path.join(temp_dir, 'missing'))


class TestDirectoryWalker:
    """Test cases for DirectoryWalker."""

    def test_walks_depth_first_in_name_order(self, temp_dir):
        """Test that entries are yielded depth first, sorted by name."""
        root = Path(temp_dir)
        (root / 'b').mkdir()
        (root / 'b' / 'inner.txt').write_text('x')
        (root / 'a.txt').write_text('x')
        (root / 'c.txt').write_text('x')

        entries = [(os.path.relpath(path, temp_dir), is_dir) for path, is_dir in DirectoryWalker(temp_dir)]

        assert entries == [
            ('a.txt', False),
            ('b', True),
            (os.path.join('b', 'inner.txt'), False),
            ('c.txt', False),
        ]

    def test_does_not_follow_directory_symlinks(self, temp_dir):
        """Test that symbolic links to directories are not descended into."""
        root = Path(temp_dir)
        (root / 'real').mkdir()
        (root / 'real' / 'file.txt').write_text('x')
        try:
            os.symlink(root / 'real', root / 'link')
        except (OSError, NotImplementedError):
            pytest.skip("Symbolic links are not supported here")

        paths = [os.path.relpath(path, temp_dir) for path, _ in DirectoryWalker(temp_dir)]

        assert os.path.join('link', 'file.txt') not in paths
        assert os.path.join('real', 'file.txt') in paths
