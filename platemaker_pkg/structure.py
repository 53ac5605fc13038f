"""
Content directory classification.

Articles live under ``$content/$year/$month/`` and are named
``[$day[-$num]_]$slug.md``. Files below ``$content/$year/$month/assets/``
are assets of that month. Everything else in the content directory is ignored.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .exceptions import InvalidEncodingError, InvalidStructureError

ASSETS_DIR_NAME = 'assets'
ARTICLE_EXTENSION = '.md'

_ARTICLE_STEM = re.compile(r'^(?:(?P<day>\d+)(?:-(?P<num>\d+))?_)?(?P<slug>.+)$')


def _split_relative(root: str, path: str) -> Optional[List[str]]:
    """Split ``path`` into components relative to ``root``, or None if outside it."""
    relative = os.path.relpath(os.path.abspath(path), os.path.abspath(root))
    if relative == os.curdir:
        return []
    parts = relative.split(os.sep)
    if parts[0] == os.pardir:
        return None
    return parts


def _is_number(component: str) -> bool:
    return component.isascii() and component.isdigit()


@dataclass(frozen=True, order=True)
class ArticleGroup:
    """A ``(year, month)`` bucket of articles and assets."""
    year: int
    month: int

    @classmethod
    def from_components(cls, year: str, month: str) -> Optional['ArticleGroup']:
        if not (_is_number(year) and _is_number(month)):
            return None
        return cls(int(year), int(month))

    @property
    def group_dir_path(self) -> str:
        return os.path.join(str(self.year), f"{self.month:02}")

    @property
    def flat_name(self) -> str:
        return f"{self.year:04}{self.month:02}"

    def __str__(self):
        return f"{self.year:04}-{self.month:02}"


@dataclass(frozen=True)
class ArticleIdentity:
    group: ArticleGroup
    slug: str
    day: Optional[int] = None
    num: Optional[int] = None

    @classmethod
    def from_filename(cls, group: ArticleGroup, filename: str) -> 'ArticleIdentity':
        stem, extension = os.path.splitext(filename)
        if extension != ARTICLE_EXTENSION or not stem:
            raise InvalidStructureError(filename, f"article files must end with {ARTICLE_EXTENSION}")

        match = _ARTICLE_STEM.match(stem)
        day = match.group('day')
        num = match.group('num')
        return cls(
            group=group,
            slug=match.group('slug'),
            day=int(day) if day is not None else None,
            num=int(num) if num is not None else None,
        )

    @property
    def date(self) -> Tuple[int, int, Optional[int]]:
        return (self.group.year, self.group.month, self.day)

    @property
    def date_string(self) -> str:
        year, month, day = self.date
        if day is None:
            return f"{year:04}-{month:02}"
        return f"{year:04}-{month:02}-{day:02}"

    @property
    def sort_key(self):
        year, month, day = self.date
        return (year, month, day or 0, self.num or 0, self.slug)


@dataclass(frozen=True)
class ArticleGroupNode:
    """Any filesystem entry that sits below a group directory."""
    group: ArticleGroup
    path: str
    suffix: Tuple[str, ...]

    @classmethod
    def from_path(cls, root: str, path: str) -> Optional['ArticleGroupNode']:
        parts = _split_relative(root, path)
        if parts is None or len(parts) < 3:
            return None

        group = ArticleGroup.from_components(parts[0], parts[1])
        if group is None:
            return None

        return cls(group=group, path=os.path.abspath(path), suffix=tuple(parts[2:]))


@dataclass(frozen=True)
class ArticleFile:
    node: ArticleGroupNode
    identity: ArticleIdentity

    @classmethod
    def from_node(cls, node: ArticleGroupNode) -> 'ArticleFile':
        if len(node.suffix) != 1:
            raise InvalidStructureError(node.path, "articles must be placed directly in a group directory")
        return cls(node=node, identity=ArticleIdentity.from_filename(node.group, node.suffix[0]))

    @property
    def path(self) -> str:
        return self.node.path

    @property
    def group(self) -> ArticleGroup:
        return self.node.group

    def read(self) -> str:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(self.path, str(e))


@dataclass(frozen=True)
class AssetFile:
    node: ArticleGroupNode

    @classmethod
    def from_node(cls, node: ArticleGroupNode) -> 'AssetFile':
        if len(node.suffix) < 2 or node.suffix[0] != ASSETS_DIR_NAME:
            raise InvalidStructureError(node.path, f"assets must be placed under an '{ASSETS_DIR_NAME}' directory")
        return cls(node=node)

    @property
    def path(self) -> str:
        return self.node.path

    @property
    def group(self) -> ArticleGroup:
        return self.node.group

    @property
    def relative_path(self) -> str:
        """Path inside the group's assets directory."""
        return os.path.join(*self.node.suffix[1:])


def classify_path(root: str, path: str):
    """Classify a single file as an ArticleFile, an AssetFile, or None."""
    node = ArticleGroupNode.from_path(root, path)
    if node is None:
        return None

    for kind in (ArticleFile, AssetFile):
        try:
            return kind.from_node(node)
        except InvalidStructureError:
            continue
    return None


class DirectoryWalker:
    """Depth-first walk over a directory tree using an explicit stack of iterators.

    Entries inside a directory are visited in name order. Symbolic links to
    directories are reported as files and never descended into.
    """

    def __init__(self, root: str):
        self.root = os.path.abspath(root)
        self._stack: List[Iterator[os.DirEntry]] = []

    def _open(self, path: str) -> Iterator[os.DirEntry]:
        with os.scandir(path) as entries:
            return iter(sorted(entries, key=lambda entry: entry.name))

    def __iter__(self) -> Iterator[Tuple[str, bool]]:
        self._stack = [self._open(self.root)]
        while self._stack:
            entry = next(self._stack[-1], None)
            if entry is None:
                self._stack.pop()
                continue

            is_dir = entry.is_dir(follow_symlinks=False)
            yield entry.path, is_dir
            if is_dir:
                self._stack.append(self._open(entry.path))


@dataclass
class ContentDirectory:
    root: str
    groups: List[ArticleGroup] = field(default_factory=list)
    article_files: List[ArticleFile] = field(default_factory=list)
    asset_files: List[AssetFile] = field(default_factory=list)

    @classmethod
    def scan(cls, root: str) -> 'ContentDirectory':
        """Classify every entry under ``root``. I/O errors propagate."""
        root = os.path.abspath(root)
        if not os.path.isdir(root):
            raise FileNotFoundError(f"Content directory '{root}' does not exist.")

        groups = set()
        articles = []
        assets = []

        for path, is_dir in DirectoryWalker(root):
            if is_dir:
                parts = _split_relative(root, path)
                if len(parts) == 2:
                    group = ArticleGroup.from_components(*parts)
                    if group is not None:
                        groups.add(group)
                continue

            classified = classify_path(root, path)
            if isinstance(classified, ArticleFile):
                articles.append(classified)
            elif isinstance(classified, AssetFile):
                assets.append(classified)

        return cls(
            root=root,
            groups=sorted(groups),
            article_files=articles,
            asset_files=assets,
        )
