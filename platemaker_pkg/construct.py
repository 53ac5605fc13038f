"""
Construction planning: turn a logical tree of output files into a flat list
of directories to create and files to write.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

Content = Union[str, bytes]


@dataclass(frozen=True)
class ConstructFile:
    path: str
    content: Content


@dataclass
class ConstructionNode:
    name: str
    files: List[ConstructFile] = field(default_factory=list)
    children: List['ConstructionNode'] = field(default_factory=list)

    def child(self, name: str) -> 'ConstructionNode':
        """Return the child node called ``name``, creating it if needed."""
        for node in self.children:
            if node.name == name:
                return node
        node = ConstructionNode(name)
        self.children.append(node)
        return node


@dataclass
class ConstructionPlan:
    directories: List[str] = field(default_factory=list)
    files: List[Tuple[str, Content]] = field(default_factory=list)

    def execute(self, logger: Optional[logging.Logger] = None) -> None:
        """Create every planned directory, then write every planned file."""
        logger = logger or logging.getLogger('Platemaker.Construct')

        for directory in reversed(self.directories):
            os.makedirs(directory, exist_ok=True)

        for path, content in self.files:
            if isinstance(content, bytes):
                with open(path, 'wb') as f:
                    f.write(content)
            else:
                with open(path, 'w', encoding='utf-8', newline='') as f:
                    f.write(content)
            logger.debug(f"Wrote {path}")

        logger.info(f"Wrote {len(self.files)} files in {len(self.directories)} directories")


def _implied_directories(base: str, relative_path: str) -> List[str]:
    """Every directory between ``base`` and the parent of ``relative_path``."""
    directories = []
    parent = os.path.dirname(os.path.normpath(relative_path))
    while parent and parent != os.curdir:
        directories.append(os.path.join(base, parent))
        parent = os.path.dirname(parent)
    return directories


def _plan(node: ConstructionNode, parent: str) -> Tuple[List[str], List[Tuple[str, Content]]]:
    root = os.path.normpath(os.path.join(parent, node.name)) if node.name else parent
    directories = [root]
    files = []

    for construct_file in node.files:
        directories.extend(_implied_directories(root, construct_file.path))
        files.append((os.path.normpath(os.path.join(root, construct_file.path)), construct_file.content))

    for child in node.children:
        child_directories, child_files = _plan(child, root)
        directories.extend(child_directories)
        files.extend(child_files)

    return directories, files


def plan(tree: ConstructionNode, destination: str) -> ConstructionPlan:
    """Flatten ``tree`` rooted at ``destination`` into a ConstructionPlan."""
    directories, files = _plan(tree, os.path.abspath(destination))

    unique = list(dict.fromkeys(directories))
    unique.sort(key=len)

    return ConstructionPlan(directories=unique, files=files)


def collect_directory_files(source: str, excludes: Iterable[str] = ()) -> List[ConstructFile]:
    """Read every file below ``source`` as a ConstructFile relative to it.

    ``excludes`` are relative paths skipped during the copy.
    """
    excluded = {os.path.normpath(path) for path in excludes}
    files = []

    for dirpath, dirnames, filenames in os.walk(source):
        dirnames.sort()
        for filename in sorted(filenames):
            full_path = os.path.join(dirpath, filename)
            relative = os.path.relpath(full_path, source)
            if relative in excluded:
                continue
            files.append(read_construct_file(full_path, relative))

    return files


def read_construct_file(path: str, relative_path: str) -> ConstructFile:
    with open(path, 'rb') as f:
        return ConstructFile(path=relative_path, content=f.read())
