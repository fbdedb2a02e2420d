from __future__ import annotations

"""
Content Tree Projections.

Derived read-only views over a built entry tree: the pre-order flat list,
the leaves (stories only) and the path lookup index.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from storyshelf.domain.entry_models import Entry, FolderEntry, StoryEntry
from storyshelf.domain.errors import DuplicatePathError


def flat_list(entries: Iterable[Entry]) -> Tuple[Entry, ...]:
    """Pre-order traversal: each folder precedes its children, children keep their order."""
    out: List[Entry] = []
    _collect(entries, out)
    return tuple(out)


def leaves(entries: Iterable[Entry]) -> Tuple[StoryEntry, ...]:
    return tuple(e for e in flat_list(entries) if isinstance(e, StoryEntry))


def index_by_path(entries: Iterable[Entry]) -> Mapping[str, Entry]:
    """
    Build the read-only path -> entry lookup table.

    Raises:
        DuplicatePathError: If two entries share a path.
    """
    index: Dict[str, Entry] = {}
    for entry in flat_list(entries):
        if entry.path in index:
            raise DuplicatePathError([index[entry.path].path, entry.path])
        index[entry.path] = entry
    return MappingProxyType(index)


def _collect(entries: Iterable[Entry], out: List[Entry]) -> None:
    for entry in entries:
        out.append(entry)
        if isinstance(entry, FolderEntry):
            _collect(entry.children, out)
