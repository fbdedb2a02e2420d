from __future__ import annotations

"""
Content Directory Scanner.

Single source of truth for which files of a content directory count as
story and index files. The tree builder and the recompilation fingerprint
both enumerate through this module so they always agree on the file set.

Hidden names (leading '.') are ignored. Symlinked directories are followed
unless they resolve to one of their own ancestors.
"""

import logging
import os
from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, List, Tuple

from storyshelf.domain.constants import INDEX_FILE_SUFFIX, STORY_FILE_SUFFIX

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryListing:
    """Classified, sorted names of one directory level."""
    sub_dirs: Tuple[str, ...]
    story_files: Tuple[str, ...]
    index_files: Tuple[str, ...]


def root_ancestors(content_path: str) -> FrozenSet[str]:
    """Ancestor set used to start a scan at the content root."""
    return frozenset({os.path.realpath(content_path)})


def child_ancestors(ancestors: AbstractSet[str], child_abs: str) -> FrozenSet[str]:
    return frozenset(ancestors) | {os.path.realpath(child_abs)}


def scan_directory(dir_abs: str, ancestors: AbstractSet[str]) -> DirectoryListing:
    """
    Classify the entries of one directory.

    Args:
        dir_abs: Directory to list.
        ancestors: Resolved paths of 'dir_abs' and every directory above it
                   in the current walk.

    Returns:
        DirectoryListing: Sub-directories to descend into, story files and
                          index files, each sorted by name.
    """
    sub_dirs: List[str] = []
    story_files: List[str] = []
    index_files: List[str] = []

    for name in sorted(os.listdir(dir_abs)):
        if name.startswith("."):
            continue
        full = os.path.join(dir_abs, name)
        if os.path.isdir(full):
            if os.path.realpath(full) in ancestors:
                logger.warning(f"Skipping symlink cycle: {full}")
                continue
            sub_dirs.append(name)
        elif name.endswith(STORY_FILE_SUFFIX):
            story_files.append(name)
        elif name.endswith(INDEX_FILE_SUFFIX):
            index_files.append(name)

    return DirectoryListing(
        sub_dirs=tuple(sub_dirs),
        story_files=tuple(story_files),
        index_files=tuple(index_files),
    )
