from __future__ import annotations

"""
Recompilation Fingerprint.

A path-existence fingerprint of the content directory: the md5 digest of the
sorted relative paths of every story and index file. Adding, removing or
renaming a file changes it; editing a file does not. Content edits to index
files are caught separately through their recorded modification times.
"""

import hashlib
import logging
import os
from typing import AbstractSet, Dict, Iterable, List, Mapping, Optional

from storyshelf.core.content.scanner import child_ancestors, root_ancestors, scan_directory
from storyshelf.infra.fs import to_posix

logger = logging.getLogger(__name__)


def matched_content_files(content_path: str) -> List[str]:
    """
    List story and index files under 'content_path'.

    Enumerates through the same directory scanner as the tree builder, so
    symlinked directories and cycle skipping match the built tree.

    Returns:
        List[str]: Sorted '/'-separated paths relative to the content root.
    """
    matched: List[str] = []
    _collect(content_path, "", root_ancestors(content_path), matched)
    matched.sort()
    return matched


def _collect(dir_abs: str, rel_dir: str, ancestors: AbstractSet[str], out: List[str]) -> None:
    listing = scan_directory(dir_abs, ancestors)
    for file_name in listing.story_files + listing.index_files:
        out.append(to_posix(os.path.join(rel_dir, file_name)))
    for dir_name in listing.sub_dirs:
        child_abs = os.path.join(dir_abs, dir_name)
        _collect(child_abs, os.path.join(rel_dir, dir_name), child_ancestors(ancestors, child_abs), out)


def paths_fingerprint(content_path: str) -> str:
    """Digest of the matched file set; a missing root hashes as an empty set."""
    return hash_paths(matched_content_files(content_path) if os.path.isdir(content_path) else [])


def hash_paths(rel_paths: Iterable[str]) -> str:
    digest = hashlib.md5()
    for rel in sorted(rel_paths):
        digest.update(rel.encode("utf-8"))
        digest.update(b"\0")
    return digest.hexdigest()


def file_mtimes(paths: Iterable[str]) -> Dict[str, Optional[float]]:
    """Record modification times; vanished files map to None."""
    out: Dict[str, Optional[float]] = {}
    for path in paths:
        try:
            out[path] = os.path.getmtime(path)
        except OSError:
            out[path] = None
    return out


def tracked_files_changed(recorded: Mapping[str, Optional[float]]) -> bool:
    current = file_mtimes(recorded.keys())
    for path, mtime in recorded.items():
        if current[path] != mtime:
            logger.debug(f"Tracked file changed: {path}")
            return True
    return False
