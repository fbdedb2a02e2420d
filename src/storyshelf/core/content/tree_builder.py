from __future__ import annotations

"""
Content Tree Builder.

Turns a content directory into the immutable storybook entry tree. Story
files become StoryEntry leaves, directories become FolderEntry nodes, and
per-directory index files plus the folder configuration decide display
names, icons, expansion state and ordering. The build is deterministic:
identical inputs always produce an identical tree.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import AbstractSet, Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from storyshelf.core.content.entries import flat_list, index_by_path, leaves
from storyshelf.core.content.fingerprint import hash_paths
from storyshelf.core.content.scanner import child_ancestors, root_ancestors, scan_directory
from storyshelf.domain.config import FolderOverride
from storyshelf.domain.constants import PATH_SEPARATOR, STORY_FILE_SUFFIX
from storyshelf.domain.entry_models import Entry, FolderEntry, StoryEntry
from storyshelf.domain.errors import ContentTreeError, DuplicatePathError
from storyshelf.domain.tree_models import ContentTree
from storyshelf.infra.fs import to_posix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _IndexData:
    """Parsed content of a directory index file."""
    name: Optional[str] = None
    icon: Optional[str] = None
    open: Optional[bool] = None
    order: Tuple[str, ...] = ()
    entries: Dict[str, Dict[str, Any]] = field(default_factory=dict)


@dataclass
class _BuildState:
    """Accumulators shared across the recursive walk."""
    content_path: str
    folders: Mapping[str, FolderOverride]
    matched: List[str] = field(default_factory=list)
    index_files: List[str] = field(default_factory=list)
    index_by_dir: Dict[str, _IndexData] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_content_tree(
        content_path: str,
        folders: Optional[Mapping[str, FolderOverride]] = None,
) -> ContentTree:
    """
    Build the storybook content tree from a directory.

    Args:
        content_path: Root directory holding story and index files.
        folders: Folder overrides keyed by storybook path ('/components').

    Returns:
        ContentTree: Entries plus their flat list, leaves, tracked index
                     files and the path fingerprint.

    Raises:
        ContentTreeError: If the root is not a directory or an index file is invalid.
        DuplicatePathError: If two files normalize to the same storybook path.
    """
    root_abs = os.path.abspath(content_path)
    if not os.path.isdir(root_abs):
        raise ContentTreeError(f"Content path is not a directory: {content_path}")

    logger.info(f"Building content tree from: {root_abs}")

    state = _BuildState(content_path=root_abs, folders=folders or {})
    entries = _build_children(root_abs, PATH_SEPARATOR, root_ancestors(root_abs), state)

    index_by_path(entries)

    all_entries = flat_list(entries)
    story_entries = leaves(entries)

    logger.info(
        f"Content tree built: {len(story_entries)} stories, "
        f"{len(all_entries) - len(story_entries)} folders"
    )

    return ContentTree(
        content_path=root_abs,
        entries=entries,
        flat_list=all_entries,
        leaves=story_entries,
        index_files=tuple(sorted(state.index_files)),
        fingerprint=hash_paths(state.matched),
    )


def humanize(segment: str) -> str:
    """Derive a display name from a path segment ('primary_button' -> 'Primary button')."""
    text = segment.replace("_", " ").replace("-", " ").strip()
    return text[:1].upper() + text[1:] if text else segment


# -----------------------------------------------------------------------------
# INTERNAL HELPERS (WALK)
# -----------------------------------------------------------------------------

def _build_children(
        dir_abs: str,
        sb_path: str,
        ancestors: AbstractSet[str],
        state: _BuildState,
) -> Tuple[Entry, ...]:
    """Scan one directory level and return its ordered, non-empty children."""
    listing = scan_directory(dir_abs, ancestors)
    sub_dirs, story_files = listing.sub_dirs, listing.story_files

    logger.debug(
        f"Scanning {sb_path}: {len(sub_dirs)} dirs, {len(story_files)} stories, "
        f"{len(listing.index_files)} index files"
    )

    index = _load_directory_index(dir_abs, listing.index_files, state)
    override = state.folders.get(sb_path)

    children: Dict[str, Entry] = {}
    seen: Dict[str, str] = {}

    for dir_name in sub_dirs:
        child_path = _join(sb_path, dir_name)
        child_abs = os.path.join(dir_abs, dir_name)
        folder = _build_folder(child_abs, dir_name, child_path, child_ancestors(ancestors, child_abs), state)
        if folder is None:
            continue
        _register(dir_name, child_path, seen)
        children[dir_name] = folder

    for file_name in story_files:
        segment = file_name[: -len(STORY_FILE_SUFFIX)]
        child_path = _join(sb_path, segment)
        _register(segment, child_path, seen)

        rel = to_posix(os.path.relpath(os.path.join(dir_abs, file_name), state.content_path))
        state.matched.append(rel)

        meta = index.entries.get(segment, {})
        children[segment] = StoryEntry(
            path=child_path,
            name=meta.get("name") or humanize(segment),
            source=rel,
            icon=meta.get("icon"),
        )

    order = override.order if override and override.order else index.order
    return tuple(children[key] for key in _ordered_keys(children, order))


def _build_folder(
        dir_abs: str,
        dir_name: str,
        sb_path: str,
        ancestors: AbstractSet[str],
        state: _BuildState,
) -> Optional[FolderEntry]:
    children = _build_children(dir_abs, sb_path, ancestors, state)
    if not children:
        logger.debug(f"Pruned folder without stories: {sb_path}")
        return None

    index = _peek_index(dir_abs, state)
    override = state.folders.get(sb_path) or FolderOverride()

    is_open = override.open if override.open is not None else index.open
    return FolderEntry(
        path=sb_path,
        name=override.name or index.name or humanize(dir_name),
        icon=override.icon or index.icon,
        open=bool(is_open),
        children=children,
    )


def _register(segment: str, sb_path: str, seen: Dict[str, str]) -> None:
    """Reject siblings whose paths are equal after case folding."""
    key = segment.casefold()
    if key in seen:
        raise DuplicatePathError([seen[key], sb_path])
    seen[key] = sb_path


def _ordered_keys(children: Dict[str, Entry], order: Tuple[str, ...]) -> List[str]:
    """Configured order first, then alphabetical (case-insensitive, then raw)."""
    position = {segment: i for i, segment in enumerate(order)}
    missing = [segment for segment in order if segment not in children]
    if missing:
        logger.warning(f"Order lists unknown entries: {', '.join(missing)}")
    return sorted(
        children,
        key=lambda seg: (position.get(seg, len(position)), seg.casefold(), seg),
    )


def _join(parent: str, segment: str) -> str:
    if parent == PATH_SEPARATOR:
        return PATH_SEPARATOR + segment
    return parent + PATH_SEPARATOR + segment


# -----------------------------------------------------------------------------
# INTERNAL HELPERS (INDEX FILES)
# -----------------------------------------------------------------------------

def _load_directory_index(dir_abs: str, index_files: Sequence[str], state: _BuildState) -> _IndexData:
    """Read the single optional index file of a directory and remember it for _peek_index."""
    if len(index_files) > 1:
        raise ContentTreeError(
            f"More than one index file in '{dir_abs}': {', '.join(index_files)}"
        )

    if not index_files:
        index = _IndexData()
    else:
        index_abs = os.path.join(dir_abs, index_files[0])
        state.index_files.append(index_abs)
        state.matched.append(to_posix(os.path.relpath(index_abs, state.content_path)))
        index = _parse_index_file(index_abs)

    state.index_by_dir[dir_abs] = index
    return index


def _peek_index(dir_abs: str, state: _BuildState) -> _IndexData:
    return state.index_by_dir.get(dir_abs, _IndexData())


def _parse_index_file(index_abs: str) -> _IndexData:
    try:
        with open(index_abs, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ContentTreeError(f"Cannot read index file '{index_abs}': {e}") from e

    if not isinstance(data, dict):
        raise ContentTreeError(f"Index file '{index_abs}' must contain a JSON object.")

    name = _optional(data, "name", str, index_abs)
    icon = _optional(data, "icon", str, index_abs)
    is_open = _optional(data, "open", bool, index_abs)

    order = data.get("order", [])
    if not isinstance(order, list) or not all(isinstance(o, str) for o in order):
        raise ContentTreeError(f"Index file '{index_abs}': 'order' must be a list of strings.")

    entries = data.get("entries", {})
    if not isinstance(entries, dict) or not all(isinstance(v, dict) for v in entries.values()):
        raise ContentTreeError(f"Index file '{index_abs}': 'entries' must map names to objects.")

    return _IndexData(name=name, icon=icon, open=is_open, order=tuple(order), entries=entries)


def _optional(data: Dict[str, Any], key: str, expected: Union[type, Tuple[type, ...]], source: str) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, expected):
        raise ContentTreeError(f"Index file '{source}': '{key}' has an invalid type.")
    return value
