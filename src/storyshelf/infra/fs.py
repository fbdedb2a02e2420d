from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Cross-platform path helpers shared by the tree builder and the story loader.
Storybook paths always use '/' regardless of the host separator.
"""

import os
from typing import Optional

from storyshelf.domain.constants import PATH_SEPARATOR

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def to_posix(rel_path: str) -> str:
    """Convert a host relative path to '/' separators."""
    return rel_path.replace(os.sep, PATH_SEPARATOR)


def is_within(path: str, root: str, resolve_links: bool = True) -> bool:
    """
    True if 'path' is 'root' itself or somewhere below it.

    With 'resolve_links' the check runs on resolved paths, so a symlink that
    points outside of 'root' fails. Without it the check is lexical: '..'
    segments still cannot escape, but symlinked directories under 'root'
    count as inside.
    """
    resolve = os.path.realpath if resolve_links else os.path.abspath
    root_abs = resolve(root)
    path_abs = resolve(path)
    try:
        return os.path.commonpath([root_abs, path_abs]) == root_abs
    except ValueError:
        # Different drives on Windows
        return False


def relative_to_root(path: str, root: str) -> Optional[str]:
    """
    Express 'path' relative to 'root' with '/' separators.

    Relative inputs are interpreted against 'root'.

    Returns:
        Optional[str]: The relative posix path, or None if outside of root.
    """
    candidate = path if os.path.isabs(path) else os.path.join(root, path)
    if not is_within(candidate, root):
        return None
    rel = os.path.relpath(os.path.realpath(candidate), os.path.realpath(root))
    return to_posix(rel)
