from __future__ import annotations

"""
Content Tree Renderer.

Converts the entry tree into an ASCII representation for terminal output.
"""

from typing import List, Optional, Sequence

from storyshelf.domain.entry_models import Entry, FolderEntry

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_content_tree(
        entries: Sequence[Entry],
        lines: Optional[List[str]] = None,
        prefix: str = "",
        show_paths: bool = False,
) -> List[str]:
    """
    Recursively render entries using standard connectors (├──, └──).

    Entries are rendered in tree order, never re-sorted: navigation order
    is part of the tree.

    Args:
        entries: Entries of the current level.
        lines: Accumulator list; a new one is created when omitted.
        prefix: Indentation prefix for the current recursion level.
        show_paths: Append the storybook path of every entry.

    Returns:
        List[str]: The accumulated lines.
    """
    if lines is None:
        lines = []

    total = len(entries)
    for i, entry in enumerate(entries):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        label = entry.name
        if isinstance(entry, FolderEntry):
            label += "/"
        if entry.icon:
            label = f"[{entry.icon}] {label}"
        if show_paths:
            label += f"  ({entry.path})"

        lines.append(f"{prefix}{connector}{label}")

        if isinstance(entry, FolderEntry):
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_content_tree(entry.children, lines, prefix=new_prefix, show_paths=show_paths)

    return lines
