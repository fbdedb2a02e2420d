from __future__ import annotations

"""
Content Tree Entry Models.

Provides the two node types of the storybook content tree. Entries are
immutable value objects that serialize to plain literals so a built tree
can be embedded, cached or shipped to a client as-is.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

FOLDER_KIND = "folder"
STORY_KIND = "story"

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FolderEntry:
    """
    A directory level of the content tree.

    Attributes:
        path: Canonical storybook path (e.g. '/components/buttons').
        name: Display name.
        icon: Optional icon identifier.
        open: Whether navigation renders the folder expanded.
        children: Ordered child entries.
    """
    path: str
    name: str
    icon: Optional[str] = None
    open: bool = False
    children: Tuple["Entry", ...] = field(default_factory=tuple)

    @property
    def kind(self) -> str:
        return FOLDER_KIND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": FOLDER_KIND,
            "path": self.path,
            "name": self.name,
            "icon": self.icon,
            "open": self.open,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class StoryEntry:
    """
    A story leaf of the content tree.

    Attributes:
        path: Canonical storybook path (e.g. '/components/button').
        name: Display name.
        icon: Optional icon identifier.
        source: Story file location relative to the content root.
    """
    path: str
    name: str
    source: str
    icon: Optional[str] = None

    @property
    def kind(self) -> str:
        return STORY_KIND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": STORY_KIND,
            "path": self.path,
            "name": self.name,
            "icon": self.icon,
            "source": self.source,
        }


Entry = Union[FolderEntry, StoryEntry]


def entry_from_dict(data: Dict[str, Any]) -> Entry:
    """
    Rebuild an entry (recursively) from its literal representation.

    Raises:
        ValueError: If the 'kind' tag is unknown.
    """
    kind = data.get("kind")
    if kind == FOLDER_KIND:
        return FolderEntry(
            path=data["path"],
            name=data["name"],
            icon=data.get("icon"),
            open=bool(data.get("open", False)),
            children=tuple(entry_from_dict(c) for c in data.get("children", [])),
        )
    if kind == STORY_KIND:
        return StoryEntry(
            path=data["path"],
            name=data["name"],
            source=data["source"],
            icon=data.get("icon"),
        )
    raise ValueError(f"Unknown entry kind: {kind!r}")
