from __future__ import annotations

"""
Content Tree Aggregate.

Bundles the built entry tree with the projections computed once after the
build (pre-order flat list, leaves) and the recompilation fingerprint.
"""

from dataclasses import dataclass
from typing import Tuple

from storyshelf.domain.entry_models import Entry, StoryEntry


@dataclass(frozen=True)
class ContentTree:
    """
    Immutable result of a content directory build.

    Attributes:
        content_path: Absolute content root the tree was built from.
        entries: Root level entries, in navigation order.
        flat_list: Every entry, pre-order (folders before their children).
        leaves: Story entries only, in flat_list order.
        index_files: Absolute paths of the index files read during the build.
        fingerprint: Hash over the matched content file paths.
    """
    content_path: str
    entries: Tuple[Entry, ...]
    flat_list: Tuple[Entry, ...]
    leaves: Tuple[StoryEntry, ...]
    index_files: Tuple[str, ...]
    fingerprint: str
