from __future__ import annotations

"""
Storybook Backend.

The query surface consumed by the preview layer. A backend runs the tree
builder once at construction and closes over the result; every lookup is
served from immutable data and is safe to share between threads.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from storyshelf.core.content.entries import index_by_path
from storyshelf.core.content.fingerprint import file_mtimes, paths_fingerprint, tracked_files_changed
from storyshelf.core.content.tree_builder import build_content_tree
from storyshelf.core.stories import loader
from storyshelf.domain.config import StorybookConfig
from storyshelf.domain.entry_models import Entry, StoryEntry
from storyshelf.domain.story_models import StoryDescriptor
from storyshelf.domain.tree_models import ContentTree

logger = logging.getLogger(__name__)


class StorybookBackend:
    """
    Built storybook for one content directory.

    Construction fails with ContentTreeError/DuplicatePathError when the
    content directory cannot be turned into a tree.
    """

    def __init__(self, config: StorybookConfig) -> None:
        self._config = config
        self._tree: ContentTree = build_content_tree(config.content_path, config.folders)
        self._by_path: Mapping[str, Entry] = index_by_path(self._tree.entries)
        self._tracked: Dict[str, Optional[float]] = file_mtimes(self._tree.index_files)

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------

    @property
    def settings(self) -> StorybookConfig:
        return self._config

    def config(self, key: str, default: Any = None) -> Any:
        """Return a configuration attribute, else an 'options' entry, else 'default'."""
        if key != "options" and hasattr(self._config, key):
            value = getattr(self._config, key)
            return default if value is None else value
        return self._config.options.get(key, default)

    # -------------------------------------------------------------------------
    # CONTENT TREE
    # -------------------------------------------------------------------------

    def content_tree(self) -> Tuple[Entry, ...]:
        return self._tree.entries

    def leaves(self) -> Tuple[StoryEntry, ...]:
        return self._tree.leaves

    def flat_list(self) -> Tuple[Entry, ...]:
        return self._tree.flat_list

    def find_entry_by_path(self, path: str) -> Optional[Entry]:
        return self._by_path.get(path)

    def storybook_path(self, story_ref: str) -> Optional[str]:
        """Storybook path of a story file (absolute, or relative to the content root)."""
        return loader.storybook_path(self._config.content_path, story_ref)

    # -------------------------------------------------------------------------
    # STORIES
    # -------------------------------------------------------------------------

    def load_story(self, path: str, validate: bool = True) -> Optional[StoryDescriptor]:
        """
        Load a story body on demand.

        Returns None when the path names no story; raises StoryLoadError or
        StoryValidationError when the story exists but is malformed.
        """
        return loader.load_story(self._config.content_path, path, validate=validate)

    # -------------------------------------------------------------------------
    # RECOMPILATION
    # -------------------------------------------------------------------------

    @property
    def fingerprint(self) -> str:
        return self._tree.fingerprint

    @property
    def tracked_files(self) -> Tuple[str, ...]:
        return self._tree.index_files

    def needs_recompile(self) -> bool:
        """True when story/index files were added, removed, or an index file changed."""
        current = paths_fingerprint(self._config.content_path)
        if current != self._tree.fingerprint:
            logger.info("Content file set changed; storybook must be rebuilt.")
            return True
        if tracked_files_changed(self._tracked):
            logger.info("Index file changed; storybook must be rebuilt.")
            return True
        return False

    def rebuild(self) -> "StorybookBackend":
        """Return a freshly built backend for the same configuration."""
        return StorybookBackend(self._config)
