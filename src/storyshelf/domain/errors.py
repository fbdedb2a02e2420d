from __future__ import annotations

"""
Storybook Error Taxonomy.

Build-time and validation failures are fatal and propagate to the process
boundary. A missing story is not an error inside the core (loaders return
None); StoryNotFound is raised only by the interface layers.
"""

from typing import Iterable, Tuple


class StorybookError(Exception):
    """Base class for every error raised by storyshelf."""


class ConfigurationError(StorybookError):
    """Raised when the storybook configuration is missing or malformed."""


class ContentTreeError(StorybookError):
    """Raised when the content directory cannot be turned into a tree."""


class DuplicatePathError(ContentTreeError):
    """
    Two content files normalize to the same storybook path.

    Attributes:
        paths: The colliding storybook paths, in discovery order.
    """

    def __init__(self, paths: Iterable[str]) -> None:
        self.paths: Tuple[str, ...] = tuple(paths)
        super().__init__(f"Duplicate storybook path: {', '.join(self.paths)}")


class StoryLoadError(StorybookError):
    """Raised when an existing story file cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load story '{path}': {reason}")


class StoryValidationError(StorybookError):
    """
    A story definition violates the story schema.

    Attributes:
        path: Storybook path of the offending story.
        field: Dotted location of the offending field (e.g. 'variations[1].id').
        message: Human readable description of the violation.
    """

    def __init__(self, path: str, field: str, message: str) -> None:
        self.path = path
        self.field = field
        self.message = message
        super().__init__(f"Invalid story '{path}' at '{field}': {message}")


class StoryNotFound(StorybookError):
    """Raised at the interface boundary when a requested story does not exist."""
