from __future__ import annotations

"""
Domain Constants.

Centralizes the filename conventions of a storybook content directory,
the supported story schema vocabulary and the extra-assigns modes.
"""

from typing import FrozenSet

APP_VERSION = "0.4.0"

# -----------------------------------------------------------------------------
# CONTENT DIRECTORY CONVENTIONS
# -----------------------------------------------------------------------------

STORY_FILE_SUFFIX = ".story.json"
INDEX_FILE_SUFFIX = ".index.json"
PATH_SEPARATOR = "/"

DEFAULT_TITLE = "Storybook"

# -----------------------------------------------------------------------------
# STORY SCHEMA VOCABULARY
# -----------------------------------------------------------------------------

STORY_KINDS: FrozenSet[str] = frozenset({"component", "live_component"})
DEFAULT_STORY_KIND = "component"

ATTRIBUTE_TYPES: FrozenSet[str] = frozenset({
    "string",
    "boolean",
    "integer",
    "float",
    "list",
    "any",
})
DEFAULT_ATTRIBUTE_TYPE = "any"

# -----------------------------------------------------------------------------
# EXTRA ASSIGNS
# -----------------------------------------------------------------------------

MODE_FLAT = "flat"
MODE_NESTED = "nested"
VARIATION_FIELD_SEPARATOR = ":"

TRUE_STRINGS: FrozenSet[str] = frozenset({"true", "1", "yes", "y", "on"})
FALSE_STRINGS: FrozenSet[str] = frozenset({"false", "0", "no", "n", "off"})

# -----------------------------------------------------------------------------
# PREVIEW SESSIONS
# -----------------------------------------------------------------------------

DEFAULT_MAX_PREVIEW_SESSIONS = 256
