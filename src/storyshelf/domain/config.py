from __future__ import annotations

"""
Configuration Domain Management.

Defines the explicit configuration object handed to the tree builder and the
story loader at construction time, and the JSON persistence used by the CLI.
Raw configuration travels as a dictionary until it has been validated.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from storyshelf.domain.constants import DEFAULT_TITLE
from storyshelf.domain.errors import ConfigurationError
from storyshelf.infra.fs import normalize_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIGURATION MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FolderOverride:
    """
    Presentation overrides for one folder of the content tree.

    Attributes:
        name: Display name replacing the directory name.
        icon: Icon identifier.
        open: Whether the folder starts expanded (None keeps the index/default).
        order: Child path segments listed first, in this order.
    """
    name: Optional[str] = None
    icon: Optional[str] = None
    open: Optional[bool] = None
    order: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StorybookConfig:
    """
    Immutable storybook settings.

    Attributes:
        content_path: Absolute root directory holding story and index files.
        title: Storybook title shown by the preview surface.
        folders: Folder overrides keyed by storybook path ('/components').
        themes: Available theme names.
        default_theme: Theme used when a preview request names none.
        options: Free-form settings exposed through Backend.config().
    """
    content_path: str
    title: str = DEFAULT_TITLE
    folders: Mapping[str, FolderOverride] = field(default_factory=lambda: MappingProxyType({}))
    themes: Tuple[str, ...] = field(default_factory=tuple)
    default_theme: Optional[str] = None
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default raw configuration.

    'content_path' has no default: a storybook cannot be built without it.
    """
    return {
        "content_path": "",
        "title": DEFAULT_TITLE,
        "folders": {},
        "themes": [],
        "default_theme": "",
        "options": {},
    }


# -----------------------------------------------------------------------------
# PERSISTENCE
# -----------------------------------------------------------------------------

def load_config_file(path: str) -> Dict[str, Any]:
    """
    Read a raw configuration dictionary from a JSON file.

    Relative 'content_path' values are resolved against the file's directory.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a JSON object.
    """
    if not os.path.isfile(path):
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read config file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file '{path}' must contain a JSON object.")

    content_path = data.get("content_path")
    if isinstance(content_path, str) and content_path and not os.path.isabs(content_path):
        base_dir = os.path.dirname(os.path.abspath(path))
        data["content_path"] = os.path.join(base_dir, content_path)

    logger.debug(f"Configuration loaded from {path}")
    return data


# -----------------------------------------------------------------------------
# FACTORY
# -----------------------------------------------------------------------------

def config_from_dict(clean: Dict[str, Any]) -> StorybookConfig:
    """
    Build the immutable StorybookConfig from a validated dictionary.

    The content path is expanded (~, environment variables) and made absolute.

    Raises:
        ConfigurationError: If 'content_path' is missing.
    """
    content_path = clean.get("content_path") or ""
    if not content_path:
        raise ConfigurationError("content_path key must be set")

    folders = {
        key: FolderOverride(
            name=value.get("name"),
            icon=value.get("icon"),
            open=value.get("open"),
            order=tuple(value.get("order") or ()),
        )
        for key, value in (clean.get("folders") or {}).items()
    }

    return StorybookConfig(
        content_path=normalize_path(content_path, fallback=os.curdir),
        title=clean.get("title") or DEFAULT_TITLE,
        folders=MappingProxyType(folders),
        themes=tuple(clean.get("themes") or ()),
        default_theme=clean.get("default_theme") or None,
        options=MappingProxyType(dict(clean.get("options") or {})),
    )
