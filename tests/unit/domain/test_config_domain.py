from __future__ import annotations

"""
Unit tests for the Configuration Domain.

Verifies:
1. Default configuration completeness.
2. JSON config file loading and relative content path resolution.
3. Error reporting for missing or malformed config files.
4. Construction of the immutable StorybookConfig.
"""

import json
import os
from pathlib import Path

import pytest

from storyshelf.domain.config import (
    FolderOverride,
    StorybookConfig,
    config_from_dict,
    get_default_config,
    load_config_file,
)
from storyshelf.domain.errors import ConfigurationError


def test_get_default_config_completeness():
    defaults = get_default_config()
    assert set(defaults) == {"content_path", "title", "folders", "themes", "default_theme", "options"}
    assert defaults["content_path"] == ""
    assert defaults["title"] == "Storybook"


def test_load_config_file_resolves_relative_content_path(tmp_path: Path):
    cfg_file = tmp_path / "storybook.json"
    cfg_file.write_text(json.dumps({"content_path": "stories", "title": "UI"}), encoding="utf-8")

    data = load_config_file(str(cfg_file))

    assert data["content_path"] == os.path.join(str(tmp_path), "stories")
    assert data["title"] == "UI"


def test_load_config_file_keeps_absolute_content_path(tmp_path: Path):
    cfg_file = tmp_path / "storybook.json"
    absolute = str(tmp_path / "elsewhere")
    cfg_file.write_text(json.dumps({"content_path": absolute}), encoding="utf-8")

    assert load_config_file(str(cfg_file))["content_path"] == absolute


def test_load_config_file_missing(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_config_file(str(tmp_path / "missing.json"))


def test_load_config_file_invalid_json(tmp_path: Path):
    cfg_file = tmp_path / "broken.json"
    cfg_file.write_text("{ not json", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Failed to read"):
        load_config_file(str(cfg_file))


def test_load_config_file_requires_object(tmp_path: Path):
    cfg_file = tmp_path / "list.json"
    cfg_file.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="JSON object"):
        load_config_file(str(cfg_file))


def test_config_from_dict_requires_content_path():
    with pytest.raises(ConfigurationError, match="content_path key must be set"):
        config_from_dict(get_default_config())


def test_config_from_dict_builds_immutable_config(tmp_path: Path):
    clean = get_default_config()
    clean.update({
        "content_path": str(tmp_path),
        "themes": ["light", "dark"],
        "default_theme": "dark",
        "folders": {"/components": {"name": "UI", "icon": None, "open": True, "order": ["button"]}},
        "options": {"sandbox": "iframe"},
    })

    cfg = config_from_dict(clean)

    assert isinstance(cfg, StorybookConfig)
    assert cfg.content_path == os.path.abspath(str(tmp_path))
    assert cfg.themes == ("light", "dark")
    assert cfg.default_theme == "dark"
    assert cfg.folders["/components"] == FolderOverride(name="UI", open=True, order=("button",))
    assert cfg.options["sandbox"] == "iframe"

    with pytest.raises(TypeError):
        cfg.options["sandbox"] = "none"  # type: ignore[index]


def test_config_from_dict_empty_default_theme_is_none(tmp_path: Path):
    clean = get_default_config()
    clean["content_path"] = str(tmp_path)

    assert config_from_dict(clean).default_theme is None
