from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A sample storybook content directory built on tmp_path.
3. Story documents shared by the loader, validator and synchronizer tests.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Story Documents
# -----------------------------------------------------------------------------
BUTTON_STORY: Dict[str, Any] = {
    "component": "MyApp.Components.Button",
    "description": "A clickable button.",
    "attributes": [
        {"id": "label", "type": "string", "required": True},
        {"id": "disabled", "type": "boolean", "default": False},
        {"id": "size", "type": "integer", "default": 2},
        {"id": "ratio", "type": "float"},
        {"id": "tags", "type": "list", "default": []},
    ],
    "extra_assigns": ["disabled", "tags"],
    "variations": [
        {"id": "default", "attributes": {"label": "Click"}},
        {
            "id": "primary",
            "description": "Primary call to action",
            "attributes": {"label": "Go", "size": 3},
            "slots": ["Go!"],
        },
    ],
}

INPUT_STORY: Dict[str, Any] = {
    "component": "MyApp.Forms.Input",
    "kind": "live_component",
    "attributes": [
        {"id": "disabled", "type": "boolean", "default": False},
        {"id": "value", "type": "string"},
    ],
    "variations": [
        {
            "id": "states",
            "description": "Input states",
            "variations": [
                {"id": "enabled", "attributes": {"value": "a"}},
                {"id": "locked", "attributes": {"disabled": True}},
            ],
        },
        {"id": "plain"},
    ],
}

MINIMAL_STORY: Dict[str, Any] = {
    "component": "MyApp.Minimal",
    "variations": [{"id": "default"}],
}


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Return a helper that writes a JSON document, creating parent directories."""

    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def content_dir(tmp_path: Path, write_json: Callable[[Path, Any], Path]) -> Path:
    """
    Create a sample storybook content directory.

    Structure:
    /content
      alpha.story.json
      Zeta.story.json
      /components
        _.index.json          (name, icon, open, order, entries)
        avatar.story.json
        button.story.json
        /forms
          input.story.json    (variation group)
      /empty_dir
        notes.txt             (no stories: pruned)
    """
    root = tmp_path / "content"
    root.mkdir()

    write_json(root / "alpha.story.json", MINIMAL_STORY)
    write_json(root / "Zeta.story.json", MINIMAL_STORY)

    components = root / "components"
    write_json(components / "_.index.json", {
        "name": "UI Components",
        "icon": "cube",
        "open": True,
        "order": ["button", "forms"],
        "entries": {"button": {"name": "Fancy Button", "icon": "click"}},
    })
    write_json(components / "avatar.story.json", MINIMAL_STORY)
    write_json(components / "button.story.json", BUTTON_STORY)
    write_json(components / "forms" / "input.story.json", INPUT_STORY)

    empty = root / "empty_dir"
    empty.mkdir()
    (empty / "notes.txt").write_text("not a story", encoding="utf-8")

    return root


@pytest.fixture
def button_story_dict() -> Dict[str, Any]:
    """Return a fresh copy of the flat button story document."""
    return json.loads(json.dumps(BUTTON_STORY))


@pytest.fixture
def input_story_dict() -> Dict[str, Any]:
    """Return a fresh copy of the grouped input story document."""
    return json.loads(json.dumps(INPUT_STORY))


@pytest.fixture
def minimal_story_dict() -> Dict[str, Any]:
    """Return a fresh copy of the smallest valid story document."""
    return json.loads(json.dumps(MINIMAL_STORY))
