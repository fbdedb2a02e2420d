from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (JSON file, CLI flags)
and the StorybookConfig factory. Coerces types, normalizes folder keys to
storybook paths and fills missing keys with domain defaults.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from storyshelf.domain.config import get_default_config
from storyshelf.domain.constants import FALSE_STRINGS, PATH_SEPARATOR, TRUE_STRINGS

logger = logging.getLogger(__name__)

_FOLDER_KEYS = ("name", "icon", "open", "order")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for key in ("content_path", "title", "default_theme"):
        merged[key] = _as_str(merged.get(key), defaults[key], key, warnings, strict)

    merged["themes"] = _as_list_str(merged.get("themes"), [], "themes", warnings, strict)
    merged["options"] = _as_dict(merged.get("options"), "options", warnings, strict)
    merged["folders"] = _normalize_folders(merged.get("folders"), warnings, strict)

    if merged["default_theme"] and merged["themes"] and merged["default_theme"] not in merged["themes"]:
        msg = f"default_theme '{merged['default_theme']}' is not one of the declared themes."
        if strict:
            raise ValueError(msg)
        warnings.append(msg)

    unknown = sorted(set(config) - set(defaults))
    for key in unknown:
        warnings.append(f"Unknown config key '{key}' ignored.")
        merged.pop(key, None)

    return merged, warnings


def normalize_storybook_path(path: str) -> str:
    """Return 'path' with exactly one leading separator and no trailing one."""
    p = path.strip().strip(PATH_SEPARATOR)
    return PATH_SEPARATOR + p if p else PATH_SEPARATOR


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[bool]:
    """Coerce human-friendly booleans; None means 'not configured'."""
    if value is None or isinstance(value, bool):
        return value

    if not strict and isinstance(value, str):
        s = value.strip().lower()
        if s in TRUE_STRINGS:
            warnings.append(f"Field '{field}' converted from '{value}' to True.")
            return True
        if s in FALSE_STRINGS:
            warnings.append(f"Field '{field}' converted from '{value}' to False.")
            return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Ignored.")
    return None


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of stripped strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


def _as_dict(value: Any, field: str, warnings: List[str], strict: bool) -> Dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)

    msg = f"Invalid field '{field}': expected object, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using empty object.")
    return {}


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: FOLDER OVERRIDES
# -----------------------------------------------------------------------------

def _normalize_folders(value: Any, warnings: List[str], strict: bool) -> Dict[str, Dict[str, Any]]:
    """Normalize folder keys to storybook paths and sanitize each override."""
    folders = _as_dict(value, "folders", warnings, strict)
    out: Dict[str, Dict[str, Any]] = {}

    for raw_key, raw_override in folders.items():
        key = normalize_storybook_path(str(raw_key))
        label = f"folders[{key}]"

        if not isinstance(raw_override, dict):
            msg = f"Invalid field '{label}': expected object, received {type(raw_override).__name__}."
            if strict:
                raise TypeError(msg)
            warnings.append(f"{msg} Override discarded.")
            continue

        if key in out:
            msg = f"Folder override '{raw_key}' duplicates '{key}'."
            if strict:
                raise ValueError(msg)
            warnings.append(f"{msg} Later value wins.")

        override: Dict[str, Any] = {
            "name": _as_str(raw_override.get("name"), "", f"{label}.name", warnings, strict) or None,
            "icon": _as_str(raw_override.get("icon"), "", f"{label}.icon", warnings, strict) or None,
            "open": _as_bool(raw_override.get("open"), f"{label}.open", warnings, strict),
            "order": _as_list_str(raw_override.get("order"), [], f"{label}.order", warnings, strict),
        }
        for extra in sorted(set(raw_override) - set(_FOLDER_KEYS)):
            warnings.append(f"Unknown key '{extra}' in '{label}' ignored.")

        out[key] = override

    return out
