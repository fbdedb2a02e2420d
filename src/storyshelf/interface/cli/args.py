from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the config validator.
"""

import argparse
from typing import Any, Dict, List, Optional

from storyshelf.domain.constants import APP_VERSION, DEFAULT_MAX_PREVIEW_SESSIONS

COMMANDS = ("tree", "list", "show", "check", "serve")

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the storyshelf CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="storyshelf",
        description="Browse, validate and preview a storybook content directory.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    # --- Configuration sources ---
    p.add_argument(
        "-c", "--config",
        dest="config_file",
        default=None,
        help="JSON configuration file.",
    )
    p.add_argument(
        "-p", "--content-path",
        dest="content_path",
        default=None,
        help="Directory holding *.story.json and *.index.json files (overrides the config file).",
    )
    p.add_argument(
        "--title",
        dest="title",
        default=None,
        help="Storybook title.",
    )
    p.add_argument(
        "--themes",
        dest="themes",
        default=None,
        help="Comma-separated theme names.",
    )

    # --- Diagnostics ---
    p.add_argument("--debug", action="store_true", help="Enable debug logging.")
    p.add_argument("--log-file", dest="log_file", default=None, help="Also write logs to this file.")
    p.add_argument("--dump-config", action="store_true", help="Print the resolved configuration and exit.")

    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    tree_p = sub.add_parser("tree", help="Print the content tree.")
    tree_p.add_argument("--paths", action="store_true", help="Show the storybook path of every entry.")

    list_p = sub.add_parser("list", help="List stories (or every entry with --all).")
    list_p.add_argument("--all", dest="all_entries", action="store_true", help="Include folders.")
    list_p.add_argument("--json", dest="json_output", action="store_true", help="Print JSON.")

    show_p = sub.add_parser("show", help="Load one story and print it as JSON.")
    show_p.add_argument("story_path", help="Storybook path, e.g. /components/button")
    show_p.add_argument("--no-validate", dest="validate", action="store_false", help="Skip schema validation.")

    sub.add_parser("check", help="Load and validate every story.")

    serve_p = sub.add_parser("serve", help="Run the preview web server.")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=4000)
    serve_p.add_argument(
        "--max-sessions",
        type=int,
        default=DEFAULT_MAX_PREVIEW_SESSIONS,
        help="Open preview sessions kept before the least recently used is dropped.",
    )

    return p


# -----------------------------------------------------------------------------
# MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Map parsed arguments to raw configuration keys.

    Unset options map to None so the merge keeps the file/default values.
    """
    return {
        "content_path": args.content_path,
        "title": args.title,
        "themes": _split_csv(args.themes),
    }


def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]
