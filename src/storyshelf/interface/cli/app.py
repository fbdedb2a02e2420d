from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, JSON file, command-line overrides), storybook build and command
dispatch.

Exit codes: 0 success, 1 build or validation failure, 2 bad input or
unknown story.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from storyshelf.core.backend import StorybookBackend
from storyshelf.core.config_validator import validate_config
from storyshelf.core.content.tree_renderer import render_content_tree
from storyshelf.domain.config import config_from_dict, get_default_config, load_config_file
from storyshelf.domain.errors import (
    ConfigurationError,
    ContentTreeError,
    StoryLoadError,
    StoryValidationError,
)
from storyshelf.infra.logging import LoggingConfig, configure_logging, get_logger
from storyshelf.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig.for_cli(debug=args.debug, log_file=args.log_file))

    # 1. Resolve configuration hierarchy
    try:
        base_conf = load_config_file(args.config_file) if args.config_file else get_default_config()
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if not args.command:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    try:
        config = config_from_dict(clean_conf)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    # 2. Build the storybook once
    try:
        backend = StorybookBackend(config)
    except ContentTreeError as e:
        logger.error(f"Content tree build failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 3. Command dispatch
    handlers = {
        "tree": _cmd_tree,
        "list": _cmd_list,
        "show": _cmd_show,
        "check": _cmd_check,
        "serve": _cmd_serve,
    }
    return handlers[args.command](backend, args)


# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _cmd_tree(backend: StorybookBackend, args: Any) -> int:
    print(backend.config("title"))
    for line in render_content_tree(backend.content_tree(), show_paths=args.paths):
        print(line)
    return EXIT_OK


def _cmd_list(backend: StorybookBackend, args: Any) -> int:
    entries = backend.flat_list() if args.all_entries else backend.leaves()
    if args.json_output:
        # Folder dicts would repeat their subtree; list entries shallowly
        payload = [{k: v for k, v in e.to_dict().items() if k != "children"} for e in entries]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        for entry in entries:
            print(entry.path)
    return EXIT_OK


def _cmd_show(backend: StorybookBackend, args: Any) -> int:
    try:
        story = backend.load_story(args.story_path, validate=args.validate)
    except (StoryValidationError, StoryLoadError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if story is None:
        print(f"ERROR: unknown story {args.story_path!r}", file=sys.stderr)
        return EXIT_USAGE

    print(json.dumps(asdict(story), ensure_ascii=False, indent=2, default=str))
    return EXIT_OK


def _cmd_check(backend: StorybookBackend, args: Any) -> int:
    failures: Dict[str, str] = {}
    for leaf in backend.leaves():
        try:
            backend.load_story(leaf.path)
        except (StoryValidationError, StoryLoadError) as e:
            failures[leaf.path] = str(e)

    for path, error in failures.items():
        print(f"FAIL {path}: {error}")

    total = len(backend.leaves())
    print(f"{total - len(failures)}/{total} stories valid")
    return EXIT_FAILURE if failures else EXIT_OK


def _cmd_serve(backend: StorybookBackend, args: Any) -> int:
    import uvicorn

    from storyshelf.interface.web.app import create_app

    logger.warning(f"Serving '{backend.config('title')}' on http://{args.host}:{args.port}")
    uvicorn.run(create_app(backend, max_sessions=args.max_sessions), host=args.host, port=args.port)
    return EXIT_OK


# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of non-None overrides into the base configuration."""
    out = dict(base)
    for k, v in overrides.items():
        if v is not None:
            out[k] = v
    return out


if __name__ == "__main__":
    sys.exit(main())
