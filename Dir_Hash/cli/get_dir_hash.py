import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from Dir_Hash.core.errors import DirHashError
from Dir_Hash.core.logger import configure_logging
from Dir_Hash.core.models import DEFAULT_SETTINGS, HashOptions, options_from_settings
from Dir_Hash.digest.directory_hash import hash_directory


PROG = "get_dir_hash"


# ----------------------------
# Settings
# ----------------------------

def load_settings(settings_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load a JSON settings file merged over DEFAULT_SETTINGS.

    None yields a copy of the defaults. A path that does not exist
    raises FileNotFoundError; malformed JSON or a non-object top level
    raises ValueError.
    """
    merged = json.loads(json.dumps(DEFAULT_SETTINGS))

    if settings_path is None:
        return merged

    if not settings_path.is_file():
        raise FileNotFoundError(f"settings file not found: {settings_path}")

    with open(settings_path, "r", encoding="utf-8") as f:
        try:
            user_settings = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"malformed settings file {settings_path}: {exc}") from exc

    if not isinstance(user_settings, dict):
        raise ValueError(f"settings file {settings_path} must contain a JSON object")

    for k, v in user_settings.items():
        if isinstance(v, dict) and k in merged:
            merged[k].update(v)
        else:
            merged[k] = v

    return merged


def apply_arguments(settings: Dict[str, Any], args: argparse.Namespace) -> HashOptions:
    """CLI flags override the settings file; list flags are appended after it."""
    hash_settings = settings.setdefault("hash", {})
    ignore_settings = settings.setdefault("ignore", {})

    if args.follow_symlinks:
        hash_settings["follow_symlinks"] = True
    if args.include_metadata:
        hash_settings["include_metadata"] = True
    if args.case_insensitive:
        hash_settings["case_sensitive_paths"] = False
    if args.jobs is not None:
        hash_settings["max_workers"] = args.jobs
    if args.no_dotfile:
        ignore_settings["load_root_ignore_file"] = False

    options = options_from_settings(settings)
    return replace(
        options,
        ignore_patterns=options.ignore_patterns + tuple(args.ignore),
        ignore_files=options.ignore_files + tuple(Path(p) for p in args.ignore_file),
    )


# ----------------------------
# Parser
# ----------------------------

def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a value >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Print a deterministic digest of a directory tree.",
    )
    parser.add_argument("dir", nargs="?", default=".", help="Directory to hash (default: .)")
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern to ignore (can repeat)",
    )
    parser.add_argument(
        "--ignore-file",
        action="append",
        default=[],
        metavar="FILE",
        help="Load patterns from a file (can repeat)",
    )
    parser.add_argument("--follow-symlinks", action="store_true", help="Follow symlinks while walking")
    parser.add_argument(
        "--include-metadata",
        action="store_true",
        help="Include basic metadata (mode + mtime) in the hash",
    )
    parser.add_argument(
        "--no-dotfile",
        action="store_true",
        help="Do not auto-load .get_dir_hash_ignore from DIR",
    )
    parser.add_argument(
        "--case-insensitive",
        action="store_true",
        help="Compare and frame paths case-insensitively",
    )
    parser.add_argument("--jobs", type=_positive_int, help="Concurrent file reads (default: 4)")
    parser.add_argument("--config", type=Path, help="JSON settings file")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")
    return parser


# ----------------------------
# CLI entrypoint
# ----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING)

    try:
        settings = load_settings(args.config)
        options = apply_arguments(settings, args)
    except (OSError, ValueError, TypeError, KeyError) as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return 2

    directory = Path(args.dir)

    try:
        digest = hash_directory(directory, options)
    except DirHashError as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return 1

    timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    print(f"{digest}  {directory}")
    print(f"ok  {timestamp}  {directory}", file=sys.stderr)
    return 0
