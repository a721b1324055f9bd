from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Dict, Any, List


# ============================================================
# Constants
# ============================================================

ROOT_IGNORE_FILENAME = ".get_dir_hash_ignore"

DEFAULT_SETTINGS = {
    "hash": {
        "follow_symlinks": False,
        "include_metadata": False,
        "case_sensitive_paths": True,
        "max_workers": 4,
    },
    "ignore": {
        "patterns": [],
        "files": [],
        "load_root_ignore_file": True,
    },
}


@dataclass(frozen=True)
class HashOptions:
    """
    Immutable configuration for one hashing run.

    Built once by the caller and never mutated while hashing:
    - list-like fields are stored as tuples
    - paths in ignore_files are kept as given (relative paths
      resolve against the current working directory)
    """
    follow_symlinks: bool = False
    include_metadata: bool = False
    case_sensitive_paths: bool = True
    ignore_patterns: Tuple[str, ...] = field(default_factory=tuple)
    ignore_files: Tuple[Path, ...] = field(default_factory=tuple)
    load_root_ignore_file: bool = True

    # Concurrent inner content-hash jobs; 1 hashes strictly in sequence
    max_workers: int = 4

    def __post_init__(self):
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "ignore_patterns", tuple(self.ignore_patterns))
        object.__setattr__(
            self,
            "ignore_files",
            tuple(Path(p) for p in self.ignore_files),
        )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")


@dataclass(frozen=True)
class CandidateEntry:
    """
    One non-ignored regular file found during the walk.

    `rel_path` is the normalized, root-relative, `/`-separated identity
    used for ordering and framing. `path` is where the bytes live.
    """
    rel_path: str
    path: Path


def _list_setting(section: Dict[str, Any], key: str) -> List[Any]:
    value = section[key]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"settings 'ignore.{key}' must be a list, got {type(value).__name__}")
    return list(value)


def options_from_settings(settings: Dict[str, Any]) -> HashOptions:
    """
    Build HashOptions from a settings dict shaped like DEFAULT_SETTINGS.

    Missing sections or keys fall back to the defaults.
    A non-list `ignore.patterns` or `ignore.files` raises ValueError.
    """
    hash_settings = {**DEFAULT_SETTINGS["hash"], **(settings.get("hash") or {})}
    ignore_settings = {**DEFAULT_SETTINGS["ignore"], **(settings.get("ignore") or {})}

    return HashOptions(
        follow_symlinks=bool(hash_settings["follow_symlinks"]),
        include_metadata=bool(hash_settings["include_metadata"]),
        case_sensitive_paths=bool(hash_settings["case_sensitive_paths"]),
        max_workers=int(hash_settings["max_workers"]),
        ignore_patterns=tuple(str(p) for p in _list_setting(ignore_settings, "patterns")),
        ignore_files=tuple(Path(p) for p in _list_setting(ignore_settings, "files")),
        load_root_ignore_file=bool(ignore_settings["load_root_ignore_file"]),
    )


def root_ignore_file(root: Path) -> Optional[Path]:
    """Return the well-known ignore file under `root`, if it is a regular file."""
    candidate = root / ROOT_IGNORE_FILENAME
    return candidate if candidate.is_file() else None
