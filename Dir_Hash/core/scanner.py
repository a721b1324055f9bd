import os
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from Dir_Hash.core.errors import DirHashIOError
from Dir_Hash.core.logger import default_warning_sink
from Dir_Hash.core.models import CandidateEntry
from Dir_Hash.core.paths import normalize_path
from Dir_Hash.core.patterns import PatternSet


WarningSink = Callable[[str], None]

_ASCII_FOLD = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "abcdefghijklmnopqrstuvwxyz",
)


# ============================================================
# Tree enumeration
# ============================================================

def _dir_identity(path: str) -> Tuple[int, int]:
    st = os.stat(path)
    return st.st_dev, st.st_ino


def _open_root(root: Path):
    """Validate the root up front; an unreadable root is fatal."""
    if not root.exists():
        raise DirHashIOError(root, "root directory does not exist")
    if not root.is_dir():
        raise DirHashIOError(root, "root is not a directory")
    try:
        return os.scandir(root)
    except OSError as exc:
        raise DirHashIOError(root, "cannot list root directory") from exc


def enumerate_files(
    root: Path,
    follow_symlinks: bool,
    matcher: PatternSet,
    on_warning: Optional[WarningSink] = None,
) -> Iterator[CandidateEntry]:
    """
    Walk `root` and yield every non-ignored regular file.

    - symlinks are followed only when `follow_symlinks` is set
    - directories are descended, never yielded
    - entries that cannot be read are reported to `on_warning`
      and skipped; the walk continues
    - the yield order is whatever the filesystem returns; use
      order_entries() for a stable order
    """
    warn = on_warning or default_warning_sink()

    # Each stack item pairs an open scandir iterator (or a directory path)
    # with the identities of that directory and all of its ancestors
    root_chain: FrozenSet[Tuple[int, int]] = frozenset()
    if follow_symlinks:
        root_chain = frozenset([_dir_identity(str(root))])
    stack: List[Tuple[object, FrozenSet[Tuple[int, int]]]] = [(_open_root(root), root_chain)]

    while stack:
        item, ancestors = stack.pop()

        if isinstance(item, str):
            try:
                item = os.scandir(item)
            except OSError as exc:
                warn(f"skipping entry: {exc}")
                continue

        with item as entries:
            for entry in entries:
                try:
                    is_dir = entry.is_dir(follow_symlinks=follow_symlinks)
                    is_file = not is_dir and entry.is_file(follow_symlinks=follow_symlinks)
                except OSError as exc:
                    warn(f"skipping entry: {exc}")
                    continue

                if is_dir:
                    chain = ancestors
                    if follow_symlinks:
                        try:
                            identity = _dir_identity(entry.path)
                        except OSError as exc:
                            warn(f"skipping entry: {exc}")
                            continue
                        # Only a directory that is its own ancestor is a loop
                        if identity in ancestors:
                            warn(f"skipping entry: filesystem loop at {entry.path}")
                            continue
                        chain = ancestors | {identity}
                    stack.append((entry.path, chain))
                    continue

                if not is_file:
                    if follow_symlinks and entry.is_symlink() and not os.path.exists(entry.path):
                        warn(f"skipping entry: broken symlink {entry.path}")
                    continue

                rel = normalize_path(root, entry.path)
                if not rel:
                    continue

                if matcher.matches(rel):
                    continue

                yield CandidateEntry(rel_path=rel, path=Path(entry.path))


# ============================================================
# Deterministic ordering
# ============================================================

def ascii_fold(value: str) -> str:
    """Lowercase ASCII letters only; other characters are left alone."""
    return value.translate(_ASCII_FOLD)


def order_entries(
    entries: Iterable[CandidateEntry],
    case_sensitive: bool = True,
) -> List[CandidateEntry]:
    """
    Sort candidates by normalized path into one total order.

    Case-insensitive mode compares ASCII-folded paths and falls back to
    the raw path, so names differing only in case still sort the same
    way on every run.
    """
    if case_sensitive:
        return sorted(entries, key=lambda e: e.rel_path)
    return sorted(entries, key=lambda e: (ascii_fold(e.rel_path), e.rel_path))


# ============================================================
# Enumerate + order in one call
# ============================================================

def scan_files(
    root: Path,
    matcher: PatternSet,
    *,
    follow_symlinks: bool = False,
    case_sensitive: bool = True,
    on_warning: Optional[WarningSink] = None,
) -> List[CandidateEntry]:
    """Return the ordered file list for `root`."""
    return order_entries(
        enumerate_files(root, follow_symlinks, matcher, on_warning=on_warning),
        case_sensitive=case_sensitive,
    )
