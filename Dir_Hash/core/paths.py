from pathlib import PurePath
from typing import Iterable, Optional, Union


def _resolve_parts(parts: Iterable[str]) -> str:
    kept = []
    for part in parts:
        if part in ("", "."):
            continue
        if part == "..":
            if kept:
                kept.pop()
            continue
        kept.append(part)
    return "/".join(kept)


def normalize_path(
    root: Union[str, PurePath],
    absolute: Union[str, PurePath],
) -> Optional[str]:
    """
    Convert a filesystem path under `root` into a root-relative,
    `/`-separated string.

    `.` components are dropped and `..` pops the previous component.
    Resolution is purely lexical: the filesystem is never consulted.
    Returns None when `absolute` is not lexically inside `root`.
    """
    try:
        rel = PurePath(absolute).relative_to(PurePath(root))
    except ValueError:
        return None
    return _resolve_parts(rel.parts)


def normalize_relative(rel_path: str) -> str:
    """
    Normalize an already root-relative, `/`-separated path string.

    Idempotent: a normalized path comes back unchanged.
    """
    return _resolve_parts(rel_path.split("/"))
