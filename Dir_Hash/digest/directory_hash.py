import asyncio
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from blake3 import blake3

from Dir_Hash.core.errors import DirHashIOError
from Dir_Hash.core.logger import default_warning_sink, log
from Dir_Hash.core.models import CandidateEntry, HashOptions
from Dir_Hash.core.patterns import build_pattern_set
from Dir_Hash.core.scanner import scan_files
from Dir_Hash.digest.metadata import read_metadata_frame


DOMAIN_TAG = b"get_dir_hash-v1\0"
FILE_RECORD_TAG = b"F\0"
CHUNK_SIZE = 64 * 1024


# ============================================================
# Per-file content hash
# ============================================================

def hash_file_content(path: Path, chunk_size: int = CHUNK_SIZE) -> bytes:
    """Stream `path` through a fresh BLAKE3 hasher and return the raw digest."""
    inner = blake3()
    try:
        with open(path, "rb") as handle:
            while True:
                chunk = handle.read(chunk_size)
                if not chunk:
                    break
                inner.update(chunk)
    except OSError as exc:
        raise DirHashIOError(path, "cannot read file") from exc
    return inner.digest()


def _frame_path(rel_path: str, case_sensitive: bool) -> bytes:
    if not case_sensitive:
        rel_path = rel_path.lower()
    return rel_path.encode("utf-8", "surrogateescape")


def _resolve_root(root: Path, warn: Callable[[str], None]) -> Path:
    """Resolve `root`; on failure warn and keep the path as given."""
    try:
        return root.resolve()
    except OSError as exc:
        warn(f"cannot resolve root {root}: {exc}")
        return root


# ============================================================
# Digest composition
# ============================================================

async def compose_digest_async(
    ordered: Sequence[CandidateEntry],
    *,
    include_metadata: bool = False,
    case_sensitive: bool = True,
    max_workers: int = 4,
) -> str:
    """
    Fold an ordered file list into the outer digest.

    Content hashes may run on up to `max_workers` threads, but the outer
    hasher is always updated in list order. The first read failure
    cancels the remaining jobs and propagates; no partial digest is
    ever returned.
    """
    out = blake3()
    out.update(DOMAIN_TAG)

    if not ordered:
        return out.hexdigest()

    semaphore = asyncio.Semaphore(max_workers)

    async def content_digest(entry: CandidateEntry) -> bytes:
        async with semaphore:
            return await asyncio.to_thread(hash_file_content, entry.path)

    jobs = [asyncio.ensure_future(content_digest(entry)) for entry in ordered]

    try:
        for entry, job in zip(ordered, jobs):
            digest = await job

            out.update(FILE_RECORD_TAG)
            out.update(_frame_path(entry.rel_path, case_sensitive))
            out.update(b"\0")
            out.update(digest)

            if include_metadata:
                # Best-effort: a file whose stat fails contributes no frame
                frame = read_metadata_frame(entry.path)
                if frame is not None:
                    out.update(frame)
    except BaseException:
        for job in jobs:
            job.cancel()
        await asyncio.gather(*jobs, return_exceptions=True)
        raise

    return out.hexdigest()


# ============================================================
# ASYNC IMPLEMENTATION (single source of truth)
# ============================================================

async def hash_directory_async(
    root: Union[str, Path],
    options: Optional[HashOptions] = None,
    *,
    on_warning: Optional[Callable[[str], None]] = None,
) -> str:
    """
    Compute the deterministic digest of the tree under `root`.

    - Ignore patterns are compiled before any traversal
    - Unreadable walk entries are reported to `on_warning` and skipped
    - Returns 64 lowercase hex characters
    """
    options = options or HashOptions()
    warn = on_warning or default_warning_sink()

    root = _resolve_root(Path(root), warn)

    matcher = build_pattern_set(root, options, on_warning=warn)

    ordered: List[CandidateEntry] = scan_files(
        root,
        matcher,
        follow_symlinks=options.follow_symlinks,
        case_sensitive=options.case_sensitive_paths,
        on_warning=warn,
    )
    log("DEBUG", "digest", f"Hashing {len(ordered)} file(s) under {root}")

    return await compose_digest_async(
        ordered,
        include_metadata=options.include_metadata,
        case_sensitive=options.case_sensitive_paths,
        max_workers=options.max_workers,
    )


# ============================================================
# SYNC WRAPPER
# ============================================================

def hash_directory(
    root: Union[str, Path],
    options: Optional[HashOptions] = None,
    *,
    on_warning: Optional[Callable[[str], None]] = None,
):
    """
    Sync wrapper for hash_directory_async.

    Returns the digest when no event loop is running; inside a running
    loop it returns a task the caller must await.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop → safe to create one
        return asyncio.run(
            hash_directory_async(root, options, on_warning=on_warning)
        )
    else:
        return loop.create_task(
            hash_directory_async(root, options, on_warning=on_warning)
        )
