import os
import stat
import struct
from pathlib import Path
from typing import Optional

METADATA_TAG = b"\0M\0"

# No POSIX permission bits on Windows; a read-only flag is encoded instead
HAS_POSIX_MODE = os.name != "nt"

NANOS_PER_SECOND = 1_000_000_000


def encode_metadata(st: os.stat_result, posix_mode: bool = HAS_POSIX_MODE) -> bytes:
    """
    Encode permission bits and mtime into a fixed, platform-neutral frame.

    Layout:
    - 3-byte tag b"\\0M\\0"
    - mode as u32 little-endian, or one read-only byte without POSIX modes
    - mtime as u64 seconds + u32 nanoseconds (little-endian), omitted
      when the timestamp is before the Unix epoch
    """
    parts = [METADATA_TAG]

    if posix_mode:
        parts.append(struct.pack("<I", st.st_mode & 0xFFFFFFFF))
    else:
        readonly = not (st.st_mode & stat.S_IWRITE)
        parts.append(struct.pack("<B", 1 if readonly else 0))

    mtime_ns = getattr(st, "st_mtime_ns", None)
    if mtime_ns is not None and mtime_ns >= 0:
        secs, nanos = divmod(mtime_ns, NANOS_PER_SECOND)
        parts.append(struct.pack("<QI", secs, nanos))

    return b"".join(parts)


def read_metadata_frame(path: Path) -> Optional[bytes]:
    """Stat `path` (following symlinks) and encode it; None if stat fails."""
    try:
        st = os.stat(path)
    except OSError:
        return None
    return encode_metadata(st)
