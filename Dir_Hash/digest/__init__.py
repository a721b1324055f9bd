# Auto-generated __init__.py

from . import directory_hash
from .directory_hash import DOMAIN_TAG
from .directory_hash import compose_digest_async
from .directory_hash import hash_directory
from .directory_hash import hash_directory_async
from .directory_hash import hash_file_content
from . import metadata
from .metadata import encode_metadata
from .metadata import read_metadata_frame

__all__ = [
    "directory_hash",
    "metadata",
    "DOMAIN_TAG",
    "compose_digest_async",
    "encode_metadata",
    "hash_directory",
    "hash_directory_async",
    "hash_file_content",
    "read_metadata_frame",
]
