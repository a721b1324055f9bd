# Auto-generated __init__.py

from .core import HashOptions
from .core import DirHashError
from .core import DirHashIOError
from .core import InvalidPatternError
from .digest import hash_directory
from .digest import hash_directory_async

__all__ = [
    "DirHashError",
    "DirHashIOError",
    "HashOptions",
    "InvalidPatternError",
    "hash_directory",
    "hash_directory_async",
]
