# Auto-generated __init__.py

from . import get_dir_hash
from .get_dir_hash import build_parser
from .get_dir_hash import load_settings
from .get_dir_hash import main

__all__ = [
    "get_dir_hash",
    "build_parser",
    "load_settings",
    "main",
]
