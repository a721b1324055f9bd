# Auto-generated __init__.py

from . import errors
from .errors import DirHashError
from .errors import DirHashIOError
from .errors import InvalidPatternError
from . import logger
from .logger import configure_logging
from .logger import default_warning_sink
from .logger import log
from . import models
from .models import CandidateEntry
from .models import DEFAULT_SETTINGS
from .models import HashOptions
from .models import ROOT_IGNORE_FILENAME
from .models import options_from_settings
from . import paths
from .paths import normalize_path
from .paths import normalize_relative
from . import patterns
from .patterns import PatternSet
from .patterns import build_pattern_set
from .patterns import compile_patterns
from .patterns import glob_to_regex
from .patterns import load_pattern_file
from . import scanner
from .scanner import enumerate_files
from .scanner import order_entries
from .scanner import scan_files

__all__ = [
    "errors",
    "logger",
    "models",
    "paths",
    "patterns",
    "scanner",
    "CandidateEntry",
    "DEFAULT_SETTINGS",
    "DirHashError",
    "DirHashIOError",
    "HashOptions",
    "InvalidPatternError",
    "PatternSet",
    "ROOT_IGNORE_FILENAME",
    "build_pattern_set",
    "compile_patterns",
    "configure_logging",
    "default_warning_sink",
    "enumerate_files",
    "glob_to_regex",
    "load_pattern_file",
    "log",
    "normalize_path",
    "normalize_relative",
    "options_from_settings",
    "order_entries",
    "scan_files",
]
