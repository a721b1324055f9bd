# Auto-generated __init__.py

from . import conftest
from .conftest import ReversedScandir
from .conftest import WarningCollector
from .conftest import write_tree
from . import test_cli
from . import test_directory_hash
from . import test_metadata
from .test_metadata import fake_stat
from . import test_models
from . import test_paths
from . import test_patterns
from . import test_scanner
from .test_scanner import rel_paths

__all__ = [
    "conftest",
    "test_cli",
    "test_directory_hash",
    "test_metadata",
    "test_models",
    "test_paths",
    "test_patterns",
    "test_scanner",
    "ReversedScandir",
    "WarningCollector",
    "fake_stat",
    "rel_paths",
    "write_tree",
]
