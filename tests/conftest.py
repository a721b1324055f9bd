import os
from pathlib import Path
from typing import Dict

import pytest


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """
    Create `files` (relative path -> text content) under `root`.
    Parent directories are created as needed.
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return root


_real_scandir = os.scandir


class ReversedScandir:
    """os.scandir stand-in that hands entries back in reverse order."""

    def __init__(self, path):
        with _real_scandir(path) as it:
            self._entries = list(it)[::-1]

    def __iter__(self):
        return iter(self._entries)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def close(self):
        pass


class WarningCollector:
    def __init__(self):
        self.messages = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def warnings_sink():
    return WarningCollector()


@pytest.fixture(autouse=True)
def isolate_cwd(tmp_path_factory, monkeypatch):
    """
    Run every test from an empty scratch directory so relative
    ignore-file paths never pick up files from the repository.
    """
    cwd = tmp_path_factory.mktemp("cwd")
    monkeypatch.chdir(cwd)
