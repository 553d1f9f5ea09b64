import os
from pathlib import Path

import pytest


class ListedEntries:
    """Stand-in for an ``os.scandir`` iterator over an already-read listing."""

    def __init__(self, entries):
        self.entries = entries
        self.closed = False

    def __iter__(self):
        return iter(self.entries)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_text("alpha", encoding="utf-8")
    (root / "sub").mkdir()
    (root / "sub" / "b.txt").write_text("beta", encoding="utf-8")
    return root


@pytest.fixture
def listed_scandir(monkeypatch):
    """Patch ``os.scandir`` to read each listing eagerly, optionally reordered.

    Returns the list of ``ListedEntries`` handed out, so tests can check
    that every handle was closed.
    """
    real_scandir = os.scandir
    handed_out: list[ListedEntries] = []

    def install(transform=None):
        def fake_scandir(path):
            with real_scandir(path) as it:
                entries = list(it)
            if transform is not None:
                entries = transform(path, entries)
            listed = ListedEntries(entries)
            handed_out.append(listed)
            return listed

        monkeypatch.setattr(os, "scandir", fake_scandir)
        return handed_out

    return install
