"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules, including an
in-memory filesystem whose failures can be scripted per entry.
"""

import errno
from pathlib import Path

import pytest


class FakeFilesystem:
    """In-memory FilesystemPort with scriptable failures.

    Attributes:
        dirs: Directory path -> ordered list of child paths.
        files: Paths of non-directory entries.
        locked: Entries whose deletion fails, mapped to the number of
            remaining failures (None = fail forever).
        unlistable: Directories whose listing fails.
        readonly: Entries reported as not writable; deleting a child of a
            read-only directory fails until the directory is made writable.
        deleted: Entries removed, in deletion order.
        made_writable: (path, all_bits) for every set_writable call.
    """

    def __init__(self) -> None:
        self.dirs: dict[Path, list[Path]] = {}
        self.files: set[Path] = set()
        self.locked: dict[Path, int | None] = {}
        self.unlistable: set[Path] = set()
        self.readonly: set[Path] = set()
        self.deleted: list[Path] = []
        self.made_writable: list[tuple[Path, bool]] = []
        self.delete_calls = 0

    def add_dir(self, path: str | Path) -> Path:
        p = Path(path)
        self.dirs.setdefault(p, [])
        self._link(p)
        return p

    def add_file(self, path: str | Path) -> Path:
        p = Path(path)
        self.files.add(p)
        self._link(p)
        return p

    def lock(self, path: str | Path, times: int | None = None) -> None:
        """Make deleting ``path`` fail ``times`` times (forever when None)."""
        self.locked[Path(path)] = times

    def _link(self, p: Path) -> None:
        parent = p.parent
        if parent in self.dirs and p not in self.dirs[parent]:
            self.dirs[parent].append(p)

    def exists(self, path: Path) -> bool:
        return path in self.dirs or path in self.files

    def is_directory(self, path: Path) -> bool:
        return path in self.dirs

    def list_children(self, directory: Path) -> list[Path]:
        if directory in self.unlistable:
            raise PermissionError(errno.EACCES, "Permission denied", str(directory))
        if directory not in self.dirs:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(directory))
        return list(self.dirs[directory])

    def delete_entry(self, path: Path) -> None:
        self.delete_calls += 1
        if not self.exists(path):
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path))
        if path.parent in self.readonly:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        if path in self.locked:
            remaining = self.locked[path]
            if remaining is None or remaining > 0:
                if remaining is not None:
                    self.locked[path] = remaining - 1
                raise PermissionError(errno.EBUSY, "Device or resource busy", str(path))
        if path in self.dirs:
            if self.dirs[path]:
                raise OSError(errno.ENOTEMPTY, "Directory not empty", str(path))
            del self.dirs[path]
        else:
            self.files.discard(path)
        if path.parent in self.dirs:
            self.dirs[path.parent].remove(path)
        self.deleted.append(path)

    def is_writable(self, path: Path) -> bool:
        return path not in self.readonly

    def set_writable(self, path: Path, all_bits: bool) -> None:
        self.made_writable.append((path, all_bits))
        self.readonly.discard(path)

    def parent_of(self, path: Path) -> Path | None:
        return None if path.parent == path else path.parent


class RecordingSleeper:
    """Sleeper that records requested delays and can simulate cancellation.

    Attributes:
        waits: Every delay passed to sleep().
        interrupt_on: 1-based index of the first sleep call reported as interrupted.
    """

    def __init__(self, interrupt_on: int | None = None) -> None:
        self.waits: list[float] = []
        self.interrupt_on = interrupt_on

    def sleep(self, seconds: float) -> bool:
        self.waits.append(seconds)
        return self.interrupt_on is not None and len(self.waits) >= self.interrupt_on


@pytest.fixture
def fake_fs() -> FakeFilesystem:
    """In-memory filesystem containing an empty /work directory."""
    fs = FakeFilesystem()
    fs.add_dir("/work")
    return fs


@pytest.fixture
def sleeper() -> RecordingSleeper:
    """Sleeper that never interrupts."""
    return RecordingSleeper()


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """A small real directory tree with nested files."""
    root = tmp_path / "tree"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("a")
    (root / "sub" / "b.txt").write_text("b")
    (root / "sub" / "deeper" / "c.txt").write_text("c")
    return root


@pytest.fixture
def interrupting_sleeper() -> RecordingSleeper:
    """Sleeper reporting an interruption on its first wait."""
    return RecordingSleeper(interrupt_on=1)
