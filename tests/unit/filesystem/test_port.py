"""Unit tests for LocalFilesystem."""

import os
import stat
from pathlib import Path

import pytest
from deltree.filesystem.port import ALL_PERMISSION_BITS, FilesystemPort, LocalFilesystem

posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIX permissions required")


class TestLocalFilesystem:
    """Tests for the os-backed filesystem port."""

    def test_satisfies_protocol(self) -> None:
        """LocalFilesystem implements FilesystemPort."""
        assert isinstance(LocalFilesystem(), FilesystemPort)

    def test_exists(self, tmp_path: Path) -> None:
        """exists reports files and directories, not missing paths."""
        fs = LocalFilesystem()
        (tmp_path / "f").write_text("x")

        assert fs.exists(tmp_path)
        assert fs.exists(tmp_path / "f")
        assert not fs.exists(tmp_path / "missing")

    def test_dangling_symlink_exists(self, tmp_path: Path) -> None:
        """A dangling symlink is an existing entry."""
        link = tmp_path / "dangling"
        link.symlink_to(tmp_path / "nowhere")

        assert LocalFilesystem().exists(link)

    def test_is_directory_does_not_follow_symlinks(self, tmp_path: Path) -> None:
        """A symlink to a directory is not a directory."""
        target = tmp_path / "target"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target, target_is_directory=True)
        fs = LocalFilesystem()

        assert fs.is_directory(target)
        assert not fs.is_directory(link)
        assert not fs.is_directory(tmp_path / "missing")

    def test_list_children(self, tree: Path) -> None:
        """list_children returns immediate children only."""
        children = LocalFilesystem().list_children(tree)

        assert sorted(children) == sorted([tree / "a.txt", tree / "sub"])

    def test_list_children_missing_raises(self, tmp_path: Path) -> None:
        """Listing a missing directory raises an OSError."""
        with pytest.raises(FileNotFoundError):
            LocalFilesystem().list_children(tmp_path / "missing")

    def test_delete_file(self, tmp_path: Path) -> None:
        """delete_entry removes a file."""
        target = tmp_path / "f"
        target.write_text("x")

        LocalFilesystem().delete_entry(target)

        assert not target.exists()

    def test_delete_empty_directory(self, tmp_path: Path) -> None:
        """delete_entry removes an empty directory."""
        target = tmp_path / "d"
        target.mkdir()

        LocalFilesystem().delete_entry(target)

        assert not target.exists()

    def test_delete_non_empty_directory_fails(self, tree: Path) -> None:
        """delete_entry never removes a directory with contents."""
        with pytest.raises(OSError):
            LocalFilesystem().delete_entry(tree)

        assert tree.exists()

    def test_delete_symlink_keeps_target(self, tmp_path: Path) -> None:
        """Deleting a symlink to a directory removes only the link."""
        target = tmp_path / "target"
        target.mkdir()
        (target / "keep.txt").write_text("x")
        link = tmp_path / "link"
        link.symlink_to(target, target_is_directory=True)

        LocalFilesystem().delete_entry(link)

        assert not link.is_symlink()
        assert (target / "keep.txt").exists()

    def test_delete_missing_raises(self, tmp_path: Path) -> None:
        """Deleting a missing entry raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            LocalFilesystem().delete_entry(tmp_path / "missing")

    def test_parent_of(self, tmp_path: Path) -> None:
        """parent_of returns the parent, or None at a root."""
        fs = LocalFilesystem()

        assert fs.parent_of(tmp_path / "x") == tmp_path
        assert fs.parent_of(Path(tmp_path.anchor)) is None

    def test_symlink_is_always_writable(self, tmp_path: Path) -> None:
        """A link's own mode never blocks its removal."""
        link = tmp_path / "dangling"
        link.symlink_to(tmp_path / "nowhere")

        assert LocalFilesystem().is_writable(link) is True


@posix_only
class TestSetWritable:
    """Tests for LocalFilesystem.set_writable."""

    def test_owner_write_preserves_other_bits(self, tmp_path: Path) -> None:
        """Narrow repair only adds the owner-write bit."""
        target = tmp_path / "f"
        target.write_text("x")
        target.chmod(0o444)

        LocalFilesystem().set_writable(target, all_bits=False)

        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_all_bits(self, tmp_path: Path) -> None:
        """Full repair grants every standard permission bit."""
        target = tmp_path / "f"
        target.write_text("x")
        target.chmod(0o400)

        LocalFilesystem().set_writable(target, all_bits=True)

        assert stat.S_IMODE(target.stat().st_mode) == ALL_PERMISSION_BITS

    def test_symlink_target_untouched(self, tmp_path: Path) -> None:
        """Repairing a symlink never changes the link target."""
        target = tmp_path / "target"
        target.write_text("x")
        target.chmod(0o444)
        link = tmp_path / "link"
        link.symlink_to(target)

        LocalFilesystem().set_writable(link, all_bits=True)

        assert stat.S_IMODE(target.stat().st_mode) == 0o444
        target.chmod(0o644)

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        """Repairing a missing path raises an OSError."""
        with pytest.raises(OSError):
            LocalFilesystem().set_writable(tmp_path / "missing", all_bits=False)
