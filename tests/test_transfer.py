import errno
from pathlib import Path

import pytest

from execomatic.errors import DestinationExistsError, TransferError, ValidationError
from execomatic.transfer import AtomicTransfer
from execomatic.utils.cleanup import is_under, safe_remove


@pytest.fixture
def transfer(tmp_path: Path) -> AtomicTransfer:
    return AtomicTransfer(tmp_path / "scratch")


def test_staging_lives_under_scratch_root(transfer: AtomicTransfer):
    """Verify staged files and directories are created under the scratch root."""
    staged = transfer.staging_file("export-")
    stage_dir = transfer.staging_dir("wget-")
    assert staged.is_file() and staged.stat().st_size == 0
    assert is_under(staged, transfer.scratch_root)
    assert stage_dir.is_dir() and is_under(stage_dir, transfer.scratch_root)


def test_commit_moves_staged_file(transfer: AtomicTransfer, tmp_path: Path):
    """Verify commit places the content and removes the staged file."""
    staged = transfer.staging_file()
    staged.write_text("rows\n")
    final = tmp_path / "out" / "rows.txt"
    assert transfer.commit(staged, final) == final
    assert final.read_text() == "rows\n"
    assert not staged.exists()


def test_commit_without_overwrite_keeps_existing(transfer: AtomicTransfer, tmp_path: Path):
    """Verify an existing target is untouched when overwrite is disabled."""
    final = tmp_path / "rows.txt"
    final.write_text("old")
    staged = transfer.staging_file()
    staged.write_text("new")
    with pytest.raises(DestinationExistsError):
        transfer.commit(staged, final)
    assert final.read_text() == "old"
    transfer.discard(staged)
    assert not staged.exists()


def test_commit_with_overwrite_replaces(transfer: AtomicTransfer, tmp_path: Path):
    """Verify overwrite replaces the target in one step."""
    final = tmp_path / "rows.txt"
    final.write_text("old")
    staged = transfer.staging_file()
    staged.write_text("new")
    transfer.commit(staged, final, overwrite=True)
    assert final.read_text() == "new"


def test_commit_across_filesystems(transfer: AtomicTransfer, tmp_path: Path, monkeypatch):
    """Verify the sibling copy path is used when a rename would cross devices."""
    real_place = AtomicTransfer._place
    calls = []

    def _place(src, final, *, overwrite):
        calls.append(src)
        if len(calls) == 1:
            raise OSError(errno.EXDEV, "Invalid cross-device link")
        real_place(src, final, overwrite=overwrite)

    monkeypatch.setattr(AtomicTransfer, "_place", staticmethod(_place))
    staged = transfer.staging_file()
    staged.write_text("data")
    final = tmp_path / "dest" / "data.txt"
    transfer.commit(staged, final)

    assert final.read_text() == "data"
    assert not staged.exists()
    assert calls[1].parent == final.parent
    assert sorted(p.name for p in final.parent.iterdir()) == ["data.txt"]


def test_commit_below_a_regular_file_fails_cleanly(transfer: AtomicTransfer, tmp_path: Path):
    """Verify filesystem refusals surface as TransferError and keep the staged file."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    staged = transfer.staging_file()
    staged.write_text("rows\n")
    with pytest.raises(TransferError, match="Cannot commit"):
        transfer.commit(staged, blocker / "rows.txt")
    assert staged.read_text() == "rows\n"
    assert blocker.read_text() == "not a directory"


def test_commit_requires_a_staged_file(transfer: AtomicTransfer, tmp_path: Path):
    """Verify committing a missing staged file is rejected."""
    with pytest.raises(ValidationError):
        transfer.commit(tmp_path / "missing.part", tmp_path / "out.txt")


def test_safe_remove_refuses_paths_outside_scratch(tmp_path: Path):
    """Verify deletion outside the scratch root is refused."""
    root = tmp_path / "scratch"
    root.mkdir()
    victim = tmp_path / "precious.txt"
    victim.write_text("keep")
    with pytest.raises(ValidationError):
        safe_remove(victim, root)
    with pytest.raises(ValidationError):
        safe_remove(root / ".." / "precious.txt", root)
    with pytest.raises(ValidationError):
        safe_remove(root, root)
    assert victim.exists()


def test_safe_remove_deletes_inside_scratch(tmp_path: Path):
    """Verify files and trees under the scratch root are removed."""
    root = tmp_path / "scratch"
    tree = root / "wget-1"
    tree.mkdir(parents=True)
    (tree / "f.txt").write_text("x")
    assert safe_remove(tree / "f.txt", root, dry=True) is False
    assert (tree / "f.txt").exists()
    assert safe_remove(tree, root) is True
    assert not tree.exists()
    assert safe_remove(tree, root) is False
