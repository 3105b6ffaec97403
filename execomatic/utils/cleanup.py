"""Guarded deletion helpers for scratch files and directories.

Every helper refuses to touch a path that does not live under the designated
scratch root, so a bad argument can never destroy caller data.

The design goals are:
    * **Containment** – paths are resolved before the scratch-root check, so
      ``..`` segments or symlinks cannot escape it.
    * **Informative logging** – each attempted deletion is emitted at *DEBUG*
      or *ERROR* level through the module logger.
    * **Dry-run support** – ``dry=True`` logs what *would* be removed.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from ..errors import ValidationError

log = logging.getLogger(__name__)


def default_scratch_root() -> Path:
    """Return ``<system tmp>/execomatic`` (not created)."""
    return Path(tempfile.gettempdir()) / "execomatic"


def is_under(path: Path, root: Path) -> bool:
    """Return ``True`` when *path* resolves to *root* itself or a descendant."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


# ─────────────────────────────────────────────────────────────────────────────
# _rm_file / _rm_dir – internal primitives
# ─────────────────────────────────────────────────────────────────────────────

def _rm_file(path: Path, *, dry: bool) -> bool:
    """Unlink *path*; return *True* when it really vanished."""
    if dry:
        log.info("[dry-run] would delete %s", path)
        return False
    try:
        path.unlink()
        log.debug("Deleted %s", path)
        return True
    except OSError as exc:
        log.error("Could not delete %s: %s", path, exc)
        return False


def _rm_dir(path: Path, *, dry: bool) -> bool:
    """Recursively remove *path* via :pyfunc:`shutil.rmtree`."""
    if dry:
        log.info("[dry-run] would delete directory %s", path)
        return False
    try:
        shutil.rmtree(path)
        log.debug("Deleted directory %s", path)
        return True
    except OSError as exc:
        log.error("Could not delete %s: %s", path, exc)
        return False

# ─────────────────────────────────────────────────────────────────────────────
# Public helpers
# ─────────────────────────────────────────────────────────────────────────────

def safe_remove(path: Path, scratch_root: Optional[Path] = None, *, dry: bool = False) -> bool:
    """Delete *path* (file or directory tree) if it lies under *scratch_root*.

    Args:
        path: File or directory to remove. Missing paths are a no-op.
        scratch_root: Directory that bounds what may be deleted; defaults to
            :func:`default_scratch_root`.
        dry: Log the action without deleting.

    Returns:
        ``True`` when something was deleted.

    Raises:
        ValidationError: When *path* is outside *scratch_root* (or is the
            root itself).
    """
    root = (scratch_root or default_scratch_root()).resolve()
    if not is_under(path, root) or path.resolve() == root:
        raise ValidationError(
            f"Invalid attempt to remove a file/directory outside the scratch root {root}: {path}"
        )
    if not path.exists() and not path.is_symlink():
        return False
    if path.is_dir() and not path.is_symlink():
        return _rm_dir(path, dry=dry)
    return _rm_file(path, dry=dry)


__all__ = ["default_scratch_root", "is_under", "safe_remove"]
