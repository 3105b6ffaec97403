"""
Atomic commit of staged files to their final location.

Every file-producing operation writes into an invocation-private *staged*
path under the scratch root and only then calls :meth:`AtomicTransfer.commit`.
Readers of the final path therefore see either nothing (or the previous
version) or the complete artifact, never a partial write.

When the staged file lives on another filesystem than the target, it is
first copied to a hidden sibling of the target and that sibling is renamed,
so the visible switch is still a single ``rename(2)``.
"""

from __future__ import annotations

import errno
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Optional

import structlog

from .errors import DestinationExistsError, TransferError, ValidationError
from .utils.cleanup import default_scratch_root, safe_remove

log = structlog.get_logger()


class AtomicTransfer:
    """Stage, commit and discard files under one scratch root.

    Args:
        scratch_root: Directory for staged files; created on first use.
    """

    def __init__(self, scratch_root: Optional[Path] = None) -> None:
        self.scratch_root = Path(scratch_root) if scratch_root else default_scratch_root()

    # ------------------------------------------------------------------ #
    # staging                                                            #
    # ------------------------------------------------------------------ #
    def _root(self) -> Path:
        self.scratch_root.mkdir(parents=True, exist_ok=True)
        return self.scratch_root

    def staging_file(self, prefix: str = "stage-", suffix: str = ".part") -> Path:
        """Create and return an empty, invocation-private staged file."""
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=self._root())
        os.close(fd)
        return Path(name)

    def staging_dir(self, prefix: str = "stage-") -> Path:
        """Create and return an empty, invocation-private staged directory."""
        return Path(tempfile.mkdtemp(prefix=prefix, dir=self._root()))

    def discard(self, staged: Path) -> None:
        """Remove a staged leftover after a failed invocation."""
        safe_remove(staged, self.scratch_root)

    # ------------------------------------------------------------------ #
    # commit                                                             #
    # ------------------------------------------------------------------ #
    def commit(self, staged: Path, final: Path, *, overwrite: bool = False) -> Path:
        """Make *staged* visible at *final* with one atomic rename.

        Args:
            staged: Completely written source file (the child has exited).
            final: Target path; missing parent directories are created.
            overwrite: Replace an existing *final*. When ``False`` an existing
                target is left untouched and the commit fails.

        Returns:
            The final path.

        Raises:
            ValidationError: When *staged* does not exist or is not a file.
            DestinationExistsError: When *final* exists and *overwrite* is off.
            TransferError: When the filesystem refuses the move (unwritable
                directory, a parent path that is a regular file, ...).
        """
        staged = Path(staged)
        final = Path(final)
        if not staged.is_file():
            raise ValidationError(f"Nothing to commit: {staged} is not a file")
        if final.exists() and not overwrite:
            raise DestinationExistsError(f"{final} already exists and overwrite is disabled.")

        try:
            self._commit(staged, final, overwrite=overwrite)
        except OSError as exc:
            raise TransferError(f"Cannot commit {final}: {exc.strerror or exc}") from exc

        log.debug("transfer.commit", staged=str(staged), final=str(final), overwrite=overwrite)
        return final

    def _commit(self, staged: Path, final: Path, *, overwrite: bool) -> None:
        final.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._place(staged, final, overwrite=overwrite)
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise
            # Different filesystem: copy next to the target, then rename.
            sibling = final.parent / f".{final.name}.{uuid.uuid4().hex}.part"
            try:
                shutil.copy2(staged, sibling)
                self._place(sibling, final, overwrite=overwrite)
            finally:
                if sibling.exists():
                    sibling.unlink()
            staged.unlink()

    @staticmethod
    def _place(src: Path, final: Path, *, overwrite: bool) -> None:
        """Rename *src* onto *final*; without *overwrite* never clobber."""
        if overwrite:
            os.replace(src, final)
            return
        try:
            # link(2) fails atomically if the target appeared meanwhile.
            os.link(src, final)
        except FileExistsError:
            raise DestinationExistsError(
                f"{final} already exists and overwrite is disabled."
            ) from None
        except OSError as exc:
            if exc.errno == errno.EXDEV:
                raise
            # Filesystem without hard links.
            if final.exists():
                raise DestinationExistsError(
                    f"{final} already exists and overwrite is disabled."
                ) from None
            os.replace(src, final)
            return
        src.unlink()


__all__ = ["AtomicTransfer"]
