"""
ZIP extraction and creation with staged, atomically committed outputs.

Archives are handled in-process with :mod:`zipfile`; no external program is
involved.  Extraction flattens entry paths: every member lands directly in
the destination directory under its lower-cased basename, which also keeps
``../`` members from escaping the destination.
"""

from __future__ import annotations

import shutil
import time
import zipfile
from pathlib import Path
from typing import Optional

import structlog

from .errors import ValidationError
from .transfer import AtomicTransfer
from .types import StatusReport

log = structlog.get_logger()

_CHUNK = 64 * 1024


def extract_zip(
    archive: Path,
    destination: Optional[Path],
    transfer: AtomicTransfer,
) -> StatusReport:
    """Extract every file member of *archive* into *destination*.

    Each member is first streamed into a staged file and then committed to
    ``destination/<basename>``, replacing a previous file of the same name.

    Args:
        archive: ``.zip`` file to read.
        destination: Target directory; ``None`` extracts into a new scratch
            directory whose path is reported under ``Destination``.
        transfer: Staging/commit helper.

    Returns:
        StatusReport with ``Source``, ``Size``, ``Files``, ``Destination`` and
        ``Duration``.

    Raises:
        ValidationError: When *archive* is not a readable ZIP file.
    """
    start = time.monotonic()
    report = StatusReport()
    report["Source"] = archive.name
    report["Size"] = archive.stat().st_size

    target_dir = destination if destination is not None else transfer.staging_dir("zip-")
    target_dir.mkdir(parents=True, exist_ok=True)

    files = 0
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                name = Path(info.filename.replace("\\", "/")).name.lower()
                if not name:
                    continue
                if "/" in info.filename:
                    log.debug("archive.flatten", member=info.filename)
                staged = transfer.staging_file("unzip-")
                try:
                    with zf.open(info) as src, open(staged, "wb") as dst:
                        shutil.copyfileobj(src, dst, _CHUNK)
                    transfer.commit(staged, target_dir / name, overwrite=True)
                except BaseException:
                    transfer.discard(staged)
                    raise
                files += 1
    except zipfile.BadZipFile as exc:
        raise ValidationError(f"{archive} is not a readable zip file: {exc}") from exc

    report["Files"] = files
    report["Destination"] = target_dir
    report["Duration"] = int((time.monotonic() - start) * 1000)
    log.info("archive.extracted", **report)
    return report


def create_zip(
    source_dir: Path,
    destination: Optional[Path],
    transfer: AtomicTransfer,
    *,
    overwrite: bool = False,
) -> StatusReport:
    """Pack the regular files directly inside *source_dir* into a ZIP archive.

    The archive is written to a staged file and committed once complete.

    Args:
        source_dir: Directory whose top-level files are archived.
        destination: Final ``.zip`` path; ``None`` leaves the archive under
            the scratch root (reported as ``Archive``).
        transfer: Staging/commit helper.
        overwrite: Replace an existing *destination*.

    Returns:
        StatusReport with ``Archive``, ``Files`` and ``Duration``.
    """
    start = time.monotonic()
    staged = transfer.staging_file("zip-", ".zip")
    files = 0
    try:
        with zipfile.ZipFile(staged, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in sorted(source_dir.iterdir()):
                if not path.is_file():
                    continue
                zf.write(path, arcname=path.name)
                files += 1
        final = staged if destination is None else transfer.commit(
            staged, destination, overwrite=overwrite
        )
    except BaseException:
        transfer.discard(staged)
        raise

    report = StatusReport()
    report["Archive"] = final
    report["Files"] = files
    report["Duration"] = int((time.monotonic() - start) * 1000)
    log.info("archive.created", **report)
    return report


__all__ = ["extract_zip", "create_zip"]
