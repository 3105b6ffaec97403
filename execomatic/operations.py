"""
Operation variants understood by :class:`execomatic.executor.Executor`.

Each variant is a frozen pydantic model that carries only the parameters
relevant to it plus a literal ``kind`` discriminator, so a union of them can
be validated from plain dictionaries (CLI, YAML batch files) and dispatched
with a single ``match``/lookup on ``kind``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError


class Query(BaseModel, frozen=True):
    """Run one SQL statement with the ``mysql`` client."""

    kind: Literal["query"] = "query"
    sql: str


class Export(BaseModel, frozen=True):
    """Run a ``SELECT`` and write its tab-separated output to *destination*."""

    kind: Literal["export"] = "export"
    sql: str
    destination: Path


class Import(BaseModel, frozen=True):
    """Bulk-load *source* into the table named after its base name."""

    kind: Literal["import"] = "import"
    source: Path


class ArchiveExtract(BaseModel, frozen=True):
    """Unpack a ZIP archive, flattening entries into *destination*.

    ``destination=None`` extracts into a fresh scratch directory.
    """

    kind: Literal["archive_extract"] = "archive_extract"
    archive: Path
    destination: Optional[Path] = None


class ArchiveCreate(BaseModel, frozen=True):
    """Pack the regular files of *source_dir* into a ZIP archive."""

    kind: Literal["archive_create"] = "archive_create"
    source_dir: Path
    destination: Optional[Path] = None


class Fetch(BaseModel, frozen=True):
    """Retrieve *url* with ``wget`` into *destination* (a directory)."""

    kind: Literal["fetch"] = "fetch"
    url: str
    destination: Optional[Path] = None
    overwrite: bool = False


class Convert(BaseModel, frozen=True):
    """Convert a dBase III ``.dbf`` file into a delimited ``.dat`` file."""

    kind: Literal["convert"] = "convert"
    source: Path


Operation = Union[Query, Export, Import, ArchiveExtract, ArchiveCreate, Fetch, Convert]


class OperationEnvelope(BaseModel):
    """Wrapper used to validate an operation from an untyped mapping."""

    operation: Operation = Field(..., discriminator="kind")


def parse_operation(data: dict) -> Operation:
    """Return the concrete operation described by *data* (``kind`` required).

    Raises:
        ValidationError: When *data* does not describe a known variant.
    """
    try:
        return OperationEnvelope(operation=data).operation
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid operation – {exc}") from exc


__all__ = [
    "Query",
    "Export",
    "Import",
    "ArchiveExtract",
    "ArchiveCreate",
    "Fetch",
    "Convert",
    "Operation",
    "parse_operation",
]
