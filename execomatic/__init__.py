"""
execomatic package initialisation.

1. **Expose the version string**
   ``execomatic.__version__`` is resolved at import-time from the installed
   distribution metadata.

2. **Re-export the public entry points** so call-sites can simply do::

       from execomatic import ConfigSet, Executor, load_config

Module attributes
-----------------
__version__ : str
    Semantic version derived from the installed wheel.
"""

from importlib.metadata import PackageNotFoundError, version

# --------------------------------------------------------------------------- #
# Version resolution
# --------------------------------------------------------------------------- #
try:
    __version__: str = version("execomatic")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

# --------------------------------------------------------------------------- #
# Public re-exports
# --------------------------------------------------------------------------- #
from .config import ExecConfig, load_config  # noqa: E402
from .configset import ConfigSet  # noqa: E402
from .errors import (  # noqa: E402
    ConfigurationError,
    DestinationExistsError,
    ErrorKind,
    ExecomaticError,
    ProcessExitError,
    SpawnError,
    TransferError,
    ValidationError,
)
from .executor import Executor, ImportSession  # noqa: E402
from .operations import (  # noqa: E402
    ArchiveCreate,
    ArchiveExtract,
    Convert,
    Export,
    Fetch,
    Import,
    Query,
    parse_operation,
)
from .types import Failure, Skipped, StatusReport, Success  # noqa: E402

__all__: list[str] = [
    "__version__",
    "load_config",
    "ExecConfig",
    "ConfigSet",
    "Executor",
    "ImportSession",
    "StatusReport",
    "Success",
    "Skipped",
    "Failure",
    "Query",
    "Export",
    "Import",
    "ArchiveExtract",
    "ArchiveCreate",
    "Fetch",
    "Convert",
    "parse_operation",
    "ErrorKind",
    "ExecomaticError",
    "ConfigurationError",
    "ValidationError",
    "SpawnError",
    "ProcessExitError",
    "TransferError",
    "DestinationExistsError",
]
