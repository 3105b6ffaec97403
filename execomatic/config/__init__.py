"""
Configuration package façade.

* :func:`load_config` – Locate, merge and validate the framework YAML into a
  single :class:`ExecConfig` instance.
* :class:`ExecConfig` – Pydantic model holding program paths, exit-code
  tables, runner and fetch settings.

Anything not imported here is considered private implementation detail.
"""

from .loader import load_config  # noqa: F401
from .schema import (  # noqa: F401
    ExecConfig,
    ExitCodeEntry,
    FetchSettings,
    ProgramConfig,
    RunnerSettings,
)

__all__: list[str] = [
    "load_config",
    "ExecConfig",
    "ExitCodeEntry",
    "FetchSettings",
    "ProgramConfig",
    "RunnerSettings",
]
