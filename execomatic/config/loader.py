"""
YAML configuration loader.

Locates, reads and validates the framework configuration before returning an
:class:`execomatic.config.schema.ExecConfig` instance.

Search precedence (first match wins)
1. An explicit path argument (``--config`` on the CLI).
2. ``<project>/config/execomatic.yaml`` – project-local override.
3. The packaged default shipped inside the wheel.

Project-local and explicit files are merged *on top of* the packaged default,
so an override only needs to list the keys it changes (e.g. a single
``programs.mysql.path``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from importlib.resources import as_file, files

from ..errors import ConfigurationError
from .schema import ExecConfig

# --------------------------------------------------------------------------- #
# Wheel-internal fallback (works even from a zipped wheel)                    #
# --------------------------------------------------------------------------- #
try:
    _DEFAULT_CONFIG = files("execomatic.resources") / "default_config.yaml"
except ModuleNotFoundError:
    _DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "resources" / "default_config.yaml"

_PROJECT_LOCAL = Path("config") / "execomatic.yaml"

# --------------------------------------------------------------------------- #
# Helper functions                                                            #
# --------------------------------------------------------------------------- #


def _project_local(root: Optional[str | Path]) -> Optional[Path]:
    """Return ``<root>/config/execomatic.yaml`` or *None* if *root* is ``None``."""
    if root is None:
        return None
    return Path(root).expanduser().resolve() / _PROJECT_LOCAL


def _first_existing(*candidates: Optional[Path]) -> Optional[Path]:
    """Return the first path in *candidates* that exists on disk."""
    for p in candidates:
        if p is not None and p.exists():
            return p
    return None


def _load_yaml(path: Path) -> dict:
    """Read a YAML mapping; an empty file yields an empty dict.

    Raises:
        ConfigurationError: When the file cannot be parsed or is not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read configuration {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Return *base* updated recursively with *override* (override wins)."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def load_config(
    *,
    config_path: Optional[str | Path] = None,
    project_root: Optional[str | Path] = None,
) -> ExecConfig:
    """Return a fully validated :class:`ExecConfig`.

    Args:
        config_path: Explicit YAML override. ``None`` triggers the search
            sequence described in the module doc-string.
        project_root: Directory searched for ``config/execomatic.yaml``.

    Returns:
        An :class:`ExecConfig` ready for downstream use.

    Raises:
        ConfigurationError: When an explicit path does not exist or the merged
            document fails validation.
    """
    explicit = Path(config_path).expanduser().resolve() if config_path else None
    if explicit is not None and not explicit.exists():
        raise ConfigurationError(f"Configuration file {explicit} does not exist")

    with as_file(_DEFAULT_CONFIG) as default_path:
        merged: dict = _load_yaml(Path(default_path))

    override = _first_existing(explicit, _project_local(project_root))
    if override is not None:
        merged = _deep_merge(merged, _load_yaml(override))

    try:
        return ExecConfig(**merged)
    except Exception as exc:  # pydantic.ValidationError or type issues
        raise ConfigurationError(f"Invalid configuration – {exc}") from exc
