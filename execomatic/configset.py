"""
Ordered, string-keyed settings bag consumed by the command builders.

A :class:`ConfigSet` carries credentials, paths and per-tool options such as
``mysql.host`` or ``mysql.replace``.  Keys are case-sensitive; dotted
prefixes are a naming convention only.  Values are always strings and a key
is either set or absent, never ``None``.

Instances are treated as read-only by the execution framework: callers build
one by merging defaults with overrides (:meth:`ConfigSet.merged`) and hand it
over before the invocation starts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Mapping, MutableMapping, Optional

import yaml

from .errors import ConfigurationError

#: Values accepted as "on" for optional flags (case-insensitive).
TRUTHY: frozenset[str] = frozenset({"true", "yes", "on", "1"})


def _flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Collapse nested YAML mappings into dotted keys.

    ``{"mysql": {"host": "db"}}`` becomes ``{"mysql.host": "db"}``.  ``None``
    leaves are dropped because absence already means "not set".
    """
    flat: dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, prefix=f"{name}."))
        elif value is None:
            continue
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        else:
            flat[name] = str(value)
    return flat


class ConfigSet(MutableMapping[str, str]):
    """Insertion-ordered mapping with last-write-wins semantics."""

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        self._data: dict[str, str] = {}
        for source in (data or {}, kwargs):
            for key, value in source.items():
                self[key] = value

    # ------------------------------------------------------------------ #
    # MutableMapping protocol                                            #
    # ------------------------------------------------------------------ #
    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"ConfigSet keys must be str, got {type(key).__name__}")
        if value is None:
            # Assigning None unsets the key rather than storing a null.
            self._data.pop(key, None)
            return
        if isinstance(value, bool):
            value = "true" if value else "false"
        self._data.pop(key, None)  # re-insert so the latest write is last
        self._data[key] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ConfigSet({self._data!r})"

    # ------------------------------------------------------------------ #
    # Convenience                                                        #
    # ------------------------------------------------------------------ #
    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:  # type: ignore[override]
        """Return the value for *key* or *default* when it is not set."""
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Alias for item assignment."""
        self[key] = value

    def has(self, key: str) -> bool:
        """Return ``True`` when *key* is set to a non-empty value."""
        return bool(self._data.get(key))

    def flag(self, key: str, default: bool = False) -> bool:
        """Return the truthiness of *key*; *default* applies only when unset."""
        value = self._data.get(key)
        if value is None:
            return default
        return value.strip().lower() in TRUTHY

    def require(self, *keys: str) -> None:
        """Raise :class:`ConfigurationError` for the first missing/empty key."""
        for key in keys:
            if not self._data.get(key):
                raise ConfigurationError(f"Invalid configuration: {key} is required.")

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "ConfigSet":
        """Return a new ConfigSet with *overrides* applied on top of *self*."""
        out = ConfigSet(self._data)
        for key, value in (overrides or {}).items():
            out[key] = value
        return out

    # ------------------------------------------------------------------ #
    # Construction helpers                                               #
    # ------------------------------------------------------------------ #
    @classmethod
    def from_yaml(cls, path: str | Path) -> "ConfigSet":
        """Load a ConfigSet from a YAML document.

        Both flat (``mysql.host: db``) and nested (``mysql: {host: db}``)
        spellings are accepted and may be mixed.

        Raises:
            ConfigurationError: When the file is missing, unreadable or its
                top level is not a mapping.
        """
        path = Path(path).expanduser()
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Cannot read settings file {path}: {exc}") from exc
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")
        return cls(_flatten(data))


__all__ = ["ConfigSet", "TRUTHY"]
