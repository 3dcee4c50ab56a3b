"""Settings access: the key/value source configuration is resolved from."""

import os
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Protocol

from .constants import (
    DEFAULT_ENDPOINT,
    GITHUB_DISABLE_INLINE_COMMENTS,
    GITHUB_ENDPOINT,
    GITHUB_TOKEN_ENV_VARS,
    TOKEN_VISIBLE_CHARS,
)
from .errors import ConfigurationError

DEFAULTS: Dict[str, str] = {
    GITHUB_ENDPOINT: DEFAULT_ENDPOINT,
    GITHUB_DISABLE_INLINE_COMMENTS: "false",
}


class ConfigSource(Protocol):
    """Read-only key/value store consulted by the resolvers."""

    def has_key(self, key: str) -> bool: ...

    def get_string(self, key: str) -> Optional[str]: ...

    def get_int(self, key: str) -> int: ...

    def get_boolean(self, key: str) -> bool: ...


class Settings:
    """
    Dict-backed ConfigSource.

    Blank values are treated as unset. Defaults answer ``get_*`` lookups but
    never make ``has_key`` true.
    """

    def __init__(
        self,
        values: Optional[Mapping[str, str]] = None,
        defaults: Optional[Mapping[str, str]] = None,
    ):
        self._values: Dict[str, str] = {}
        for key, value in (values or {}).items():
            if value is not None and str(value).strip():
                self._values[key] = str(value).strip()
        self._defaults: Dict[str, str] = dict(DEFAULTS if defaults is None else defaults)

    @classmethod
    def from_pairs(cls, pairs: Iterable[str]) -> "Settings":
        """
        Build settings from ``key=value`` assignments (as passed with ``-D``).

        Raises:
            ConfigurationError: If an assignment has no ``=`` or an empty key
        """
        values = {}
        for pair in pairs:
            key, sep, value = pair.partition("=")
            if not sep or not key.strip():
                raise ConfigurationError(f"Invalid property assignment: {pair!r} (expected key=value)")
            values[key.strip()] = value
        return cls(values)

    @classmethod
    def from_properties_file(cls, path: Path) -> "Settings":
        """Load settings from a ``key=value`` properties file."""
        values = {}
        with path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith(("#", "!")):
                    continue
                if "=" in line:
                    key, value = line.split("=", 1)
                    values[key.strip()] = value.strip()
        return cls(values)

    def merged(self, other: "Settings") -> "Settings":
        """Return new settings where values from ``other`` win."""
        values = dict(self._values)
        values.update(other._values)
        return Settings(values, self._defaults)

    def has_key(self, key: str) -> bool:
        return key in self._values

    def get_string(self, key: str) -> Optional[str]:
        if key in self._values:
            return self._values[key]
        return self._defaults.get(key)

    def get_int(self, key: str) -> int:
        value = self.get_string(key)
        if value is None:
            return 0
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(f"Property '{key}' must be an integer, got: {value!r}")

    def get_boolean(self, key: str) -> bool:
        value = self.get_string(key)
        return value is not None and value.lower() == "true"

    def as_dict(self) -> Dict[str, str]:
        """Explicitly set values, without defaults."""
        return dict(self._values)


def get_github_token() -> Optional[str]:
    """Get GitHub token from environment.

    Checks GH_TOKEN first (GitHub CLI convention), then GITHUB_TOKEN.
    """
    for name in GITHUB_TOKEN_ENV_VARS:
        token = os.getenv(name)
        if token:
            return token
    return None


def redact_secret(value: str, visible_chars: int = TOKEN_VISIBLE_CHARS) -> str:
    """Redact a secret value for logging."""
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)
