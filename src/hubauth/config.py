"""Configuration management with XDG paths, atomic writes, and layered resolution.

This module handles every configuration concern of hubauth:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.hubauth/`` on macOS and Windows. See :func:`get_config_dir`.
* **Variable file** -- the process-wide named-variable store persisted as a
  :class:`~hubauth.models.VariableFile` JSON document. Managed via
  :func:`load_variables`, :func:`save_variables`, :func:`set_variable`,
  :func:`unset_variable`.
* **Variable stores** -- read-only views used at runtime:
  :class:`EnvironmentVariableStore`, :class:`FileVariableStore`, and
  :class:`ChainedVariableStore`.
* **Layered resolution** -- :class:`ConfigResolver` returns the first
  non-empty value for a property key from an ordered list of providers.
  :func:`create_resolver` builds the default chain: per-client overrides,
  then environment, then the variable file.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) with ``0o600`` permissions, since the variable file
holds client secrets and API keys.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Callable, Mapping, Optional, Protocol, Sequence

from hubauth.exceptions import ConfigError, MissingConfigurationError
from hubauth.models import VariableFile, variable_name

logger = logging.getLogger(__name__)

_APP_NAME = "hubauth"
_VARIABLES_FILENAME = "variables.json"

ConfigProvider = Callable[[str], Optional[str]]
"""A configuration source: takes a property key, returns its value or ``None``."""


class VariableProvider(Protocol):
    """Process-wide named-variable store consulted for namespaced names."""

    def get(self, name: str) -> Optional[str]: ...


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir(create: bool = True) -> Path:
    """Return the configuration directory, creating it unless *create* is false.

    On Linux/BSD: ``$XDG_CONFIG_HOME/hubauth/`` (default ``~/.config/hubauth/``).
    On macOS/Windows: ``~/.hubauth/``.

    Returns:
        Absolute path to the configuration directory.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


def get_variables_path() -> Path:
    """Return the path of the variable file.

    Neither the file nor its directory is created; :func:`_atomic_write`
    creates the directory on the first save.
    """
    return get_config_dir(create=False) / _VARIABLES_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. Permissions are
    restricted to the owner before any content is written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        os.chmod(tmp_path, 0o600)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Variable file ---


def load_variables(path: Optional[Path] = None) -> VariableFile:
    """Load the variable file.

    Args:
        path: Explicit file location. Defaults to :func:`get_variables_path`.

    Returns:
        The deserialised :class:`~hubauth.models.VariableFile`. An empty
        instance is returned when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = path or get_variables_path()
    if not path.is_file():
        return VariableFile()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return VariableFile.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid variable file at {path}: {exc}") from exc


def save_variables(variables: VariableFile, path: Optional[Path] = None) -> None:
    """Persist the variable file atomically.

    Args:
        variables: The variables to save.
        path: Explicit file location. Defaults to :func:`get_variables_path`.
    """
    path = path or get_variables_path()
    data = variables.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2, sort_keys=True) + "\n")


def set_variable(name: str, value: str, path: Optional[Path] = None) -> None:
    """Set a single variable and persist the file."""
    variables = load_variables(path)
    variables.variables[name] = value
    save_variables(variables, path)
    logger.debug("Variable %s updated", name)


def unset_variable(name: str, path: Optional[Path] = None) -> bool:
    """Remove a variable from the file.

    Returns:
        ``True`` if the variable existed and was removed, ``False`` otherwise.
    """
    variables = load_variables(path)
    if name not in variables.variables:
        return False
    del variables.variables[name]
    save_variables(variables, path)
    logger.debug("Variable %s removed", name)
    return True


# --- Variable stores ---


class EnvironmentVariableStore:
    """Read variables from the process environment.

    A variable name is mapped to an environment variable by upper-casing it
    and replacing dots with underscores, so ``Hubspot.Auth.clientId`` is read
    from ``HUBSPOT_AUTH_CLIENTID``.
    """

    @staticmethod
    def env_name(name: str) -> str:
        return name.upper().replace(".", "_")

    def get(self, name: str) -> Optional[str]:
        return os.environ.get(self.env_name(name))


class FileVariableStore:
    """Read variables from the variable file.

    The file is read once, when the store is created, so that configuration
    stays fixed for the lifetime of a client.

    Args:
        path: Explicit file location. Defaults to :func:`get_variables_path`.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._variables = dict(load_variables(path).variables)

    def get(self, name: str) -> Optional[str]:
        return self._variables.get(name)


class ChainedVariableStore:
    """Query several variable stores in order and return the first non-empty value."""

    def __init__(self, *stores: VariableProvider) -> None:
        self._stores = stores

    def get(self, name: str) -> Optional[str]:
        for store in self._stores:
            value = store.get(name)
            if value:
                return value
        return None


def default_variable_store() -> ChainedVariableStore:
    """Return the process-wide store: environment first, then the variable file."""
    return ChainedVariableStore(EnvironmentVariableStore(), FileVariableStore())


# --- Layered resolution ---


class ConfigResolver:
    """Resolve configuration properties from an ordered list of providers.

    Each provider takes a property key (e.g. ``Auth.scope``) and returns its
    value or ``None``. :meth:`read` returns the first non-empty value, so
    earlier providers take precedence. The resolver holds no mutable state
    and may be shared by concurrent requests.

    Args:
        providers: Configuration sources in precedence order.

    Example::

        resolver = ConfigResolver([{"Auth.scope": "contacts"}.get])
        assert resolver.read("Auth.scope") == "contacts"
    """

    def __init__(self, providers: Sequence[ConfigProvider]) -> None:
        self._providers = tuple(providers)

    def read(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first non-empty value for *key*, or *default*."""
        for provider in self._providers:
            value = provider(key)
            if value:
                return value
        return default

    def read_mandatory(self, key: str) -> str:
        """Return the value for *key*.

        Raises:
            MissingConfigurationError: If no provider yields a non-empty value.
        """
        value = self.read(key)
        if value is None:
            raise MissingConfigurationError(key)
        return value


def namespaced(store: VariableProvider) -> ConfigProvider:
    """Adapt a variable store into a provider that looks up ``Hubspot.<key>``."""

    def _lookup(key: str) -> Optional[str]:
        return store.get(variable_name(key))

    return _lookup


def create_resolver(
    overrides: Optional[Mapping[str, str]] = None,
    variables: Optional[VariableProvider] = None,
) -> ConfigResolver:
    """Build the default two-tier resolver.

    Per-client *overrides* (keyed by bare property keys such as
    ``Auth.apikey``) take precedence over the process-wide *variables* store,
    which is consulted with namespaced names.

    Args:
        overrides: Per-client property values.
        variables: Process-wide store. Defaults to
            :func:`default_variable_store`.

    Returns:
        A ready :class:`ConfigResolver`.
    """
    client_values = dict(overrides or {})
    store = variables if variables is not None else default_variable_store()
    return ConfigResolver([client_values.get, namespaced(store)])
