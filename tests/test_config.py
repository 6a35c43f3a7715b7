"""Tests for hubauth.config: XDG paths, atomic writes, variable stores, resolution."""

from __future__ import annotations

import json
import stat
from pathlib import Path
from typing import Optional

import pytest

from hubauth.config import (
    ChainedVariableStore,
    ConfigResolver,
    EnvironmentVariableStore,
    FileVariableStore,
    _atomic_write,
    create_resolver,
    get_config_dir,
    get_variables_path,
    load_variables,
    namespaced,
    save_variables,
    set_variable,
    unset_variable,
)
from hubauth.exceptions import ConfigError, MissingConfigurationError
from hubauth.models import VariableFile


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _DictStore:
    """In-memory variable store."""

    def __init__(self, values: dict[str, str]) -> None:
        self.values = values
        self.lookups: list[str] = []

    def get(self, name: str) -> Optional[str]:
        self.lookups.append(name)
        return self.values.get(name)


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestConfigDir:
    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("hubauth.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "hubauth"
        assert result.is_dir()

    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("hubauth.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "hubauth"

    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("hubauth.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".hubauth"

    def test_variables_path(self, isolated_config: Path) -> None:
        assert get_variables_path() == isolated_config / "config" / "hubauth" / "variables.json"

    def test_variables_path_does_not_create_directory(self, isolated_config: Path) -> None:
        get_variables_path()
        assert not (isolated_config / "config").exists()

    def test_reading_creates_nothing(self, isolated_config: Path) -> None:
        assert load_variables().variables == {}
        FileVariableStore()
        create_resolver().read("Auth.apikey")
        assert not (isolated_config / "config").exists()

    def test_first_save_creates_directory(self, isolated_config: Path) -> None:
        set_variable("Hubspot.Auth.scope", "contacts")
        assert (isolated_config / "config" / "hubauth" / "variables.json").is_file()


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        _atomic_write(target, '{"a": 1}\n')
        assert target.read_text(encoding="utf-8") == '{"a": 1}\n'

    def test_owner_only_permissions(self, tmp_path: Path) -> None:
        target = tmp_path / "secret.json"
        _atomic_write(target, "{}")
        mode = stat.S_IMODE(target.stat().st_mode)
        assert mode == 0o600

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        _atomic_write(target, "one")
        _atomic_write(target, "two")
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]
        assert target.read_text(encoding="utf-8") == "two"


# ---------------------------------------------------------------------------
# Variable file
# ---------------------------------------------------------------------------


class TestVariableFile:
    def test_missing_file_is_empty(self, isolated_config: Path) -> None:
        assert load_variables().variables == {}

    def test_save_and_load(self, isolated_config: Path) -> None:
        save_variables(VariableFile(variables={"Hubspot.Auth.scope": "contacts"}))
        assert load_variables().variables == {"Hubspot.Auth.scope": "contacts"}

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "vars.json"
        save_variables(VariableFile(variables={"x": "1"}), path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"variables": {"x": "1"}}
        assert load_variables(path).variables == {"x": "1"}

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        get_variables_path().parent.mkdir(parents=True)
        get_variables_path().write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid variable file"):
            load_variables()

    def test_invalid_shape_raises(self, isolated_config: Path) -> None:
        get_variables_path().parent.mkdir(parents=True)
        get_variables_path().write_text('{"variables": ["a"]}', encoding="utf-8")
        with pytest.raises(ConfigError):
            load_variables()

    def test_set_variable(self, isolated_config: Path) -> None:
        set_variable("Hubspot.Auth.clientId", "cid")
        set_variable("Hubspot.Auth.scope", "contacts")
        assert load_variables().variables == {
            "Hubspot.Auth.clientId": "cid",
            "Hubspot.Auth.scope": "contacts",
        }

    def test_unset_variable(self, isolated_config: Path) -> None:
        set_variable("Hubspot.Auth.scope", "contacts")
        assert unset_variable("Hubspot.Auth.scope") is True
        assert load_variables().variables == {}

    def test_unset_missing_variable(self, isolated_config: Path) -> None:
        assert unset_variable("Hubspot.Auth.scope") is False


# ---------------------------------------------------------------------------
# Variable stores
# ---------------------------------------------------------------------------


class TestEnvironmentVariableStore:
    def test_env_name_mapping(self) -> None:
        assert EnvironmentVariableStore.env_name("Hubspot.Auth.clientId") == "HUBSPOT_AUTH_CLIENTID"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HUBSPOT_AUTH_APIKEY", "env-key")
        assert EnvironmentVariableStore().get("Hubspot.Auth.apikey") == "env-key"

    def test_missing_is_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("HUBSPOT_AUTH_SCOPE", raising=False)
        assert EnvironmentVariableStore().get("Hubspot.Auth.scope") is None


class TestFileVariableStore:
    def test_reads_file(self, isolated_config: Path) -> None:
        set_variable("Hubspot.Auth.scope", "contacts")
        assert FileVariableStore().get("Hubspot.Auth.scope") == "contacts"

    def test_snapshot_taken_at_creation(self, isolated_config: Path) -> None:
        set_variable("Hubspot.Auth.scope", "contacts")
        store = FileVariableStore()
        set_variable("Hubspot.Auth.scope", "changed")
        assert store.get("Hubspot.Auth.scope") == "contacts"


class TestChainedVariableStore:
    def test_first_non_empty_wins(self) -> None:
        store = ChainedVariableStore(_DictStore({"a": ""}), _DictStore({"a": "2"}), _DictStore({"a": "3"}))
        assert store.get("a") == "2"

    def test_none_when_missing_everywhere(self) -> None:
        assert ChainedVariableStore(_DictStore({})).get("a") is None

    def test_empty_chain(self) -> None:
        assert ChainedVariableStore().get("a") is None


# ---------------------------------------------------------------------------
# ConfigResolver
# ---------------------------------------------------------------------------


class TestConfigResolver:
    def test_first_provider_takes_precedence(self) -> None:
        resolver = ConfigResolver([{"Auth.scope": "first"}.get, {"Auth.scope": "second"}.get])
        assert resolver.read("Auth.scope") == "first"

    def test_empty_value_falls_through(self) -> None:
        resolver = ConfigResolver([{"Auth.scope": ""}.get, {"Auth.scope": "second"}.get])
        assert resolver.read("Auth.scope") == "second"

    def test_default_when_unresolved(self) -> None:
        resolver = ConfigResolver([{}.get])
        assert resolver.read("Auth.baseUri") is None
        assert resolver.read("Auth.baseUri", "https://fallback") == "https://fallback"

    def test_read_mandatory(self) -> None:
        resolver = ConfigResolver([{"Auth.scope": "contacts"}.get])
        assert resolver.read_mandatory("Auth.scope") == "contacts"

    def test_read_mandatory_missing(self) -> None:
        resolver = ConfigResolver([{}.get])
        with pytest.raises(MissingConfigurationError) as exc_info:
            resolver.read_mandatory("Auth.scope")
        assert exc_info.value.key == "Auth.scope"
        assert "Auth.scope" in str(exc_info.value)


class TestCreateResolver:
    def test_namespaced_lookup(self) -> None:
        store = _DictStore({"Hubspot.Auth.clientId": "from-store"})
        resolver = create_resolver(variables=store)
        assert resolver.read("Auth.clientId") == "from-store"
        assert store.lookups == ["Hubspot.Auth.clientId"]

    def test_override_beats_store(self) -> None:
        store = _DictStore({"Hubspot.Auth.clientId": "from-store"})
        resolver = create_resolver({"Auth.clientId": "override"}, variables=store)
        assert resolver.read("Auth.clientId") == "override"
        assert store.lookups == []

    def test_empty_override_falls_back(self) -> None:
        store = _DictStore({"Hubspot.Auth.apikey": "store-key"})
        resolver = create_resolver({"Auth.apikey": ""}, variables=store)
        assert resolver.read("Auth.apikey") == "store-key"

    def test_overrides_are_copied(self) -> None:
        overrides = {"Auth.scope": "contacts"}
        resolver = create_resolver(overrides, variables=ChainedVariableStore())
        overrides["Auth.scope"] = "changed"
        assert resolver.read("Auth.scope") == "contacts"

    def test_default_store_env_before_file(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        set_variable("Hubspot.Auth.scope", "from-file")
        set_variable("Hubspot.Auth.clientId", "file-client")
        monkeypatch.setenv("HUBSPOT_AUTH_SCOPE", "from-env")

        resolver = create_resolver()
        assert resolver.read("Auth.scope") == "from-env"
        assert resolver.read("Auth.clientId") == "file-client"

    def test_namespaced_adapter(self) -> None:
        provider = namespaced(_DictStore({"Hubspot.Auth.scope": "contacts"}))
        assert provider("Auth.scope") == "contacts"
        assert provider("Auth.clientId") is None
