"""Tests for EnvLoader and the registry settings."""

from pathlib import Path

import pytest

from binary_store.config import EnvLoader, ProviderParameters, ProviderSettings, StoreSettings, normalize_key
from binary_store.exceptions import BackendUnavailableError, ConfigurationError

PREFIX = "BSTEST"

# ============================================================================
# EnvLoader
# ============================================================================


class TestEnvLoader:
    def test_env_file_values(self, tmp_path, monkeypatch):
        monkeypatch.delenv("BSTEST_A", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("BSTEST_A=from_file\n")

        assert EnvLoader(env_file).load()["BSTEST_A"] == "from_file"

    def test_environment_beats_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("BSTEST_A=from_file\n")
        monkeypatch.setenv("BSTEST_A", "from_env")

        assert EnvLoader(env_file).load()["BSTEST_A"] == "from_env"

    def test_overrides_beat_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BSTEST_A", "from_env")
        loaded = EnvLoader(tmp_path / ".env").load({"BSTEST_A": "override"})
        assert loaded["BSTEST_A"] == "override"

    def test_missing_env_file_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BSTEST_A", "x")
        assert EnvLoader(tmp_path / "nope.env").load()["BSTEST_A"] == "x"

    def test_load_prefixed_strips_prefix(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BSTEST_DEFAULT_PROVIDER", "local")
        monkeypatch.setenv("OTHER_DEFAULT_PROVIDER", "other")

        values = EnvLoader(tmp_path / ".env").load_prefixed("BSTEST")
        assert values["DEFAULT_PROVIDER"] == "local"
        assert "OTHER_DEFAULT_PROVIDER" not in values

    def test_load_prefixed_accepts_trailing_underscore(self, tmp_path):
        values = EnvLoader(tmp_path / ".env").load_prefixed("BSTEST_", {"BSTEST_X": "1"})
        assert values["X"] == "1"


# ============================================================================
# ProviderParameters
# ============================================================================


class TestNormalizeKey:
    @pytest.mark.parametrize("key", ["folderName", "FOLDER_NAME", "folder-name", "FolderName"])
    def test_equivalent_spellings(self, key):
        assert normalize_key(key) == "foldername"


class TestProviderParameters:
    def test_pop_case_insensitive(self):
        params = ProviderParameters("local", {"FOLDER_NAME": "/srv"})
        assert params.pop("folderName") == "/srv"
        params.ensure_consumed()

    def test_pop_default(self):
        params = ProviderParameters("local", {})
        assert params.pop("folderName", "fallback") == "fallback"
        assert params.pop("folderName") is None

    def test_pop_int(self):
        params = ProviderParameters("local", {"bufferSize": "4096"})
        assert params.pop_int("bufferSize", 1) == 4096

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_pop_int_blank_uses_default(self, raw):
        params = ProviderParameters("local", {"bufferSize": raw})
        assert params.pop_int("bufferSize", 65536) == 65536

    def test_pop_int_invalid(self):
        params = ProviderParameters("local", {"bufferSize": "lots"})
        with pytest.raises(ConfigurationError) as exc_info:
            params.pop_int("bufferSize", 1)
        assert exc_info.value.code == "INVALID_CONFIGURATION"

    def test_leftovers_rejected(self):
        params = ProviderParameters("local", {"folderName": "/srv", "colour": "red", "size": "1"})
        params.pop("folderName")
        with pytest.raises(ConfigurationError) as exc_info:
            params.ensure_consumed()
        assert exc_info.value.code == "UNRECOGNIZED_PARAMETERS"
        assert exc_info.value.message == "Unrecognized configuration attributes found: colour, size"
        assert exc_info.value.details["provider"] == "local"

    def test_duplicate_spellings_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderParameters("local", {"folderName": "/a", "FOLDER_NAME": "/b"})
        assert exc_info.value.code == "DUPLICATE_PARAMETER"


class TestProviderSettings:
    def test_valid(self):
        ProviderSettings(name="local", type="filesystem").validate()

    def test_missing_name(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderSettings(name="", type="filesystem").validate()
        assert exc_info.value.code == "MISSING_PROVIDER_NAME"

    def test_missing_type(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderSettings(name="local").validate()
        assert exc_info.value.code == "MISSING_PROVIDER_TYPE"
        assert "local" in exc_info.value.message


# ============================================================================
# StoreSettings.from_env
# ============================================================================


@pytest.fixture
def env_file(tmp_path) -> Path:
    return tmp_path / ".env"


class TestStoreSettingsFromEnv:
    def test_full_configuration(self, env_file, monkeypatch):
        monkeypatch.setenv("BSTEST_PROVIDERS", "local, cloud")
        monkeypatch.setenv("BSTEST_DEFAULT_PROVIDER", "local")
        monkeypatch.setenv("BSTEST_PROVIDER_LOCAL_TYPE", "filesystem")
        monkeypatch.setenv("BSTEST_PROVIDER_LOCAL_FOLDER_NAME", "~/data/blobs")
        monkeypatch.setenv("BSTEST_PROVIDER_LOCAL_BUFFER_SIZE", "4096")
        monkeypatch.setenv("BSTEST_PROVIDER_CLOUD_TYPE", "blob")
        monkeypatch.setenv("BSTEST_PROVIDER_CLOUD_CONNECTION_STRING_NAME", "DevStorageAccount")
        monkeypatch.setenv("BSTEST_CONNECTION_STRING_DEVSTORAGEACCOUNT", "UseDevelopmentStorage=true")
        monkeypatch.setenv("BSTEST_APP_ROOT", "/srv/app")

        settings = StoreSettings.from_env(prefix=PREFIX, env_file=env_file)

        assert [p.name for p in settings.providers] == ["local", "cloud"]
        assert settings.default_provider == "local"
        assert settings.prefix == PREFIX
        assert settings.app_root == Path("/srv/app")

        local = settings.get_provider("local")
        assert local is not None
        assert local.type == "filesystem"
        assert local.parameters == {"FOLDER_NAME": "~/data/blobs", "BUFFER_SIZE": "4096"}

        cloud = settings.get_provider("cloud")
        assert cloud is not None
        assert cloud.type == "blob"
        assert cloud.parameters == {"CONNECTION_STRING_NAME": "DevStorageAccount"}

        assert settings.connection_strings == {"DEVSTORAGEACCOUNT": "UseDevelopmentStorage=true"}
        settings.validate()

    def test_overlapping_provider_names(self, env_file):
        overrides = {
            "BSTEST_PROVIDERS": "a,a_b",
            "BSTEST_DEFAULT_PROVIDER": "a",
            "BSTEST_PROVIDER_A_TYPE": "filesystem",
            "BSTEST_PROVIDER_A_FOLDER_NAME": "/one",
            "BSTEST_PROVIDER_A_B_TYPE": "blob",
            "BSTEST_PROVIDER_A_B_CONTAINER_NAME": "two",
        }
        settings = StoreSettings.from_env(prefix=PREFIX, env_file=env_file, overrides=overrides)

        a = settings.get_provider("a")
        a_b = settings.get_provider("a_b")
        assert a is not None and a_b is not None
        assert a.type == "filesystem"
        assert a.parameters == {"FOLDER_NAME": "/one"}
        assert a_b.type == "blob"
        assert a_b.parameters == {"CONTAINER_NAME": "two"}

    def test_hyphenated_provider_name(self, env_file):
        overrides = {
            "BSTEST_PROVIDERS": "cold-storage",
            "BSTEST_PROVIDER_COLD_STORAGE_TYPE": "filesystem",
        }
        settings = StoreSettings.from_env(prefix=PREFIX, env_file=env_file, overrides=overrides)
        provider = settings.get_provider("cold-storage")
        assert provider is not None
        assert provider.type == "filesystem"

    def test_env_file_source(self, env_file):
        env_file.write_text(
            "BSTEST_PROVIDERS=local\n"
            "BSTEST_DEFAULT_PROVIDER=local\n"
            "BSTEST_PROVIDER_LOCAL_TYPE=filesystem\n"
        )
        settings = StoreSettings.from_env(prefix=PREFIX, env_file=env_file)
        assert settings.default_provider == "local"
        assert settings.providers[0].type == "filesystem"

    def test_nothing_configured(self, env_file):
        settings = StoreSettings.from_env(prefix="BSTEST_EMPTY", env_file=env_file)
        assert settings.providers == []
        assert settings.default_provider is None
        assert settings.app_root == Path.cwd()
        with pytest.raises(BackendUnavailableError) as exc_info:
            settings.validate()
        assert exc_info.value.code == "NO_PROVIDERS"

    def test_unlisted_provider_keys_ignored(self, env_file):
        overrides = {
            "BSTEST_PROVIDERS": "local",
            "BSTEST_PROVIDER_LOCAL_TYPE": "filesystem",
            "BSTEST_PROVIDER_GHOST_TYPE": "blob",
        }
        settings = StoreSettings.from_env(prefix=PREFIX, env_file=env_file, overrides=overrides)
        assert [p.name for p in settings.providers] == ["local"]


# ============================================================================
# StoreSettings.from_dict
# ============================================================================


class TestStoreSettingsFromDict:
    def test_full_configuration(self):
        settings = StoreSettings.from_dict(
            {
                "providers": [
                    {"name": "local", "type": "filesystem", "folderName": "~/data", "bufferSize": 1024},
                    {"name": "cloud", "type": "blob", "connectionStringName": "DevStorageAccount"},
                ],
                "defaultProvider": "cloud",
                "connectionStrings": {"DevStorageAccount": "UseDevelopmentStorage=true"},
                "appRoot": "/srv/app",
            }
        )

        assert [p.name for p in settings.providers] == ["local", "cloud"]
        assert settings.providers[0].parameters == {"folderName": "~/data", "bufferSize": "1024"}
        assert settings.default_provider == "cloud"
        assert settings.connection_strings == {"DevStorageAccount": "UseDevelopmentStorage=true"}
        assert settings.app_root == Path("/srv/app")

    def test_top_level_keys_case_insensitive(self):
        settings = StoreSettings.from_dict(
            {"Providers": [{"name": "a", "type": "fs"}], "default_provider": "a"}
        )
        assert settings.default_provider == "a"
        assert len(settings.providers) == 1

    def test_none_parameters_dropped(self):
        settings = StoreSettings.from_dict(
            {"providers": [{"name": "a", "type": "fs", "bufferSize": None}], "defaultProvider": "a"}
        )
        assert settings.providers[0].parameters == {}

    def test_blank_default(self):
        settings = StoreSettings.from_dict(
            {"providers": [{"name": "a", "type": "fs"}], "defaultProvider": ""}
        )
        with pytest.raises(BackendUnavailableError) as exc_info:
            settings.validate()
        assert exc_info.value.code == "NO_DEFAULT_PROVIDER"

    def test_provider_without_type(self):
        settings = StoreSettings.from_dict({"providers": [{"name": "a"}], "defaultProvider": "a"})
        with pytest.raises(ConfigurationError):
            settings.validate()

    def test_get_provider_missing(self):
        assert StoreSettings().get_provider("nope") is None
