"""Tests for the configuration module."""

import json
from pathlib import Path

import pytest

from urlhealth.config import (
    AppSettings,
    ConfigError,
    ServerConfig,
    load_settings,
)


@pytest.fixture
def write_settings(tmp_path: Path):
    """Return a helper that writes settings content and returns its path."""

    def _write(content: str) -> str:
        path = tmp_path / "appsettings.json"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_loads_paths_and_domains(self, write_settings) -> None:
        """Paths and domains are loaded in file order."""
        path = write_settings(
            json.dumps({"paths": ["/health", "/", "/api/ping"], "domains": ["b.example", "a.example"]})
        )

        settings = load_settings(path)

        assert settings.paths == ("/health", "/", "/api/ping")
        assert settings.domains == ("b.example", "a.example")

    def test_missing_keys_decode_to_empty(self, write_settings) -> None:
        """An empty object yields empty sequences."""
        settings = load_settings(write_settings("{}"))

        assert settings.paths == ()
        assert settings.domains == ()

    def test_null_values_decode_to_empty(self, write_settings) -> None:
        """Explicit nulls are treated like missing keys."""
        settings = load_settings(write_settings('{"paths": null, "domains": null}'))

        assert settings == AppSettings()

    def test_unknown_keys_ignored(self, write_settings) -> None:
        """Unknown top-level keys do not cause errors."""
        path = write_settings(json.dumps({"paths": ["/"], "domains": [], "version": 2}))

        settings = load_settings(path)

        assert settings.paths == ("/",)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """A missing file raises ConfigError naming the file."""
        missing = str(tmp_path / "nope.json")

        with pytest.raises(ConfigError, match="nope.json"):
            load_settings(missing)

    def test_truncated_file_raises(self, write_settings) -> None:
        """Truncated JSON raises ConfigError."""
        path = write_settings('{"paths": ["/health"], "domai')

        with pytest.raises(ConfigError, match="Error decoding"):
            load_settings(path)

    def test_empty_file_raises(self, write_settings) -> None:
        """An empty file is not valid JSON."""
        with pytest.raises(ConfigError):
            load_settings(write_settings(""))

    def test_non_object_raises(self, write_settings) -> None:
        """A top-level array is rejected."""
        with pytest.raises(ConfigError, match="JSON object"):
            load_settings(write_settings('["/health"]'))

    def test_paths_not_a_list_raises(self, write_settings) -> None:
        """'paths' must be a list."""
        with pytest.raises(ConfigError, match="'paths' must be a list"):
            load_settings(write_settings('{"paths": "/health"}'))

    def test_non_string_entry_raises(self, write_settings) -> None:
        """List entries must be strings."""
        with pytest.raises(ConfigError, match="'domains' entry 1 must be a string"):
            load_settings(write_settings('{"domains": ["example.com", 42]}'))

    def test_settings_are_immutable(self, write_settings) -> None:
        """Loaded settings cannot be modified."""
        settings = load_settings(write_settings('{"paths": ["/"]}'))

        with pytest.raises(AttributeError):
            settings.paths = ("/other",)  # type: ignore[misc]


class TestAppSettings:
    """Tests for AppSettings dataclass."""

    def test_to_dict_preserves_order(self) -> None:
        """to_dict returns lists in the original order."""
        settings = AppSettings(paths=("/z", "/a"), domains=("z.example", "a.example"))

        assert settings.to_dict() == {
            "paths": ["/z", "/a"],
            "domains": ["z.example", "a.example"],
        }


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    def test_defaults(self) -> None:
        """Defaults bind port 8080 on all interfaces."""
        config = ServerConfig()

        assert config.host == ""
        assert config.port == 8080
        assert config.local_url == "http://localhost:8080"

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_rejects_invalid_port(self, port: int) -> None:
        """Ports outside 1-65535 are rejected."""
        with pytest.raises(ConfigError, match="Server port must be between"):
            ServerConfig(port=port)
