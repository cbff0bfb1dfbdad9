"""Configuration loader with type-safe dataclasses."""

import json
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SETTINGS_PATH = "appsettings.json"
DEFAULT_PORT = 8080


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


@dataclass(frozen=True)
class AppSettings:
    """Paths and domains to check.

    Loaded once at startup and only read afterwards, so a single instance is
    shared by every request thread.

    Attributes:
        paths: URL path suffixes appended to each domain (e.g. "/health").
        domains: Bare hostnames offered in the dashboard, without scheme.
    """

    paths: tuple[str, ...] = field(default_factory=tuple)
    domains: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, list[str]]:
        """Return the JSON shape served by GET /config."""
        return {"paths": list(self.paths), "domains": list(self.domains)}


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the HTTP listener."""

    host: str = ""  # all interfaces
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if self.port < 1 or self.port > 65535:
            raise ConfigError(f"Server port must be between 1 and 65535, got {self.port}")

    @property
    def local_url(self) -> str:
        """URL the browser is pointed at."""
        return f"http://localhost:{self.port}"


def _parse_string_list(data: dict, key: str) -> tuple[str, ...]:
    """Parse an optional list of strings from the settings document."""
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list")
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ConfigError(f"'{key}' entry {index} must be a string, got {type(item).__name__}")
    return tuple(value)


def load_settings(settings_path: str = DEFAULT_SETTINGS_PATH) -> AppSettings:
    """Load and validate settings from a JSON file.

    Missing "paths" or "domains" keys decode to empty sequences and unknown
    keys are ignored.

    Args:
        settings_path: Path to the JSON settings file.

    Returns:
        Validated AppSettings object.

    Raises:
        ConfigError: If the file cannot be read or its contents are invalid.
    """
    path = Path(settings_path)

    if not path.exists():
        raise ConfigError(f"Error opening {settings_path}: file not found")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Error decoding {settings_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Error opening {settings_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Error decoding {settings_path}: top-level value must be a JSON object")

    return AppSettings(
        paths=_parse_string_list(data, "paths"),
        domains=_parse_string_list(data, "domains"),
    )
