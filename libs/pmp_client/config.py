"""
PMPAPIClient configuration file model and change watcher.

The config file is a small JSON document living in the directory named by the
APPSETTINGS_DIRECTORY environment variable:

    {
        "AuthToken": "A1B2C3D4-...",
        "Host": "pmp.example.com:7272",
        "Prefix": "svc_"
    }

All three fields are required. A file that fails validation is rejected as a
whole; the previously loaded configuration (if any) stays in effect.

ConfigWatcher only answers questions about the file (where is it, when did it
last change, what does it contain). Deciding when to reload is the client
service's job.
"""

import logging
import os
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from libs.pmp_client.exceptions import ConfigurationError
from libs.pmp_client.settings import PMPClientSettings

logger = logging.getLogger(__name__)


class PMPConfiguration(BaseModel):
    """Vault connection settings read from PMPAPIClient_config.json."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    auth_token: str = Field(alias="AuthToken", min_length=1, repr=False)
    host: str = Field(alias="Host", min_length=1)
    prefix: str = Field(alias="Prefix", min_length=1)

    def to_json(self) -> str:
        """Serialize using the file's field names."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, text: str | bytes) -> "PMPConfiguration":
        """
        Parse a config document.

        Raises:
            ConfigurationError: If the document is not valid JSON or any field
                is missing, null or empty. ``errors`` holds one message per
                failed field.
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid configuration document",
                errors=format_validation_errors(e),
            ) from e


def format_validation_errors(error: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into "field: message" strings."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<document>"
        messages.append(f"{location}: {item['msg']}")
    return messages


class ConfigWatcher:
    """
    Locates, stats and parses the PMPAPIClient config file.

    The directory is looked up in the environment on every call so that a
    deployment can repoint it without restarting the process.
    """

    def __init__(self, settings: PMPClientSettings) -> None:
        self._env_var = settings.config_dir_env_var
        self._file_name = settings.config_file_name

    @property
    def file_name(self) -> str:
        return self._file_name

    def locate(self) -> Path:
        """
        Resolve the config file path.

        Raises:
            ConfigurationError: If the environment variable is unset, the
                file does not exist, or it cannot be stat'ed.
        """
        config_dir = os.environ.get(self._env_var)
        if config_dir is None:
            raise ConfigurationError(f"Environment variable {self._env_var} not set.")

        config_path = Path(config_dir) / self._file_name
        try:
            is_file = config_path.is_file()
        except OSError as e:
            raise ConfigurationError(f"{self._file_name} is not accessible: {e}") from e
        if not is_file:
            raise ConfigurationError(f"{self._file_name} file not found.")
        return config_path

    def modified_at(self, config_path: Path) -> datetime:
        """Return the file's last-modified time as an aware UTC datetime."""
        return datetime.fromtimestamp(config_path.stat().st_mtime, tz=UTC)

    def load(self, config_path: Path) -> PMPConfiguration:
        """
        Read and validate the config file.

        Raises:
            ConfigurationError: On validation failure.
            OSError: If the file cannot be read.
        """
        logger.info("Parsing configuration file", extra={"config_path": str(config_path)})
        return PMPConfiguration.from_json(config_path.read_bytes())
