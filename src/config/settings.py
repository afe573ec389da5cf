"""
Configuration of the settings store itself.

**Conceptual**: The store reads the caller's settings file, but it has a
few defaults of its own: which filename to look for, which text encoding
to use, how wide the name column is in print_configuration(), and how
chatty its logger is. Those live in one strongly-typed, validated object
loaded from environment variables (optionally via a .env file).

**Why not hardcode the defaults?**
  - Deployments can rename the default file (e.g. "myapp.hjson") without
    touching code.
  - Tests inject a StoreSettings directly instead of mutating globals.
  - Bad values (empty filename, negative width) fail at startup.

This only configures the store. It does not merge environment values into
the caller's record; the settings file is the single source for those.

This module uses python-dotenv to load .env files and dataclasses for type
safety.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env from the current directory (where the settings file also lives
# by default). Existing environment variables win over .env entries.
load_dotenv(dotenv_path=Path.cwd() / ".env")


DEFAULT_FILENAME = "appsettings.hjson"
DEFAULT_ENCODING = "utf-8"
DEFAULT_LABEL_WIDTH = 50
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class StoreSettings:
    """
    Defaults used by SettingsStore.

    Attributes:
        default_filename: Settings filename used when the caller does not
                          name one (default "appsettings.hjson").
        encoding: Text encoding for reading and writing settings files.
        label_width: Width the field name is padded to by
                     print_configuration() (default 50).
        log_level: Level for the store's logger (default "WARNING").
    """
    default_filename: str = DEFAULT_FILENAME
    encoding: str = DEFAULT_ENCODING
    label_width: int = DEFAULT_LABEL_WIDTH
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.default_filename or not self.default_filename.strip():
            raise ValueError(
                "SETTINGS_STORE_DEFAULT_FILENAME must not be empty. "
                "Unset it to use the default 'appsettings.hjson'."
            )
        if not self.encoding:
            raise ValueError("SETTINGS_STORE_ENCODING must not be empty.")
        if self.label_width <= 0:
            raise ValueError(
                f"label_width must be positive, got: {self.label_width}"
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {list(_LOG_LEVELS)}, got: {self.log_level}"
            )

    @property
    def logging_level(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level.upper())

    @classmethod
    def from_env(cls) -> "StoreSettings":
        """
        Load store settings from environment variables.

        **Environment variables** (all optional):
          - SETTINGS_STORE_DEFAULT_FILENAME: default "appsettings.hjson".
          - SETTINGS_STORE_ENCODING: default "utf-8".
          - SETTINGS_STORE_LABEL_WIDTH: default 50.
          - SETTINGS_STORE_LOG_LEVEL: default "WARNING".

        Returns:
            StoreSettings with values loaded from the environment.

        Raises:
            ValueError: If a variable is set to an invalid value.

        Usage example:
            >>> # In .env file:
            >>> # SETTINGS_STORE_DEFAULT_FILENAME=myapp.hjson
            >>>
            >>> settings = StoreSettings.from_env()
            >>> print(settings.default_filename)  # "myapp.hjson"
        """
        default_filename = os.getenv("SETTINGS_STORE_DEFAULT_FILENAME", DEFAULT_FILENAME)
        encoding = os.getenv("SETTINGS_STORE_ENCODING", DEFAULT_ENCODING)
        width_str = os.getenv("SETTINGS_STORE_LABEL_WIDTH", str(DEFAULT_LABEL_WIDTH))
        log_level = os.getenv("SETTINGS_STORE_LOG_LEVEL", DEFAULT_LOG_LEVEL)

        try:
            label_width = int(width_str)
        except ValueError:
            raise ValueError(
                f"SETTINGS_STORE_LABEL_WIDTH must be an integer, got: {width_str}"
            )

        return cls(
            default_filename=default_filename,
            encoding=encoding,
            label_width=label_width,
            log_level=log_level,
        )


# Lazily built singleton. Tests construct StoreSettings(...) directly or
# call reset_settings() after changing the environment.
_default_settings: Optional[StoreSettings] = None


def get_settings() -> StoreSettings:
    """
    Get the global StoreSettings singleton.

    Settings are loaded from the environment on first call, then cached.

    Returns:
        Global StoreSettings singleton.

    Raises:
        ValueError: If an environment variable holds an invalid value.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = StoreSettings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          monkeypatch.setenv("SETTINGS_STORE_LABEL_WIDTH", "20")
          reset_settings()
          assert get_settings().label_width == 20
      ```
    """
    global _default_settings
    _default_settings = None
