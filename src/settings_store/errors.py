"""
Exception hierarchy for the settings store.

**Conceptual**: Every failure the store can hit while locating, reading,
decoding, validating or writing a settings file surfaces as one of the
exceptions below. Each one names the attempted path so the caller can fix
the file without a debugger.

**Error kinds**:
  - SettingsNotFoundError: the resolved file does not exist at load time.
  - SettingsParseError: the text cannot be decoded into the record type
    (malformed JSON/Hjson, non-object root, uncoercible value).
  - SettingsValidationError: a required field has no value.
  - SettingsIOError: any other filesystem failure (permissions, bad path).

The subclasses also inherit from the matching built-in exception
(FileNotFoundError, ValueError, OSError) so callers that already catch the
built-ins keep working.

**Usage**: Let these propagate to the entry point at startup, or catch
SettingsStoreError to handle every store failure in one place.
"""

from pathlib import Path
from typing import Optional, Union


class SettingsStoreError(Exception):
    """
    Base exception for all settings store errors.

    Catch this to handle any failure raised by SettingsStore without caring
    about the specific kind.
    """
    pass


class SettingsNotFoundError(SettingsStoreError, FileNotFoundError):
    """Raised when the settings file does not exist at load time."""
    pass


class SettingsParseError(SettingsStoreError, ValueError):
    """
    Raised when file content cannot be decoded into the record type.

    Covers malformed JSON/Hjson text, a root that is not an object, a null
    document, and values that cannot be coerced to the declared field type.
    """
    pass


class SettingsIOError(SettingsStoreError, OSError):
    """Raised for read/write failures not covered by the other kinds."""
    pass


class SettingsValidationError(SettingsStoreError):
    """
    Raised by validate() when a required field has no value.

    Attributes:
        field_name: Name of the first missing field, or None when there was
                    no data to validate at all.
        path: The configured settings path, for diagnostics.
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        path: Optional[Union[str, Path]] = None,
    ):
        super().__init__(message)
        self.field_name = field_name
        self.path = path
