"""
SettingsStore: load, validate, save and print a program's settings file.

**Conceptual**: A program describes its settings as a record type (usually
a dataclass) and hands that type to a SettingsStore. The store finds the
settings file, decodes it (JSON or Hjson) into an instance of the record,
checks that every required field has a value, and can write the record
back to disk. That is the whole job; there is no layering, caching or
reloading.

**Typical startup**:
  ```python
  @dataclass
  class Configuration:
      option1: str = ""
      option2: str = optional(default="")
      option3: str = ""

  config = (
      SettingsStore(Configuration)
      .use_app_data_folder("AcmeCompany")
      .load()
      .validate()
      .print_configuration()
      .data
  )
  ```

**Path configuration**: every use_*() call swaps in a new immutable
SettingsPath and returns the store for chaining. The file path is resolved
when load()/save() runs.

**Threading**: a store holds no file handles between calls but is not
locked; share one instance across threads only with external locking.
"""

import os
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, Optional, Type, TypeVar, Union

from src.config.settings import StoreSettings, get_settings
from src.settings_store import codec, paths
from src.settings_store.errors import (
    SettingsIOError,
    SettingsNotFoundError,
    SettingsParseError,
    SettingsStoreError,
    SettingsValidationError,
)
from src.settings_store.fields import (
    build_instance,
    describe_fields,
    find_missing,
    to_plain,
)
from src.settings_store.paths import SettingsPath
from src.utils.logging_setup import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class SettingsStore(Generic[T]):
    """
    Load and save program settings held in a caller-defined record type.

    Attributes:
        config_type: The record type settings files are decoded into.
        optional_fields: Field names exempt from validation, in addition to
                         fields declared with optional().
        settings: Store defaults (filename, encoding, report width).
        path: Current folder + filename of the settings file.
        data: The last successfully loaded record, or None.
    """

    def __init__(
        self,
        config_type: Type[T],
        optional_fields: Iterable[str] = (),
        settings: Optional[StoreSettings] = None,
    ):
        """
        Create a store for ``config_type``.

        The settings file defaults to ``appsettings.hjson`` (or the
        configured default filename) in the current working directory.
        An ``.hjson`` extension selects the Hjson format, anything else JSON.

        Args:
            config_type: Record type to decode settings into.
            optional_fields: Names of fields that may be left empty.
            settings: Store defaults. Loaded from the environment if None.
        """
        self.config_type = config_type
        self.optional_fields = frozenset(optional_fields)
        self.settings = settings if settings is not None else get_settings()
        self.path = SettingsPath.default(self.settings.default_filename)
        self.data: Optional[T] = None

    def __repr__(self) -> str:
        return (
            f"SettingsStore({self.config_type.__name__}, "
            f"path='{self.config_path_and_filename}')"
        )

    # ------------------------------------------------------------------
    # Path configuration
    # ------------------------------------------------------------------

    @property
    def config_filename(self) -> str:
        """Bare filename of the settings file."""
        return self.path.filename

    @property
    def config_path_and_filename(self) -> Path:
        """Absolute path of the settings file."""
        return self.path.resolved

    def _set_path(self, path: SettingsPath) -> "SettingsStore[T]":
        self.path = path
        logger.debug("Settings path set to %s", path.resolved)
        return self

    def use_full_path_and_filename(self, full_path: Union[str, os.PathLike]) -> "SettingsStore[T]":
        """
        Use an explicit path and filename, e.g. from a command line argument.
        """
        return self._set_path(self.path.with_full_path(full_path))

    def use_path_relative_to_special_folder(self, full_path: str) -> "SettingsStore[T]":
        """
        Use a path relative to a well-known folder.

        Examples:
            %APPLICATIONDATA%/AcmeCompany/appsettings.json
            %LOCALAPPLICATIONDATA%/AcmeCompany/appsettings.json
            %COMMONDOCUMENTS%/MyProgram/appsettings.json
            %MYDOCUMENTS%/MyProgram/appsettings.json
            %TEMP%/MyProgram/appsettings.json

        Unknown tokens are kept as written.
        """
        return self._set_path(self.path.with_full_path(paths.expand_special_folders(full_path)))

    def use_filename(self, filename: str) -> "SettingsStore[T]":
        """Use another filename in the current folder."""
        return self._set_path(self.path.with_filename(filename))

    def use_app_data_folder(self, subfolder: Optional[str] = None) -> "SettingsStore[T]":
        """
        Keep the settings file in the per-user application data folder,
        optionally in ``subfolder`` beneath it.
        """
        folder = paths.app_data_folder()
        if subfolder:
            folder = os.path.join(folder, subfolder)
        return self._set_path(self.path.with_folder(folder))

    def use_folder(self, folder: Union[str, os.PathLike]) -> "SettingsStore[T]":
        """Keep the settings file in ``folder``."""
        return self._set_path(self.path.with_folder(folder))

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load_from(self, path: Union[str, os.PathLike]) -> Optional[T]:
        """
        Read one settings file into a new record instance.

        Does not touch ``self.data``; use load() for that.

        Args:
            path: File to read. ``.hjson`` files are read as Hjson, all
                  others as canonical JSON.

        Returns:
            New instance of config_type, or None if the file holds "null".

        Raises:
            SettingsNotFoundError: If the file does not exist.
            SettingsParseError: If the content cannot be decoded into
                                config_type.
            SettingsIOError: If the file cannot be read.
        """
        path = Path(path)
        if not path.is_file():
            raise SettingsNotFoundError(
                f"Read error! The file named '{path}' does not exist"
            )

        try:
            text = path.read_text(encoding=self.settings.encoding)
        except UnicodeDecodeError as e:
            raise SettingsParseError(
                f"Settings file '{path}' is not valid {self.settings.encoding} text: {e}"
            ) from e
        except OSError as e:
            raise SettingsIOError(f"Unable to read settings file '{path}': {e}") from e

        try:
            value = codec.decode(text, relaxed=codec.is_relaxed(path))
        except SettingsParseError as e:
            raise SettingsParseError(f"Unable to parse settings file '{path}': {e}") from e

        return build_instance(self.config_type, value, context=str(path))

    def load(self) -> "SettingsStore[T]":
        """
        Load the configured settings file into ``self.data``.

        On failure ``self.data`` keeps its previous value.

        Returns:
            The store, for chaining.

        Raises:
            SettingsNotFoundError, SettingsParseError, SettingsIOError:
                With the configured path in the message and the original
                error chained.
        """
        path = self.config_path_and_filename
        try:
            data = self.load_from(path)
        except SettingsStoreError as e:
            raise type(e)(f"Unable to read the configuration file '{path}'. {e}") from e

        if data is None:
            raise SettingsParseError(
                f"Unable to read the configuration file '{path}'. The file contains no settings."
            )

        self.data = data
        logger.info("Loaded settings from %s", path)
        return self

    def save(self, instance: Optional[T] = None) -> "SettingsStore[T]":
        """
        Write a record to the configured settings file.

        The file is overwritten. ``.hjson`` files get braceless Hjson;
        other extensions get indented canonical JSON. Missing parent
        folders are created.

        Args:
            instance: Record to write. Defaults to ``self.data``.

        Returns:
            The store, for chaining.

        Raises:
            SettingsStoreError: If there is nothing to save.
            SettingsIOError: If the file cannot be written.
        """
        if instance is None:
            instance = self.data
        path = self.config_path_and_filename
        if instance is None:
            raise SettingsStoreError(f"Nothing to save to '{path}': no settings loaded.")

        text = codec.encode(to_plain(instance), relaxed=codec.is_relaxed(path))

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding=self.settings.encoding)
        except OSError as e:
            raise SettingsIOError(f"Unable to write the configuration file '{path}': {e}") from e

        logger.info("Saved settings to %s", path)
        return self

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def is_valid(self, instance: Optional[T]) -> bool:
        """
        Check that every required field of ``instance`` has a value.

        A field has no value if it is text that is None, empty or blank, or
        a number equal to zero. Optional fields are skipped.

        Returns:
            True if no required field is missing.
        """
        fields = describe_fields(instance, self.optional_fields)
        return find_missing(fields) is None

    def validate(self) -> "SettingsStore[T]":
        """
        Fail-fast version of is_valid() for the loaded ``self.data``.

        Returns:
            The store, for chaining.

        Raises:
            SettingsValidationError: Naming the first missing field and the
                                     configured path.
        """
        path = self.config_path_and_filename
        if self.data is None:
            raise SettingsValidationError(
                f"No configuration loaded from '{path}'. Call load() first.",
                path=path,
            )

        missing = find_missing(describe_fields(self.data, self.optional_fields))
        if missing is not None:
            logger.warning("Settings file %s has no value for '%s'", path, missing.name)
            raise SettingsValidationError(
                f"There's an error in your configuration file '{path}'. "
                f"There's no value for property '{missing.name}'",
                field_name=missing.name,
                path=path,
            )
        return self

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def print_configuration(
        self, sink: Optional[Callable[[str], Any]] = None
    ) -> "SettingsStore[T]":
        """
        Write every field of ``self.data`` to ``sink``, one line per field.

        Lines look like ``<name padded to 50 columns>: <value>``, after a
        "Configuration:" header. Pass a logger method (e.g. logger.info) to
        send the report to a log instead of standard output.

        Args:
            sink: Callable taking one string. Defaults to print.

        Returns:
            The store, for chaining.
        """
        if sink is None:
            sink = print
        width = self.settings.label_width

        sink("Configuration:")
        for field in describe_fields(self.data, self.optional_fields):
            sink(f"{field.name:<{width}}: {field.value}")
        return self
