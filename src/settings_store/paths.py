"""
Settings file path resolution.

**Conceptual**: A settings path is two independent parts, a folder and a
filename. Keeping them apart (instead of one pre-joined string) means the
order of configuration calls does not matter: setting the folder and then
the filename gives the same result as the reverse.

SettingsPath is immutable. Every path-configuration call on the store
produces a new SettingsPath with dataclasses.replace(); the joined,
absolute path is only computed when it is needed.

**Special folders**: a path string may embed placeholder tokens that are
expanded by plain substring replacement:

    %APPLICATIONDATA%       per-user (roaming) application data
    %LOCALAPPLICATIONDATA%  per-user local application data
    %COMMONDOCUMENTS%       documents shared by all users
    %MYDOCUMENTS%           the user's documents folder
    %TEMP%                  the temp directory

Unknown tokens are left in the string untouched. No legality check is made
on the result; a bad path fails later, when the file is read or written.
"""

import os
import sys
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import platformdirs


PathLike = Union[str, os.PathLike]


def app_data_folder() -> str:
    """Per-user application data folder (roaming on Windows)."""
    return platformdirs.user_data_dir(roaming=True)


def local_app_data_folder() -> str:
    """Per-user application data folder that stays on this machine."""
    return platformdirs.user_data_dir(roaming=False)


def common_documents_folder() -> str:
    """Documents folder shared by all users of the machine."""
    if sys.platform == "win32":
        public = os.environ.get("PUBLIC", r"C:\Users\Public")
        return os.path.join(public, "Documents")
    return platformdirs.site_data_dir()


def user_documents_folder() -> str:
    """The current user's documents folder."""
    return platformdirs.user_documents_dir()


def temp_folder() -> str:
    """The temp directory used by the tempfile module."""
    return tempfile.gettempdir()


# Placeholder token -> folder lookup. Lookups run only when the token is used.
SPECIAL_FOLDER_TOKENS: Dict[str, Callable[[], str]] = {
    "%APPLICATIONDATA%": app_data_folder,
    "%LOCALAPPLICATIONDATA%": local_app_data_folder,
    "%COMMONDOCUMENTS%": common_documents_folder,
    "%MYDOCUMENTS%": user_documents_folder,
    "%TEMP%": temp_folder,
}


def expand_special_folders(path: str) -> str:
    """
    Replace every known placeholder token in ``path`` with its folder.

    Args:
        path: Path string, e.g. "%TEMP%/MyProgram/appsettings.hjson".

    Returns:
        The path with known tokens replaced; unknown tokens stay verbatim.

    Usage example:
        >>> expand_special_folders("%TEMP%/demo/appsettings.hjson")
        '/tmp/demo/appsettings.hjson'
    """
    for token, lookup in SPECIAL_FOLDER_TOKENS.items():
        if token in path:
            path = path.replace(token, lookup())
    return path


@dataclass(frozen=True)
class SettingsPath:
    """
    Immutable folder + filename pair for a settings file.

    Attributes:
        folder: Directory holding the file (absolute or relative to the
                current directory at resolve time).
        filename: Bare file name, e.g. "appsettings.hjson".
    """
    folder: str
    filename: str

    @classmethod
    def default(cls, filename: str, folder: Optional[PathLike] = None) -> "SettingsPath":
        """Default path: ``filename`` in ``folder`` (current directory if None)."""
        return cls(folder=str(folder if folder is not None else Path.cwd()), filename=filename)

    @property
    def resolved(self) -> Path:
        """The absolute path of the settings file."""
        return (Path(self.folder) / self.filename).absolute()

    def with_full_path(self, full_path: PathLike) -> "SettingsPath":
        """
        Split a full path into folder and filename.

        A relative ``full_path`` is made absolute against the current
        directory now, not when the path is resolved later.
        """
        p = Path(full_path).absolute()
        return replace(self, folder=str(p.parent), filename=p.name)

    def with_filename(self, filename: str) -> "SettingsPath":
        return replace(self, filename=filename)

    def with_folder(self, folder: PathLike) -> "SettingsPath":
        return replace(self, folder=str(folder))

    def __str__(self) -> str:
        return str(self.resolved)
