"""
settings_store – Demo entry point.

Reads appsettings.hjson (or the file named on the command line) into a
small Configuration dataclass, then optionally validates it and prints it.

**Usage**:
    From project root:
    ```bash
    python main.py                                  # ./appsettings.hjson
    python main.py path/to/settings.hjson --validate --print
    ```

**Exit codes**:
  - 0: Settings loaded (and validated, if asked).
  - 1: Settings file missing, unreadable, malformed or incomplete.
"""

import argparse
import sys
from dataclasses import dataclass

from src.settings_store.errors import SettingsStoreError
from src.settings_store.fields import optional
from src.settings_store.store import SettingsStore


@dataclass
class Configuration:
    """
    Sample settings record.

    Fields may be marked optional; they are then skipped by validate() and
    is_valid():

        option2: str = optional(default="")
    """
    option1: str = ""
    option2: str = optional(default="")
    option3: str = ""


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: settings_file (str or None),
        validate (bool), print (bool).
    """
    parser = argparse.ArgumentParser(
        description="Load a program settings file (JSON or Hjson) and show it",
        epilog="""
Examples:
  # Load ./appsettings.hjson
  python main.py

  # Load a specific file, check all required values are set and print them
  python main.py C:/my/special/folder/settings.hjson --validate --print

  # Folder tokens are expanded
  python main.py "%APPLICATIONDATA%/AcmeCompany/appsettings.hjson"
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "settings_file",
        nargs="?",
        default=None,
        help="Settings file to load (default: appsettings.hjson in the current folder)",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Fail if a required setting has no value",
    )

    parser.add_argument(
        "--print",
        action="store_true",
        help="Print every setting after loading",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Load the settings file and report the outcome."""
    args = parse_args(argv)

    store = SettingsStore(Configuration)
    if args.settings_file:
        store.use_path_relative_to_special_folder(args.settings_file)

    print("Demo for the settings store")

    try:
        store.load()
        if args.validate:
            store.validate()
    except SettingsStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"A value from my settings file: {store.data.option1}")

    if args.print:
        store.print_configuration()

    return 0


if __name__ == "__main__":
    sys.exit(main())
