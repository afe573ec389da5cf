"""
Program settings store: load, validate, save and print a settings file.

A program describes its settings as a dataclass; SettingsStore (store.py)
reads a JSON or Hjson file into it, checks required fields, and writes it
back. Field rules live in fields.py, path handling in paths.py, text
conversion in codec.py and exceptions in errors.py.
"""
