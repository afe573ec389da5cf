"""
Generic utility functions shared across modules.

Currently holds the logging setup used by the settings store.
"""
