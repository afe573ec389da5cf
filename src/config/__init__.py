"""
Configuration of the settings store itself.

Provides the strongly typed StoreSettings object (default filename,
encoding, report width, log level) loaded from environment variables with
upfront validation.
"""
