"""Versioning and diff internals for ForgeKit."""

__version__ = "0.1.0"
