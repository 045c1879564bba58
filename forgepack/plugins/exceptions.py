"""Errors raised while loading ForgeKit lifecycle plugins."""


class PluginError(Exception):
    """Base class for plugin config and loading failures."""


class PluginConfigError(PluginError):
    """Raised when a plugin config file is not valid JSON or its entries
    do not match config version ``1``."""


class PluginLoadError(PluginError):
    """Raised when a ``module:attribute`` entrypoint cannot be built into a
    plugin with a supported ``api_version``."""
