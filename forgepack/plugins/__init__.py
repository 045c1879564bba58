"""Plugin subsystem for ForgeKit lifecycle extensions."""

from forgepack.plugins.base import (
    PLUGIN_API_VERSION,
    PLUGIN_CONFIG_ENV_VAR,
    PLUGIN_CONFIG_VERSION,
    CommitEvent,
    LifecyclePlugin,
    RollbackEvent,
    VersionDiffEvent,
)
from forgepack.plugins.exceptions import PluginConfigError, PluginError, PluginLoadError
from forgepack.plugins.loader import (
    PluginSpec,
    instantiate_plugin,
    load_plugin_manager_from_file,
    parse_plugin_config,
)
from forgepack.plugins.manager import PluginDiagnostic, PluginManager
from forgepack.plugins.reference import LifecycleTracePlugin
from forgepack.plugins.runtime import (
    get_active_plugin_manager,
    reset_plugin_runtime_cache,
    use_plugin_manager,
)

__all__ = [
    "PLUGIN_API_VERSION",
    "PLUGIN_CONFIG_VERSION",
    "PLUGIN_CONFIG_ENV_VAR",
    "PluginError",
    "PluginConfigError",
    "PluginLoadError",
    "CommitEvent",
    "VersionDiffEvent",
    "RollbackEvent",
    "LifecyclePlugin",
    "PluginSpec",
    "PluginDiagnostic",
    "PluginManager",
    "LifecycleTracePlugin",
    "parse_plugin_config",
    "instantiate_plugin",
    "load_plugin_manager_from_file",
    "get_active_plugin_manager",
    "use_plugin_manager",
    "reset_plugin_runtime_cache",
]
