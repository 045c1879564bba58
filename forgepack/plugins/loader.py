"""Versioned plugin configuration loader."""

from __future__ import annotations

from dataclasses import dataclass, field
import importlib
import inspect
import json
from pathlib import Path
from typing import Any

from forgepack.plugins.base import PLUGIN_API_VERSION, PLUGIN_CONFIG_VERSION
from forgepack.plugins.exceptions import PluginConfigError, PluginLoadError
from forgepack.plugins.manager import PluginManager

_ENTRY_KEYS = frozenset({"entrypoint", "options", "enabled"})


@dataclass(frozen=True, slots=True)
class PluginSpec:
    """One validated entry of a plugin config file."""

    index: int
    entrypoint: str
    options: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True

    @property
    def module_name(self) -> str:
        return self.entrypoint.partition(":")[0]

    @property
    def attribute(self) -> str:
        return self.entrypoint.partition(":")[2]


def load_plugin_manager_from_file(path: str | Path) -> PluginManager:
    """Load a plugin manager from JSON config."""
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise PluginConfigError(f"Invalid plugin config JSON ({config_path}): {error}") from error

    specs = parse_plugin_config(raw, source=str(config_path))
    plugins = [instantiate_plugin(spec) for spec in specs if spec.enabled]
    return PluginManager(plugins=tuple(plugins))


def parse_plugin_config(raw: Any, *, source: str = "<config>") -> list[PluginSpec]:
    if not isinstance(raw, dict):
        raise PluginConfigError(f"Plugin config must be a JSON object ({source}).")

    version = raw.get("config_version")
    if version != PLUGIN_CONFIG_VERSION:
        raise PluginConfigError(
            "Unsupported plugin config version "
            f"{version!r}; expected {PLUGIN_CONFIG_VERSION}."
        )

    entries = raw.get("plugins")
    if not isinstance(entries, list):
        raise PluginConfigError("Plugin config key 'plugins' must be a JSON array.")

    return [_parse_entry(entry, index=index) for index, entry in enumerate(entries, start=1)]


def _parse_entry(entry: Any, *, index: int) -> PluginSpec:
    if not isinstance(entry, dict):
        raise PluginConfigError(f"Plugin entry #{index} must be a JSON object.")

    unknown = sorted(set(entry.keys()) - _ENTRY_KEYS)
    if unknown:
        raise PluginConfigError(
            f"Plugin entry #{index} contains unsupported keys: {', '.join(unknown)}"
        )

    enabled = entry.get("enabled", True)
    if not isinstance(enabled, bool):
        raise PluginConfigError(f"Plugin entry #{index} key 'enabled' must be boolean.")

    entrypoint = entry.get("entrypoint")
    if not isinstance(entrypoint, str) or ":" not in entrypoint:
        raise PluginConfigError(
            f"Plugin entry #{index} key 'entrypoint' must be 'module:attribute'."
        )

    options = entry.get("options", {})
    if not isinstance(options, dict):
        raise PluginConfigError(f"Plugin entry #{index} key 'options' must be a JSON object.")

    return PluginSpec(index=index, entrypoint=entrypoint, options=dict(options), enabled=enabled)


def instantiate_plugin(spec: PluginSpec) -> object:
    """Import, construct and version-check one plugin."""
    try:
        module = importlib.import_module(spec.module_name)
    except Exception as error:
        raise PluginLoadError(
            f"Plugin entry #{spec.index} failed to import module '{spec.module_name}': {error}"
        ) from error

    target = getattr(module, spec.attribute, None)
    if target is None:
        raise PluginLoadError(
            f"Plugin entry #{spec.index} could not find attribute "
            f"'{spec.attribute}' in '{spec.module_name}'."
        )

    if inspect.isclass(target) or callable(target):
        try:
            plugin = target(**spec.options)
        except Exception as error:
            raise PluginLoadError(
                f"Plugin entry #{spec.index} failed to instantiate '{spec.entrypoint}' "
                f"with options {sorted(spec.options.keys())}: {error}"
            ) from error
    elif spec.options:
        raise PluginLoadError(
            f"Plugin entry #{spec.index} uses non-callable '{spec.entrypoint}' "
            "and cannot accept options."
        )
    else:
        plugin = target

    version = str(getattr(plugin, "api_version", PLUGIN_API_VERSION))
    expected_major = PLUGIN_API_VERSION.split(".", 1)[0]
    if version.split(".", 1)[0] != expected_major:
        raise PluginLoadError(
            f"Plugin entry #{spec.index} '{spec.entrypoint}' declares unsupported api_version "
            f"{version!r}; supported major version is {expected_major}."
        )
    return plugin
