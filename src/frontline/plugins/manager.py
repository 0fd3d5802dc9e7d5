"""Plugin discovery and loading.

Discovery: the ``frontline.plugins`` entry-point group via pluggy, plus
single-file plugins from a local directory (``.frontline/plugins/`` by
default).
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import Any

import pluggy

from frontline.plugins.hookspecs import PROJECT_NAME, FrontlineHookSpec

ENTRY_POINT_GROUP = "frontline.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Registers plugins and relays dispatcher lifecycle hooks to them."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FrontlineHookSpec)
        self._loaded = False

    def discover_and_load(
        self,
        *,
        entry_points: bool = True,
        local_dir: Path | None = None,
    ) -> list[str]:
        """Load entry-point plugins and local single-file plugins.

        Returns the names of all registered plugins.
        """
        if entry_points:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def notify(self, hook_name: str, warnings: list[str], **payload: Any) -> None:
        """Call *hook_name* on every plugin.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")

    def _discover_local(self, local_dir: Path) -> None:
        """Load every ``*.py`` in *local_dir* not starting with ``_``.

        Classes defined in the module that carry ``@hookimpl`` methods are
        instantiated and registered. A broken file is logged and skipped.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"frontline_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr, cls in inspect.getmembers(module, inspect.isclass):
                if cls.__module__ != module_name or not _has_hook_impls(cls):
                    continue
                try:
                    self.register_plugin(cls(), name=f"{module_name}.{cls.__name__}")
                except Exception:
                    logger.warning("Failed to instantiate plugin %s", cls.__name__, exc_info=True)


def _has_hook_impls(cls: type) -> bool:
    """Whether *cls* has methods marked with ``@hookimpl`` (pluggy sets ``frontline_impl``)."""
    marker = f"{PROJECT_NAME}_impl"
    for name in dir(cls):
        if name.startswith("_"):
            continue
        if getattr(getattr(cls, name, None), marker, None):
            return True
    return False
