"""Extension layer: dispatcher lifecycle hooks via pluggy.

Discovery: entry_points (pip-installed) plus single-file local plugins.
INVARIANT: Plugin failures are warnings, never errors.
"""

from frontline.plugins.hookspecs import hookimpl
from frontline.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
