"""Plugin registry shared by engines."""

from __future__ import annotations

from typing import Any


class PluginRegistry:
    """Append-only list of plugins applied to every engine built from it.

    Engines read the registry once, at construction. No locking is done;
    register plugins at startup.
    """

    def __init__(self, plugins: list[Any] | None = None):
        self._plugins: list[Any] = list(plugins or [])

    def register(self, plugin: Any) -> None:
        self._plugins.append(plugin)

    def clear(self) -> None:
        self._plugins.clear()

    def get_all(self) -> list[Any]:
        return list(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)


default_registry = PluginRegistry()
