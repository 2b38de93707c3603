"""Loading plugins from a directory and running them over note text."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path

PLUGIN_SUFFIX = ".wasm"

# Plugins receive the input length as a signed 32-bit integer.
_MAX_INPUT_BYTES = 2**31 - 1


class PluginError(Exception):
    """A plugin could not be loaded or run."""


class PluginNotFoundError(PluginError):
    """No plugin of the given name is loaded."""

    def __init__(self, name: str) -> None:
        super().__init__(f"plugin not found: {name}")
        self.name = name


class WasmPlugin:
    """A plugin module known by the stem of its file name.

    Without a module runtime, processing yields empty output.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @classmethod
    def load(cls, path: str | PathLike[str]) -> WasmPlugin:
        """Register the plugin at a path under the stem of its file name."""
        stem = Path(os.fspath(path)).stem
        return cls(stem or "unknown")

    def process(self, text: str) -> str:
        """Run the plugin over some text and return its output.

        Raises PluginError when the input is too large to hand to a plugin.
        """
        size = len(text.encode("utf-8"))
        if size > _MAX_INPUT_BYTES:
            raise PluginError(
                f"wasm error: input of {size} bytes exceeds the plugin interface limit"
            )
        return ""

    def __repr__(self) -> str:
        return f"WasmPlugin(name={self.name!r})"


class PluginManager:
    """Holds loaded plugins by name."""

    def __init__(self) -> None:
        self._plugins: dict[str, WasmPlugin] = {}

    def load_from_directory(self, directory: str | PathLike[str]) -> list[str]:
        """Load every .wasm file in a directory; return the names loaded.

        A directory that does not exist yields no plugins.
        """
        root = Path(os.fspath(directory))
        if not root.exists():
            return []
        try:
            entries = sorted(root.iterdir())
        except OSError as exc:
            raise PluginError(f"io error: {exc}") from exc
        loaded: list[str] = []
        for entry in entries:
            if entry.suffix != PLUGIN_SUFFIX:
                continue
            plugin = WasmPlugin.load(entry)
            self._plugins[plugin.name] = plugin
            loaded.append(plugin.name)
        return loaded

    def get(self, name: str) -> WasmPlugin | None:
        """Return the plugin of this name, or None."""
        return self._plugins.get(name)

    def process_all(self, text: str) -> list[tuple[str, str]]:
        """Run every plugin over the text; plugins that fail are left out."""
        results: list[tuple[str, str]] = []
        for name, plugin in self._plugins.items():
            try:
                results.append((name, plugin.process(text)))
            except PluginError:
                continue
        return results

    def list(self) -> list[str]:
        """Names of the loaded plugins."""
        return list(self._plugins)