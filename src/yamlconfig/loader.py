"""YAML document store backing the configuration accessors.

The store holds one parsed tree. Values installed with :meth:`YamlLoader.set`
act as defaults: documents read afterwards are merged over them, so a key
missing from the file keeps its default.
"""

from __future__ import annotations

import copy
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Protocol

import yaml

from yamlconfig.errors import (
    ConfigNotFoundError,
    ConfigParseError,
    KeyNotFoundError,
    NotAMappingError,
)
from yamlconfig.node import kind_of

__all__ = ["ConfigLoader", "YamlLoader", "deep_merge"]

DEFAULT_POLL_INTERVAL = 1.0


class ConfigLoader(Protocol):
    """Operations the root configuration handle needs from a document store."""

    def get(self, path: str) -> Any: ...

    def set(self, path: str, value: Any) -> None: ...

    def read_config_file(self, path: str) -> None: ...

    def read_and_watch_config_file(self, path: str) -> None: ...

    def read_config_bytes(self, data: bytes | str) -> None: ...

    def write_config_file(self, path: str, mode: int) -> None: ...

    def on_reload(self, callback: Callable[[dict[str, Any]], None]) -> None: ...

    def stop_watching(self) -> None: ...

    def snapshot(self) -> dict[Any, Any]: ...


def deep_merge(base: dict[Any, Any], overlay: dict[Any, Any]) -> dict[Any, Any]:
    """Return a new dict with ``overlay`` merged recursively over ``base``."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse(data: bytes | str, source: str) -> dict[Any, Any]:
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML in {source}: {e}") from e
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise NotAMappingError(actual=kind_of(document).value)
    return document


class YamlLoader:
    """In-memory YAML configuration tree with file loading and watching.

    Thread safety:
        Internally synchronized. The tree is never mutated in place by a
        reload; a new tree is built and swapped in, so trees handed out by
        :meth:`snapshot` and :meth:`get` stay consistent.
    """

    def __init__(
        self,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: logging.Logger | None = None,
    ) -> None:
        self._tree: dict[Any, Any] = {}
        self._defaults: dict[Any, Any] = {}
        self._lock = threading.RLock()
        self._listeners: list[Callable[[dict[str, Any]], None]] = []
        self._poll_interval = poll_interval
        self._watch_thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._logger = logger or logging.getLogger("yamlconfig.loader")

    # ----- Tree access -----

    def get(self, path: str) -> Any:
        """Return the node at a colon-delimited ``path`` of the document.

        Raises:
            KeyNotFoundError: If any segment is missing.
        """
        with self._lock:
            current: Any = self._tree
            for segment in path.split(":"):
                if not isinstance(current, dict) or segment not in current:
                    raise KeyNotFoundError(path)
                current = current[segment]
            return current

    def set(self, path: str, value: Any) -> None:
        """Install ``value`` at ``path``, creating intermediate mappings."""
        segments = path.split(":")
        with self._lock:
            self._defaults = self._assign(self._defaults, segments, value)
            self._tree = self._assign(self._tree, segments, value)

    @staticmethod
    def _assign(tree: dict[Any, Any], segments: list[str], value: Any) -> dict[Any, Any]:
        # Copy along the path so trees already handed out are not mutated.
        root = dict(tree)
        node = root
        for segment in segments[:-1]:
            child = node.get(segment)
            child = dict(child) if isinstance(child, dict) else {}
            node[segment] = child
            node = child
        node[segments[-1]] = value
        return root

    def snapshot(self) -> dict[Any, Any]:
        """Return the current tree. Callers must not mutate it."""
        with self._lock:
            return self._tree

    # ----- Loading -----

    def read_config_bytes(self, data: bytes | str) -> None:
        """Load a serialized document from memory."""
        self._install(_parse(data, "<bytes>"))

    def read_config_file(self, path: str) -> None:
        """Load the document stored at ``path``.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigParseError: If the file is not valid YAML.
            NotAMappingError: If the document root is not a mapping.
        """
        self._install(self._read_file(path))

    def read_and_watch_config_file(self, path: str) -> None:
        """Load ``path`` and keep reloading it whenever it changes on disk."""
        self.read_config_file(path)
        self.stop_watching()
        self._stop_event = threading.Event()
        self._watch_thread = threading.Thread(
            target=self._watch,
            args=(path, self._stop_event),
            name=f"yamlconfig-watch:{path}",
            daemon=True,
        )
        self._watch_thread.start()
        self._logger.debug("Watching config file %s every %ss", path, self._poll_interval)

    def on_reload(self, callback: Callable[[dict[str, Any]], None]) -> None:
        """Register ``callback`` to receive the new tree after each watched reload."""
        with self._lock:
            self._listeners.append(callback)

    def stop_watching(self) -> None:
        """Stop the watch thread, if one is running."""
        thread = self._watch_thread
        if thread is None:
            return
        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join()
        self._watch_thread = None

    def _read_file(self, path: str) -> dict[Any, Any]:
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigNotFoundError(config_path=path)
        return _parse(file_path.read_bytes(), path)

    def _install(self, document: dict[Any, Any]) -> dict[Any, Any]:
        with self._lock:
            self._tree = deep_merge(self._defaults, document)
            return self._tree

    @staticmethod
    def _signature(path: str) -> tuple[int, int] | None:
        try:
            st = os.stat(path)
        except OSError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def _watch(self, path: str, stop: threading.Event) -> None:
        last = self._signature(path)
        while not stop.wait(self._poll_interval):
            current = self._signature(path)
            if current is None or current == last:
                continue
            last = current
            try:
                tree = self._install(self._read_file(path))
            except Exception as e:
                self._logger.warning("Reloading config file %s failed, keeping previous config: %s", path, e)
                continue
            self._logger.info("Reloaded config file %s", path)
            with self._lock:
                listeners = list(self._listeners)
            for callback in listeners:
                try:
                    callback(tree)
                except Exception:
                    self._logger.exception("Config reload listener %r failed", callback)

    # ----- Writing -----

    def write_config_file(self, path: str, mode: int) -> None:
        """Write the current tree to ``path`` and set its permission bits."""
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            tree = copy.deepcopy(self._tree)
        with open(file_path, "w") as f:
            yaml.safe_dump(tree, f, default_flow_style=False)
        os.chmod(file_path, mode)
