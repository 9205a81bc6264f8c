"""Root configuration handle: defaults, file resolution, loading."""

from __future__ import annotations

import logging
from typing import Any, Callable

from yamlconfig.errors import (
    KeyNotFoundError,
    LoaderError,
    PathResolutionError,
    SectionNotAvailableError,
    YamlConfigError,
)
from yamlconfig.loader import ConfigLoader, YamlLoader
from yamlconfig.resolver import PathResolver
from yamlconfig.section import ConfigSection

__all__ = ["YamlConfig", "new", "DEFAULT_FILE_MODE"]

DEFAULT_FILE_MODE = 0o644


class YamlConfig:
    """Configuration bound to a file reference.

    Typical use::

        def defaults(conf: YamlConfig) -> None:
            conf.set_default("server:port", 8080)

        conf = YamlConfig("app.yaml")
        conf.load(defaults)
        port = conf.root.get_int("server:port")

    The file reference is resolved with :class:`PathResolver`; when no file
    exists anywhere, the seeded defaults are written to a new file in the
    user's home directory.
    """

    def __init__(
        self,
        file_path: str,
        loader: ConfigLoader | None = None,
        resolver: PathResolver | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._reference = file_path
        self._logger = logger or logging.getLogger("yamlconfig.config")
        self._loader: ConfigLoader = loader if loader is not None else YamlLoader(logger=logger)
        self._resolver = resolver or PathResolver(
            create_default=lambda path: self._loader.write_config_file(path, DEFAULT_FILE_MODE),
            logger=logger,
        )
        self._file_path: str | None = None
        self._root = ConfigSection(self._loader.snapshot())
        self._loader.on_reload(self._root.replace)

    def __repr__(self) -> str:
        return f"YamlConfig(reference={self._reference!r}, file_path={self._file_path!r})"

    def __enter__(self) -> YamlConfig:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def reference(self) -> str:
        """The file reference this handle was created with."""
        return self._reference

    @property
    def file_path(self) -> str | None:
        """Absolute path of the loaded file, or None before :meth:`load`."""
        return self._file_path

    @property
    def root(self) -> ConfigSection:
        """Section over the whole document. Always reflects the latest load."""
        return self._root

    def set_default(self, key: str, value: Any) -> None:
        """Install ``value`` at ``key`` unless a value is already present.

        A scalar or sequence already stored on the path to ``key`` counts as
        present and is left untouched.
        """
        segments = key.split(":")
        for depth in range(1, len(segments) + 1):
            try:
                node = self._loader.get(":".join(segments[:depth]))
            except KeyNotFoundError:
                break
            if depth < len(segments) and not isinstance(node, dict):
                return
        else:
            return
        self._loader.set(key, value)
        self._refresh()

    def load(self, load_defaults: Callable[[YamlConfig], None], watch: bool = False) -> None:
        """Seed defaults, locate the config file and read it.

        Args:
            load_defaults: Called with this handle before the file is
                located, typically to call :meth:`set_default`.
            watch: Keep reloading the file when it changes on disk.

        Raises:
            PathResolutionError: If the config file cannot be located or created.
            LoaderError: If the file cannot be read.
        """
        load_defaults(self)

        try:
            file_path = self._resolver.resolve(self._reference)
        except YamlConfigError as e:
            raise PathResolutionError(
                f"get current file path: {e.message}", path=self._reference, cause=e
            ) from e

        self._logger.info("load config from path: %r", file_path)
        if watch:
            operation, read = "read and watch config", self._loader.read_and_watch_config_file
        else:
            operation, read = "read config", self._loader.read_config_file
        try:
            read(file_path)
        except (YamlConfigError, OSError) as e:
            raise LoaderError(operation, e) from e

        self._file_path = file_path
        self._refresh()

    def read_bytes(self, data: bytes | str) -> None:
        """Load a document from memory instead of a file."""
        try:
            self._loader.read_config_bytes(data)
        except YamlConfigError as e:
            raise LoaderError("read config bytes", e) from e
        self._refresh()

    def get_config_section(self, key: str) -> ConfigSection:
        """Return a new section over the node at ``key`` of the document.

        Raises:
            KeyNotFoundError: If ``key`` does not resolve.
            SectionNotAvailableError: If ``key`` holds a null value.
        """
        try:
            data = self._loader.get(key)
        except KeyNotFoundError as e:
            raise KeyNotFoundError(key, context="get data", cause=e) from e
        if data is None:
            raise SectionNotAvailableError(key)
        return ConfigSection(data)

    def close(self) -> None:
        """Stop watching the config file."""
        self._loader.stop_watching()

    def _refresh(self) -> None:
        self._root.replace(self._loader.snapshot())


def new(file_path: str) -> YamlConfig:
    """Create a configuration handle for ``file_path``."""
    return YamlConfig(file_path)
