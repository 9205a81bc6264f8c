"""Config file location: explicit path, current directory, home directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from yamlconfig.errors import NoReferenceError, PathResolutionError

__all__ = ["PathResolver"]


def _default_home() -> str:
    return str(Path.home())


class PathResolver:
    """Map a config file reference to exactly one absolute path.

    The reference is looked up in order:

    1. As given, made absolute against the current working directory.
    2. Under the invoking user's home directory. If no file exists there,
       ``create_default`` is called to write one and its path is returned.

    A reference that is absolute is still joined under the home directory
    in step 2, as a relative path.
    """

    def __init__(
        self,
        create_default: Callable[[str], None],
        home_dir: Callable[[], str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            create_default: Called with an absolute path to write a new
                default config file there.
            home_dir: Returns the current user's home directory. Defaults
                to :meth:`pathlib.Path.home`.
            logger: Logger for lookup progress. Defaults to
                ``yamlconfig.resolver``.
        """
        self._create_default = create_default
        self._home_dir = home_dir or _default_home
        self._logger = logger or logging.getLogger("yamlconfig.resolver")

    def resolve(self, reference: str) -> str:
        """Return the absolute path of the config file for ``reference``.

        Raises:
            NoReferenceError: If ``reference`` is empty.
            PathResolutionError: If the working or home directory cannot be
                determined, or the default file cannot be created.
        """
        if not reference:
            raise NoReferenceError()

        if os.path.isabs(reference):
            local_path = os.path.normpath(reference)
        else:
            try:
                cwd = os.getcwd()
            except OSError as e:
                raise PathResolutionError(
                    f"cannot determine working directory: {e}", path=reference, cause=e
                ) from e
            local_path = os.path.normpath(os.path.join(cwd, reference))
        if os.path.exists(local_path):
            return local_path

        self._logger.info("config file not found at %r, looking in users home directory", local_path)

        try:
            home = self._home_dir()
        except (OSError, RuntimeError, KeyError) as e:
            raise PathResolutionError(f"cannot determine home directory: {e}", path=reference, cause=e) from e

        home_path = os.path.normpath(os.path.join(home, reference.lstrip(os.sep)))
        if os.path.exists(home_path):
            return home_path

        self._logger.info("config file in home directory not found, creating new config file at %r", home_path)
        try:
            self._create_default(home_path)
        except Exception as e:
            raise PathResolutionError(
                f"cannot write new config file {home_path}: {e}", path=home_path, cause=e
            ) from e
        return home_path
