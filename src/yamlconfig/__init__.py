"""yamlconfig - Typed accessors over a YAML configuration file."""

from __future__ import annotations

import logging

# Root handle
from yamlconfig.config import YamlConfig, new

# Accessors
from yamlconfig.section import ConfigSection
from yamlconfig.duration import INVALID_DURATION, parse_duration
from yamlconfig.node import NodeKind

# Collaborators
from yamlconfig.loader import ConfigLoader, YamlLoader
from yamlconfig.resolver import PathResolver

# Errors
from yamlconfig.errors import (
    ConfigNotFoundError,
    ConfigParseError,
    DurationParseError,
    ErrorCodes,
    FatalConfigError,
    KeyNotFoundError,
    LoaderError,
    NoReferenceError,
    NotAMappingError,
    PathResolutionError,
    SectionNotAvailableError,
    TypeMismatchError,
    UnmarshalError,
    YamlConfigError,
)

logging.getLogger("yamlconfig").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Root handle
    "YamlConfig",
    "new",
    # Accessors
    "ConfigSection",
    "INVALID_DURATION",
    "parse_duration",
    "NodeKind",
    # Collaborators
    "ConfigLoader",
    "YamlLoader",
    "PathResolver",
    # Errors
    "ErrorCodes",
    "YamlConfigError",
    "KeyNotFoundError",
    "NotAMappingError",
    "SectionNotAvailableError",
    "TypeMismatchError",
    "DurationParseError",
    "NoReferenceError",
    "PathResolutionError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "LoaderError",
    "UnmarshalError",
    "FatalConfigError",
]
