"""Loading the moduledev registry from ``moduledev.properties``.

The registry maps module names to source directories on your hard drive::

    bajaScript=/home/me/niagara/dev/bajaScript
    bajaux=/home/me/niagara/dev/bajaux

A registry that cannot be read or parsed is treated as empty: every module
then resolves from the jars in ``niagara_home/modules``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import javaproperties

from .config import ResolverConfig
from .errors import ConfigurationError
from .paths import get_default_file_path
from .paths import get_niagara_home
from .resolver import Resolver

logger = logging.getLogger(__name__)


def parse_properties(text: str) -> dict[str, str]:
    """Parse Java ``.properties`` text into a dict.

    Raises:
        ValueError: Malformed ``\\uxxxx`` escape
    """
    return javaproperties.loads(text)


def from_raw_string(text: str, config: ResolverConfig | None = None) -> Resolver:
    """Parse a raw string (in Java properties format) into a Resolver.

    Args:
        text: Properties string, in the form expected by moduledev.properties
        config: Resolver options

    Raises:
        ValueError: Empty properties string
    """
    if not text:
        raise ValueError("properties string must be provided")

    try:
        registry = parse_properties(text)
    except ValueError as e:
        logger.error(f"Could not parse raw property string {text!r} ({e}). No moduledev resolution will occur.")
        registry = {}

    return Resolver(registry, config)


def load_registry_file(file_name: str | Path) -> dict[str, str]:
    """Read a moduledev.properties file.

    Returns an empty registry if the file is missing or unparsable.
    """
    path = Path(file_name)
    try:
        # Binary streams are decoded as ISO-8859-1, like java.util.Properties
        with path.open("rb") as f:
            registry = javaproperties.load(f)
    except OSError as e:
        logger.warning(f"File at {path} could not be loaded ({e}). No moduledev resolution will occur.")
        return {}
    except ValueError as e:
        logger.warning(f"File at {path} could not be parsed ({e}). No moduledev resolution will occur.")
        return {}

    logger.debug(f"Loaded {len(registry)} moduledev entries from {path}")
    return registry


def from_file(file_name: str | Path | None = None, config: ResolverConfig | None = None) -> Resolver:
    """Parse a moduledev.properties file into a Resolver.

    Args:
        file_name: Path to the properties file; defaults to
            ``$niagara_home/etc/moduledev.properties``
        config: Resolver options

    Raises:
        ConfigurationError: niagara_home could not be determined
    """
    if file_name is None:
        file_name = get_default_file_path(config)

    if not file_name:
        raise ConfigurationError("file name must be provided")

    if not get_niagara_home(config):
        raise ConfigurationError("niagara_home could not be determined")

    return Resolver(load_registry_file(file_name), config)
