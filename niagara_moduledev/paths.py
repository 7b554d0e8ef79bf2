"""Path policy for moduledev.

Centralizes where things live: the installation root (``niagara_home``),
the default ``moduledev.properties`` file, module archives and settings files.
"""

from __future__ import annotations

import os
from pathlib import Path

from .config import ResolverConfig

NIAGARA_HOME_ENV = "niagara_home"
DEFAULT_PROPERTIES_FILE = Path("etc") / "moduledev.properties"


def get_niagara_home(config: ResolverConfig | None = None) -> str | None:
    """Get the ``niagara_home`` directory.

    An explicit ``config.niagara_home`` wins over the environment variable.
    """
    if config is not None and config.niagara_home:
        return config.niagara_home
    return os.environ.get(NIAGARA_HOME_ENV) or None


def get_default_file_path(config: ResolverConfig | None = None) -> Path | None:
    """Get the default path to ``moduledev.properties``.

    Returns:
        ``$niagara_home/etc/moduledev.properties``, or None if niagara_home
        could not be determined
    """
    niagara_home = get_niagara_home(config)
    if niagara_home:
        return Path(niagara_home) / DEFAULT_PROPERTIES_FILE
    return None


def get_archive_path(niagara_home: str, module_name: str, profile: str) -> Path:
    """Path to the jar holding one runtime profile of a module."""
    return Path(niagara_home, "modules", f"{module_name}{profile}.jar").resolve()

