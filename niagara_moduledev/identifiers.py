"""Parsing of module identifiers.

Three syntaxes name a file inside a module:

- ``/module/<moduleName>/<path>`` - web request URL
- ``module://<moduleName>/<path>`` - ORD
- ``nmodule/<moduleName>/<path>`` - RequireJS module ID (``.js`` implied)
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MalformedIdentifierError

MODULE_URL_PREFIX = "/module/"
MODULE_ORD_PREFIX = "module://"
NMODULE_PREFIX = "nmodule/"

SCRIPT_EXTENSION = ".js"


@dataclass(frozen=True)
class ModuleFileInfo:
    """Module name and in-module path derived from one identifier.

    Attributes:
        full_path: ``moduleName/path/to/file.js``
        name: Module name
        path: File path inside the module
    """

    full_path: str
    name: str
    path: str


def get_module_path(identifier: str) -> str | None:
    """Strip the identifier prefix so the result starts with the module name.

    Returns None if the identifier uses none of the known prefixes.
    """
    if identifier.startswith(MODULE_URL_PREFIX):
        return identifier[len(MODULE_URL_PREFIX) :]

    if identifier.startswith(MODULE_ORD_PREFIX):
        return identifier[len(MODULE_ORD_PREFIX) :]

    if identifier.startswith(NMODULE_PREFIX):
        # Always appended; the resolver retries without it first, so IDs that
        # already name an extension still find their file.
        return identifier[len(NMODULE_PREFIX) :] + SCRIPT_EXTENSION

    return None


def parse_identifier(identifier: str) -> ModuleFileInfo | None:
    """Split an identifier into module name and relative path.

    Args:
        identifier: ``/module/``, ``module://`` or ``nmodule/`` identifier

    Returns:
        ModuleFileInfo, or None if the string is not a module identifier

    Raises:
        MalformedIdentifierError: Prefix matched but no module name follows
    """
    module_path = get_module_path(identifier)
    if module_path is None:
        return None

    index = module_path.find("/")
    if index <= 0:
        raise MalformedIdentifierError(module_path)

    return ModuleFileInfo(
        full_path=module_path,
        name=module_path[:index],
        path=module_path[index + 1 :],
    )
