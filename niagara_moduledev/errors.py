"""Error types raised while resolving module identifiers.

Every failure the resolver can report has its own type so callers can tell
a malformed identifier apart from a module that simply is not installed.
"""

from __future__ import annotations

from collections.abc import Sequence


class ModuleDevError(Exception):
    """Base class for all moduledev errors."""


class ConfigurationError(ModuleDevError):
    """Raised when required configuration (e.g. niagara_home) is missing."""


class MalformedIdentifierError(ModuleDevError, ValueError):
    """Raised when an identifier has a module prefix but no module name."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"could not determine module name: {identifier}")


class ResolutionError(ModuleDevError):
    """Base class for identifiers that could not be turned into a path.

    Attributes:
        identifier: The identifier (or module path) that failed
        stage: Which part of resolution failed ("parse", "dev home", "archive", ...)
    """

    def __init__(self, message: str, *, identifier: str, stage: str):
        self.identifier = identifier
        self.stage = stage
        super().__init__(message)


class UnrecognizedIdentifierError(ResolutionError):
    """The string is not a /module/, module:// or nmodule/ reference."""

    def __init__(self, identifier: str):
        super().__init__(
            f"not a module identifier: {identifier}",
            identifier=identifier,
            stage="parse",
        )


class ModuleNotRegisteredError(ResolutionError):
    """The module is neither in the registry nor in the install root."""

    def __init__(self, module_name: str, *, identifier: str, stage: str = "dev home", niagara_home: str | None = None):
        self.module_name = module_name
        if niagara_home:
            message = f"module {module_name} not present in moduledev or in {niagara_home}/modules ({identifier})"
        else:
            message = f"module {module_name} not present in moduledev ({identifier})"
        super().__init__(message, identifier=identifier, stage=stage)


class EntryNotFoundError(ResolutionError):
    """The module exists but does not contain the requested path."""

    def __init__(self, message: str, *, identifier: str, stage: str):
        super().__init__(message, identifier=identifier, stage=stage)


class ArchiveUnreadableError(ResolutionError):
    """An expected module archive is missing or cannot be opened."""

    def __init__(self, archive_path: str, *, identifier: str, reason: str | None = None):
        self.archive_path = archive_path
        message = f"cannot read zip file at {archive_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message, identifier=identifier, stage="archive")


class AllCandidatesFailedError(ResolutionError):
    """Every identifier in a fallback list failed to resolve."""

    def __init__(self, identifiers: Sequence[str], errors: Sequence[Exception]):
        self.identifiers = list(identifiers)
        self.errors = list(errors)
        super().__init__(
            f"no valid entries in array {','.join(self.identifiers)}",
            identifier=",".join(self.identifiers),
            stage="fallback",
        )


class RequireIdResolutionError(ModuleDevError):
    """One entry of a RequireJS paths mapping could not be resolved."""

    def __init__(self, key: str, cause: Exception):
        self.key = key
        self.cause = cause
        super().__init__(f"could not resolve RequireJS path '{key}': {cause}")
