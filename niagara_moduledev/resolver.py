"""Translation of module identifiers into paths on disk.

Resolution order (first match wins):
1. Dev home - the module's source directory registered in moduledev.properties
2. Installed jars - ``niagara_home/modules/<module><profile>.jar``, extracted
   into a temporary workspace and cached per identifier
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import Sequence
from pathlib import Path
from types import MappingProxyType

from .archive import ArchiveExtractor
from .archive import ExtractionWorkspace
from .config import ResolverConfig
from .errors import AllCandidatesFailedError
from .errors import ArchiveUnreadableError
from .errors import EntryNotFoundError
from .errors import MalformedIdentifierError
from .errors import ModuleNotRegisteredError
from .errors import RequireIdResolutionError
from .errors import ResolutionError
from .errors import UnrecognizedIdentifierError
from .identifiers import SCRIPT_EXTENSION
from .identifiers import ModuleFileInfo
from .identifiers import parse_identifier
from .paths import get_archive_path
from .paths import get_niagara_home

logger = logging.getLogger(__name__)

# Search priority; "" is a module with no runtime profile
RUNTIME_PROFILES: tuple[str, ...] = ("-ux", "-rt", "-wb", "-se", "")

TEST_MODULE_SUFFIX = "Test"

_EXTENSION_RE = re.compile(r"\.\w+$")


def get_module_name(module_name: str) -> str:
    """Module whose registry entry serves ``module_name`` (``fooTest`` -> ``foo``)."""
    if module_name.endswith(TEST_MODULE_SUFFIX):
        return module_name[: -len(TEST_MODULE_SUFFIX)]
    return module_name


def get_src_folder(module_name: str) -> str:
    return "srcTest" if module_name.endswith(TEST_MODULE_SUFFIX) else "src"


def strip_extension(file_path: str) -> str:
    """Remove a trailing file extension, if any."""
    return _EXTENSION_RE.sub("", file_path)


async def _with_extension_fallback(
    module_path: str,
    do_resolve: Callable[[str], Awaitable[str]],
) -> str:
    """Run ``do_resolve`` without a ``.js`` extension first, then with it.

    Some installations store scripts without the extension, and ``nmodule/``
    IDs always get one appended.
    """
    if not module_path.endswith(SCRIPT_EXTENSION):
        return await do_resolve(module_path)

    try:
        return await do_resolve(module_path[: -len(SCRIPT_EXTENSION)])
    except ResolutionError:
        return await do_resolve(module_path)


def _is_readable(file_path: str) -> bool:
    return os.access(file_path, os.R_OK)


class Resolver:
    """Responsible for translating ``module://`` and ``/module/`` requests
    into paths to actual files.

    Usage:
        with Resolver({"bajaScript": "/dev/bajaScript"}) as resolver:
            path = await resolver.resolve_path("/module/bajaScript/rc/virt.js")
    """

    def __init__(
        self,
        registry: Mapping[str, str],
        config: ResolverConfig | None = None,
        *,
        workspace: ExtractionWorkspace | None = None,
    ):
        """Initialize resolver.

        Args:
            registry: Module name -> source directory on disk
            config: Resolver options (niagara_home, temp handling)
            workspace: Shared extraction workspace; one is created if omitted
        """
        self.config = config or ResolverConfig()
        self._registry = MappingProxyType(dict(registry))
        self._niagara_home = get_niagara_home(self.config)
        self._owns_workspace = workspace is None
        self.workspace = workspace or ExtractionWorkspace(
            parent=self.config.temp_parent,
            retain=self.config.retain_temp,
        )
        self.extractor = ArchiveExtractor(self.workspace)
        self._file_path_cache: dict[str, str] = {}

    @property
    def registry(self) -> Mapping[str, str]:
        return self._registry

    @property
    def niagara_home(self) -> str | None:
        return self._niagara_home

    # ----- Public API -----

    async def resolve_path(self, identifier: str | Sequence[str]) -> str:
        """Get a usable path to a file, translated from an ORD or URL.

        If the module is registered in moduledev.properties, the path points
        directly into its source directory. Otherwise the file is extracted
        from the module jar in ``niagara_home/modules`` into a temporary
        workspace.

        Args:
            identifier: ``module://``, ``/module/`` or ``nmodule/`` identifier,
                or an ordered list of them to try in turn

        Returns:
            Path to the requested file or directory

        Raises:
            MalformedIdentifierError: Identifier has no module name
            ResolutionError: Identifier could not be resolved
        """
        if isinstance(identifier, str):
            return await self._resolve_identifier(identifier)
        return await self._resolve_first(list(identifier))

    async def resolve_require_ids(self, paths: Mapping[str, str | Sequence[str]]) -> dict[str, str]:
        """Map RequireJS aliases to file paths for an r.js optimization.

        File extensions are removed from the results, as r.js appends its own.
        If the target is not a ``.js`` file, give the real extension in the ID
        (``nmodule/myModule/rc/myTemplate.hbs``).

        Args:
            paths: Alias -> ``nmodule`` ID (or fallback list of IDs)

        Returns:
            Alias -> extension-less file path

        Raises:
            RequireIdResolutionError: Any alias could not be resolved
        """
        aliases = list(paths)

        async def resolve_alias(alias: str) -> str:
            try:
                return await self.resolve_path(paths[alias])
            except (ResolutionError, MalformedIdentifierError) as e:
                raise RequireIdResolutionError(alias, e) from e

        try:
            async with asyncio.TaskGroup() as tg:
                tasks = {alias: tg.create_task(resolve_alias(alias)) for alias in aliases}
        except ExceptionGroup as eg:
            # Pending aliases are cancelled by the task group
            failures = [e for e in eg.exceptions if isinstance(e, RequireIdResolutionError)]
            if not failures:
                raise
            first = min(failures, key=lambda e: aliases.index(e.key))
            raise first from first.cause

        return {alias: strip_extension(task.result()) for alias, task in tasks.items()}

    def close(self) -> None:
        """Release the extraction workspace if this resolver created it."""
        if self._owns_workspace:
            self.workspace.cleanup()

    def __enter__(self) -> Resolver:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    async def __aenter__(self) -> Resolver:
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    # ----- Resolution -----

    async def _resolve_first(self, identifiers: list[str]) -> str:
        errors: list[Exception] = []
        for identifier in identifiers:
            try:
                return await self._resolve_identifier(identifier)
            except (ResolutionError, MalformedIdentifierError) as e:
                logger.debug(f"[resolve] fallback candidate {identifier} failed: {e}")
                errors.append(e)
        raise AllCandidatesFailedError(identifiers, errors)

    async def _resolve_identifier(self, identifier: str) -> str:
        mod_info = parse_identifier(identifier)
        if mod_info is None:
            raise UnrecognizedIdentifierError(identifier)

        try:
            path = await self._resolve_from_dev_home(mod_info)
            logger.debug(f"[resolve] {identifier} -> dev home ({path})")
            return path
        except ResolutionError as dev_error:
            if self._niagara_home is None:
                raise
            path = await self._resolve_from_archives(mod_info, self._niagara_home, dev_error)
            logger.debug(f"[resolve] {identifier} -> jar ({path})")
            return path

    async def _resolve_from_dev_home(self, mod_info: ModuleFileInfo) -> str:
        """Find the file in a registered source directory.

        Raises:
            ModuleNotRegisteredError: Module not in the registry
            EntryNotFoundError: File not present under any runtime profile
        """
        module_name = get_module_name(mod_info.name)
        src_folder = get_src_folder(mod_info.name)
        module_dir = self._registry.get(module_name)

        if not module_dir:
            raise ModuleNotRegisteredError(module_name, identifier=mod_info.full_path)

        async def do_resolve(module_path: str) -> str:
            relative_path = module_path.lstrip("/\\")
            for profile in RUNTIME_PROFILES:
                src_dir = os.path.normpath(os.path.join(module_dir, module_name + profile, src_folder))
                file_path = os.path.normpath(os.path.join(src_dir, relative_path))
                if os.path.commonpath([src_dir, file_path]) != src_dir:
                    logger.debug(f"[resolve] refusing {module_path}: outside of {src_dir}")
                    continue
                if await asyncio.to_thread(_is_readable, file_path):
                    return file_path
            raise EntryNotFoundError(
                f"could not find {mod_info.full_path} in any moduledev directory",
                identifier=mod_info.full_path,
                stage="dev home",
            )

        return await _with_extension_fallback(mod_info.path, do_resolve)

    async def _resolve_from_archives(
        self,
        mod_info: ModuleFileInfo,
        niagara_home: str,
        dev_error: ResolutionError,
    ) -> str:
        """Search the module jars of every runtime profile.

        A file match ends the search. A directory match keeps going so that
        the same directory from later profiles is merged into the extracted
        tree; files already extracted from an earlier profile are kept.
        """
        cached = self._file_path_cache.get(mod_info.full_path)
        if cached:
            logger.debug(f"[resolve] {mod_info.full_path} -> cache")
            return cached

        readable_archives = 0

        async def do_resolve(module_path: str) -> str:
            nonlocal readable_archives
            for profile in RUNTIME_PROFILES:
                jar_path = get_archive_path(niagara_home, mod_info.name, profile)
                try:
                    info = await self.extractor.extract(
                        jar_path, mod_info.name, module_path, identifier=mod_info.full_path
                    )
                except ArchiveUnreadableError:
                    continue
                except EntryNotFoundError as e:
                    readable_archives += 1
                    logger.debug(f"[resolve] {e}")
                    continue

                readable_archives += 1
                self._file_path_cache.setdefault(mod_info.full_path, info.path)
                if not info.is_directory:
                    return info.path

            cached_path = self._file_path_cache.get(mod_info.full_path)
            if cached_path:
                return cached_path
            raise EntryNotFoundError(
                f"could not find {mod_info.full_path} in any JAR module",
                identifier=mod_info.full_path,
                stage="archive",
            )

        try:
            return await _with_extension_fallback(mod_info.path, do_resolve)
        except EntryNotFoundError:
            if readable_archives:
                raise
            if isinstance(dev_error, ModuleNotRegisteredError):
                raise ModuleNotRegisteredError(
                    mod_info.name,
                    identifier=mod_info.full_path,
                    stage="archive",
                    niagara_home=str(Path(niagara_home)),
                ) from dev_error
            raise dev_error

    def __repr__(self) -> str:
        return f"Resolver(modules={len(self._registry)}, niagara_home={self._niagara_home!r})"
