"""Extraction of files and directories from module jars.

Extracted content is written under a single temporary workspace so that
directories pulled from several runtime-profile jars merge into one tree.
"""

from __future__ import annotations

import asyncio
import logging
import os
import posixpath
import shutil
import tempfile
import weakref
import zipfile
from pathlib import Path
from typing import NamedTuple

from .errors import ArchiveUnreadableError
from .errors import EntryNotFoundError

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "moduledev-"


class ExtractedEntry(NamedTuple):
    """Where an archive entry was written."""

    path: str
    is_directory: bool


def normalize_entry_name(name: str) -> str:
    """Normalize a zip entry name (or requested path) for comparison.

    Both separator styles are collapsed to ``/`` and any trailing separator is
    dropped, so ``rc/dir/`` (a directory entry) matches a request for ``rc/dir``.
    """
    name = name.replace("\\", "/")
    if name:
        name = posixpath.normpath(name)
    return name.rstrip("/")


def _remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
        logger.debug(f"Removed extraction workspace {path}")
    except OSError as e:
        logger.warning(f"Failed to remove temporary directory {path}: {e}")


class ExtractionWorkspace:
    """Temporary directory holding everything extracted from jars.

    The directory is created on first use and shared by every extraction that
    goes through this workspace. ``cleanup()`` (or leaving the ``with`` block)
    deletes it unless ``retain`` is set. If the owner never cleans up, the
    directory is still removed at normal interpreter exit.
    """

    def __init__(self, parent: str | Path | None = None, retain: bool = False):
        self.parent = Path(parent) if parent else None
        self.retain = retain
        self._root: Path | None = None
        self._finalizer: weakref.finalize | None = None

    @property
    def is_created(self) -> bool:
        return self._root is not None

    @property
    def root(self) -> Path:
        """The workspace directory, created lazily."""
        if self._root is None:
            if self.parent is not None:
                self.parent.mkdir(parents=True, exist_ok=True)
            self._root = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=self.parent))
            if not self.retain:
                self._finalizer = weakref.finalize(self, _remove_tree, self._root)
            logger.debug(f"Created extraction workspace {self._root}")
        return self._root

    def cleanup(self) -> None:
        """Delete the workspace directory (best effort)."""
        if self._root is None:
            return

        if self.retain:
            logger.info(f"Retaining extracted files in {self._root}")
            return

        if self._finalizer is not None:
            self._finalizer()
            self._finalizer = None
        self._root = None

    def __enter__(self) -> ExtractionWorkspace:
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup()

    def __repr__(self) -> str:
        return f"ExtractionWorkspace({self._root or 'not created'})"


class ArchiveExtractor:
    """Pulls single files or whole directories out of module jars."""

    def __init__(self, workspace: ExtractionWorkspace):
        self.workspace = workspace

    async def extract(
        self,
        archive_path: str | Path,
        module_name: str,
        entry_path: str,
        identifier: str | None = None,
    ) -> ExtractedEntry:
        """Extract ``entry_path`` from the jar into the workspace.

        Args:
            archive_path: Path to the jar file
            module_name: Module name, used as the first workspace directory level
            entry_path: Path of the file or directory inside the jar
            identifier: Identifier being resolved (for error messages)

        Returns:
            ExtractedEntry with the extracted path

        Raises:
            ArchiveUnreadableError: Jar missing, unreadable or not a zip file
            EntryNotFoundError: No entry matches ``entry_path``
        """
        identifier = identifier or f"{module_name}/{entry_path}"
        return await asyncio.to_thread(self._extract, Path(archive_path), module_name, entry_path, identifier)

    def _extract(self, archive_path: Path, module_name: str, entry_path: str, identifier: str) -> ExtractedEntry:
        if not archive_path.is_file() or not os.access(archive_path, os.R_OK):
            raise ArchiveUnreadableError(str(archive_path), identifier=identifier)

        target = normalize_entry_name(entry_path)

        try:
            zf = zipfile.ZipFile(archive_path)
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveUnreadableError(str(archive_path), identifier=identifier, reason=str(e)) from e

        with zf:
            return self._extract_from_zip(zf, archive_path, module_name, target, identifier)

    def _extract_from_zip(
        self,
        zf: zipfile.ZipFile,
        archive_path: Path,
        module_name: str,
        target: str,
        identifier: str,
    ) -> ExtractedEntry:
        prefix = target + "/"
        is_directory = False

        for info in zf.infolist():
            name = normalize_entry_name(info.filename)
            if name == target:
                if info.is_dir():
                    is_directory = True
                    break
                destination = self._destination(module_name, target, identifier)
                return self._write_file(zf, info, destination, archive_path, identifier)
            if name.startswith(prefix):
                # Jars don't always carry explicit directory entries
                is_directory = True

        if not is_directory:
            raise EntryNotFoundError(
                f"could not retrieve {target} from zip {archive_path}",
                identifier=identifier,
                stage="archive",
            )

        destination = self._destination(module_name, target, identifier)
        self._write_directory(zf, prefix, destination)
        logger.debug(f"[archive] {archive_path.name}: merged directory {target} into {destination}")
        return ExtractedEntry(str(destination), True)

    def _destination(self, module_name: str, target: str, identifier: str) -> Path:
        root = self.workspace.root.resolve()
        destination = (root / module_name / target).resolve()
        if not destination.is_relative_to(root):
            raise EntryNotFoundError(
                f"refusing to extract {target} outside of {root}",
                identifier=identifier,
                stage="archive",
            )
        return destination

    def _write_file(
        self,
        zf: zipfile.ZipFile,
        info: zipfile.ZipInfo,
        destination: Path,
        archive_path: Path,
        identifier: str,
    ) -> ExtractedEntry:
        if destination.is_dir():
            raise EntryNotFoundError(
                f"{info.filename} in {archive_path} conflicts with extracted directory {destination}",
                identifier=identifier,
                stage="archive",
            )
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(zf.read(info))
        logger.debug(f"[archive] {archive_path.name}: extracted {info.filename} to {destination}")
        return ExtractedEntry(str(destination), False)

    def _write_directory(self, zf: zipfile.ZipFile, prefix: str, destination: Path) -> None:
        destination.mkdir(parents=True, exist_ok=True)

        for info in zf.infolist():
            name = normalize_entry_name(info.filename)
            if not name.startswith(prefix):
                continue

            relative = name[len(prefix) :]
            file_path = destination / relative

            if info.is_dir():
                file_path.mkdir(parents=True, exist_ok=True)
                continue

            # First writer wins: earlier runtime profiles take priority
            if file_path.exists():
                continue

            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(zf.read(info))


def list_workspaces(parent: str | Path | None = None) -> list[Path]:
    """Find extraction workspaces left behind in ``parent`` (default: system temp dir)."""
    base = Path(parent) if parent else Path(tempfile.gettempdir())
    if not base.is_dir():
        return []
    return sorted(p for p in base.glob(f"{WORKSPACE_PREFIX}*") if p.is_dir())
