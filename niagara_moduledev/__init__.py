"""Translate Niagara module ORDs and URLs into paths on disk.

Files in modules registered in ``moduledev.properties`` resolve into your
source directories; anything else is extracted from the module jars in
``niagara_home/modules``.

Example:
    resolver = from_file("path/to/moduledev.properties")
    path = await resolver.resolve_path("/module/bajaScript/rc/virt.js")
"""

from .archive import ArchiveExtractor
from .archive import ExtractedEntry
from .archive import ExtractionWorkspace
from .config import ResolverConfig
from .errors import AllCandidatesFailedError
from .errors import ArchiveUnreadableError
from .errors import ConfigurationError
from .errors import EntryNotFoundError
from .errors import MalformedIdentifierError
from .errors import ModuleDevError
from .errors import ModuleNotRegisteredError
from .errors import RequireIdResolutionError
from .errors import ResolutionError
from .errors import UnrecognizedIdentifierError
from .identifiers import ModuleFileInfo
from .identifiers import parse_identifier
from .paths import get_default_file_path
from .paths import get_niagara_home
from .registry import from_file
from .registry import from_raw_string
from .registry import parse_properties
from .resolver import RUNTIME_PROFILES
from .resolver import Resolver

__all__ = [
    "AllCandidatesFailedError",
    "ArchiveExtractor",
    "ArchiveUnreadableError",
    "ConfigurationError",
    "EntryNotFoundError",
    "ExtractedEntry",
    "ExtractionWorkspace",
    "MalformedIdentifierError",
    "ModuleDevError",
    "ModuleFileInfo",
    "ModuleNotRegisteredError",
    "RUNTIME_PROFILES",
    "RequireIdResolutionError",
    "ResolutionError",
    "Resolver",
    "ResolverConfig",
    "UnrecognizedIdentifierError",
    "from_file",
    "from_raw_string",
    "get_default_file_path",
    "get_niagara_home",
    "parse_identifier",
    "parse_properties",
]
