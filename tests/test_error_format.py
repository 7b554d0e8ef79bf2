"""Tests for CLI error message formatting."""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from niagara_moduledev.errors import AllCandidatesFailedError
from niagara_moduledev.errors import EntryNotFoundError
from niagara_moduledev.errors import MalformedIdentifierError
from niagara_moduledev.errors import ModuleNotRegisteredError
from niagara_moduledev.errors import RequireIdResolutionError
from niagara_moduledev.utils.error_format import escape_markup
from niagara_moduledev.utils.error_format import format_error_details
from niagara_moduledev.utils.error_format import format_error_message


def _candidates_error() -> AllCandidatesFailedError:
    return AllCandidatesFailedError(
        ["nmodule/a/rc/x", "module://b"],
        [
            ModuleNotRegisteredError("a", identifier="a/rc/x.js"),
            MalformedIdentifierError("b"),
        ],
    )


class TestFormatErrorMessage:
    def test_includes_type(self):
        assert format_error_message(ValueError("invalid input")) == "ValueError: invalid input"

    def test_without_type(self):
        assert format_error_message(ValueError("invalid input"), include_type=False) == "invalid input"

    def test_empty_timeout(self):
        assert format_error_message(TimeoutError()) == "TimeoutError: Operation timed out."

    def test_empty_unknown(self):
        assert format_error_message(RuntimeError()) == "RuntimeError: (no additional details)"

    def test_resolution_error(self):
        error = EntryNotFoundError("could not find m/rc/x.js in any JAR module", identifier="m/rc/x.js", stage="archive")
        assert format_error_message(error) == "EntryNotFoundError: could not find m/rc/x.js in any JAR module"


class TestFormatErrorDetails:
    def test_single_error(self):
        assert format_error_details(ValueError("nope")) == ["ValueError: nope"]

    def test_expands_fallback_candidates(self):
        lines = format_error_details(_candidates_error())

        assert lines[0] == "AllCandidatesFailedError: no valid entries in array nmodule/a/rc/x,module://b"
        assert lines[1] == "  nmodule/a/rc/x: module a not present in moduledev (a/rc/x.js)"
        assert lines[2] == "  module://b: could not determine module name: b"

    def test_require_id_error_includes_candidates(self):
        lines = format_error_details(RequireIdResolutionError("alias", _candidates_error()))

        assert lines[0].startswith("RequireIdResolutionError: could not resolve RequireJS path 'alias'")
        assert lines[1:] == [
            "  nmodule/a/rc/x: module a not present in moduledev (a/rc/x.js)",
            "  module://b: could not determine module name: b",
        ]


class TestEscapeMarkup:
    def test_brackets_survive_printing(self):
        buf = StringIO()
        console = Console(file=buf, width=200)

        console.print(f"[red]Error:[/red] {escape_markup('cannot read [/opt/niagara/modules/x.jar]')}")

        assert "cannot read [/opt/niagara/modules/x.jar]" in buf.getvalue()

    def test_plain_text_unchanged(self):
        assert escape_markup("module bajaux not present") == "module bajaux not present"

    def test_non_string(self):
        assert escape_markup(42) == "42"
