"""Tests for identifier parsing."""

import pytest

from niagara_moduledev.errors import MalformedIdentifierError
from niagara_moduledev.identifiers import ModuleFileInfo
from niagara_moduledev.identifiers import get_module_path
from niagara_moduledev.identifiers import parse_identifier


class TestGetModulePath:
    def test_module_url(self):
        assert get_module_path("/module/bajaScript/rc/virt.js") == "bajaScript/rc/virt.js"

    def test_module_ord(self):
        assert get_module_path("module://bajaScript/rc/coll.js") == "bajaScript/rc/coll.js"

    def test_nmodule_appends_js(self):
        assert get_module_path("nmodule/js/rc/underscore/underscore") == "js/rc/underscore/underscore.js"

    def test_nmodule_with_extension_still_appends(self):
        """The resolver strips the appended .js first, so explicit extensions survive."""
        assert get_module_path("nmodule/myModule/rc/template.hbs") == "myModule/rc/template.hbs.js"

    def test_unknown_prefix(self):
        assert get_module_path("module:/bajaux/rc/foo") is None
        assert get_module_path("/moodule/bajaux/rc/foo") is None
        assert get_module_path("file:^rc/foo.js") is None


class TestParseIdentifier:
    def test_splits_module_and_path(self):
        info = parse_identifier("/module/bajaScript/rc/x.js")
        assert info == ModuleFileInfo(full_path="bajaScript/rc/x.js", name="bajaScript", path="rc/x.js")

    def test_ord(self):
        info = parse_identifier("module://bajauxTest/rc/boo")
        assert info is not None
        assert info.name == "bajauxTest"
        assert info.path == "rc/boo"

    def test_nmodule(self):
        info = parse_identifier("nmodule/bajaScript/rc/bajaScript-rt")
        assert info is not None
        assert info.name == "bajaScript"
        assert info.path == "rc/bajaScript-rt.js"
        assert info.full_path == "bajaScript/rc/bajaScript-rt.js"

    def test_deterministic(self):
        assert parse_identifier("module://a/b/c") == parse_identifier("module://a/b/c")

    def test_not_a_module_identifier_returns_none(self):
        assert parse_identifier("module:/bajaux/rc/foo") is None
        assert parse_identifier("rc/foo.js") is None

    @pytest.mark.parametrize(
        "identifier",
        ["module://bajaux", "/module/", "module:///rc/foo", "/module//rc/foo"],
    )
    def test_malformed_raises(self, identifier):
        with pytest.raises(MalformedIdentifierError, match="could not determine module name"):
            parse_identifier(identifier)

    def test_malformed_error_carries_offending_string(self):
        with pytest.raises(MalformedIdentifierError) as exc_info:
            parse_identifier("module://bajaux")
        assert exc_info.value.identifier == "bajaux"
        assert isinstance(exc_info.value, ValueError)

    def test_nmodule_without_path_is_malformed(self):
        # "bajaux" + ".js" has no separator
        with pytest.raises(MalformedIdentifierError):
            parse_identifier("nmodule/bajaux")
