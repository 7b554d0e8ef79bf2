"""Shared fixtures: a dev home with module source trees and a niagara_home with module jars."""

import zipfile
from pathlib import Path

import pytest


def exports(label: str) -> str:
    """Contents of every generated .js fixture file."""
    return f"module.exports = '{label}';"


def write_jar(path: Path, files: dict[str, str | bytes], directories: tuple[str, ...] = ()) -> Path:
    """Create a jar with the given entries. Directory names must end in '/'."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for directory in directories:
            zf.writestr(directory, "")
        for name, data in files.items():
            zf.writestr(name, data)
    return path


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    monkeypatch.delenv("niagara_home", raising=False)
    monkeypatch.delenv("MODULEDEV_KEEP_TEMP", raising=False)
    monkeypatch.delenv("MODULEDEV_LOG_PATH", raising=False)
    monkeypatch.delenv("MODULEDEV_LOG_LEVEL", raising=False)


@pytest.fixture
def anyio_backend():
    """Configure anyio to use asyncio backend only."""
    return "asyncio"


@pytest.fixture
def dev_home(tmp_path: Path) -> dict[str, str]:
    """
    Create module source directories and return the registry for them.

    Creates:
    - bajaScript/bajaScript-ux/src/rc/bajaScript-ux.js
    - bajaScript/bajaScript-ux/srcTest/rc/bajaScript-ux-suite.js
    - bajaScript/bajaScript-rt/src/rc/bajaScript-rt.js
    - bajaScript/bajaScript-rt/src/rc/bajaScript-template.hbs
    - bajaScript/bajaScript-rt/src/rc/x.js
    - bajaux/bajaux-rt/srcTest/rc/boo
    - bajaux/bajaux-ux/src/rc/noext   (no .js on disk)
    """
    root = tmp_path / "dev"
    baja_script = root / "bajaScript"
    bajaux = root / "bajaux"

    write_file(baja_script / "bajaScript-ux" / "src" / "rc" / "bajaScript-ux.js", exports("bajaScript-ux"))
    write_file(
        baja_script / "bajaScript-ux" / "srcTest" / "rc" / "bajaScript-ux-suite.js",
        exports("bajaScript-ux-suite"),
    )
    write_file(
        baja_script / "bajaScript-rt" / "src" / "rc" / "bajaScript-rt.js",
        'module.exports = "i am bajaScript-rt";',
    )
    write_file(baja_script / "bajaScript-rt" / "src" / "rc" / "bajaScript-template.hbs", "i am a {{template}}")
    write_file(baja_script / "bajaScript-rt" / "src" / "rc" / "x.js", exports("x"))
    write_file(bajaux / "bajaux-rt" / "srcTest" / "rc" / "boo", exports("boo"))
    write_file(bajaux / "bajaux-ux" / "src" / "rc" / "noext", exports("noext"))

    return {
        "bajaScript": str(baja_script),
        "bajaux": str(bajaux),
    }


@pytest.fixture
def niagara_home(tmp_path: Path) -> Path:
    """
    Create an installation root with jars for testModule.

    - testModule-ux.jar: explicit directory entries, rc/foo.js, rc/boo.js,
      rc/ux-only.js, rc/ux-dir/ux-dir-file.js, rc/shared.js
    - testModule-rt.jar: no directory entries, rc/foo.js, rc/rt-only.js,
      rc/rt-dir/rt-dir-file.js, rc/shared.js
    - testModule.jar: rc/no-profile.js
    - brokenModule-ux.jar: not a zip file
    """
    home = tmp_path / "niagara"
    modules = home / "modules"

    write_jar(
        modules / "testModule-ux.jar",
        {
            "rc/foo.js": exports("testModule-ux/rc/foo.js"),
            "rc/boo.js": exports("testModule-ux/rc/boo.js"),
            "rc/ux-only.js": exports("testModule-ux/rc/ux-only.js"),
            "rc/ux-dir/ux-dir-file.js": exports("testModule-ux/rc/ux-dir/ux-dir-file.js"),
            "rc/shared.js": exports("testModule-ux/rc/shared.js"),
        },
        directories=("rc/", "rc/ux-dir/"),
    )
    write_jar(
        modules / "testModule-rt.jar",
        {
            "rc/foo.js": exports("testModule-rt/rc/foo.js"),
            "rc/rt-only.js": exports("testModule-rt/rc/rt-only.js"),
            "rc/rt-dir/rt-dir-file.js": exports("testModule-rt/rc/rt-dir/rt-dir-file.js"),
            "rc/shared.js": exports("testModule-rt/rc/shared.js"),
        },
    )
    write_jar(
        modules / "testModule.jar",
        {"rc/no-profile.js": exports("testModule/rc/no-profile.js")},
    )
    write_file(modules / "brokenModule-ux.jar", "this is not a zip file")

    return home
