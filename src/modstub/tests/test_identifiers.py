import importlib.util
from importlib.machinery import BuiltinImporter, ModuleSpec
from pathlib import Path

import pytest

from modstub.identifiers import (
    Mode,
    ModuleId,
    canonical_path,
    is_builtin,
    virtual_location,
)


def test_parse_plain_name():
    identifier = ModuleId.parse("pkg.mod")
    assert identifier == ModuleId("pkg.mod")
    assert not identifier.marked
    assert identifier.specifier == "pkg.mod"


@pytest.mark.parametrize(
    "specifier,mode",
    [
        ("pkg.mod?__modstubresolvepath", Mode.RESOLVE_PATH),
        ("pkg.mod?__modstuboriginal", Mode.ORIGINAL),
    ],
)
def test_parse_mode_markers(specifier, mode):
    identifier = ModuleId.parse(specifier)
    assert identifier.name == "pkg.mod"
    assert identifier.mode is mode
    assert identifier.marked
    assert identifier.specifier == specifier


def test_parse_strips_every_marker():
    identifier = ModuleId.parse("pkg.mod?__modstub=4?__modstuboriginal")
    assert identifier.name == "pkg.mod"
    assert identifier.generation == 4
    assert identifier.mode is Mode.ORIGINAL


def test_tagged_origin():
    tagged = ModuleId("pkg.mod").tag("/a/pkg/mod.py", 3)
    assert tagged.origin == "/a/pkg/mod.py?__modstub=3"
    assert str(tagged) == tagged.origin
    assert tagged.mode is None


def test_canonical_path_of_file(tmp_path):
    path = tmp_path / "mod.py"
    path.write_text("")
    spec = importlib.util.spec_from_file_location("mod", path)
    assert canonical_path(spec) == str(path.resolve())
    assert not is_builtin(spec)


def test_canonical_path_of_builtin():
    spec = BuiltinImporter.find_spec("sys")
    assert is_builtin(spec)
    assert canonical_path(spec) == "sys"


def test_namespace_package_has_no_canonical_path():
    spec = ModuleSpec("namespace", None, is_package=True)
    assert canonical_path(spec) is None


def test_virtual_location_in_package(tmp_path):
    location = virtual_location("pkg.virtual", [str(tmp_path / "pkg")])
    assert location == str((tmp_path / "pkg" / "virtual.py").resolve())


def test_virtual_location_top_level(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert virtual_location("virtual") == str(Path(tmp_path, "virtual.py").resolve())
