from modstub.registry import StubRegistry, StubSpec
from modstub.synthesis import REGISTRY_GLOBAL, synthesize


def evaluate(path, registry):
    namespace = {REGISTRY_GLOBAL: registry}
    exec(synthesize(path, registry.get(path)), namespace)
    return namespace


def test_named_exports_read_the_registry():
    registry = StubRegistry()
    value = object()
    registry.register("/a/b.py", StubSpec({"foo": "X", "bar": value}))

    namespace = evaluate("/a/b.py", registry)
    assert namespace["foo"] == "X"
    assert namespace["bar"] is value
    assert namespace["__all__"] == ["foo", "bar"]
    assert "default" not in namespace


def test_source_does_not_embed_values():
    source = synthesize("/a/b.py", StubSpec({"foo": "a value"}))
    assert "a value" not in source
    assert "'/a/b.py'" in source


def test_values_are_a_snapshot():
    registry = StubRegistry()
    registry.register("/a/b.py", StubSpec({"foo": "X"}))

    namespace = evaluate("/a/b.py", registry)
    registry.get("/a/b.py").named["foo"] = "Y"

    assert namespace["foo"] == "X"
    assert evaluate("/a/b.py", registry)["foo"] == "Y"


def test_default_export():
    registry = StubRegistry()
    registry.register("/a/b.py", StubSpec({}, default=None))

    namespace = evaluate("/a/b.py", registry)
    assert namespace["default"] is None
    assert namespace["__all__"] == ["default"]


def test_empty_spec():
    registry = StubRegistry()
    registry.register("/a/b.py", StubSpec())

    namespace = evaluate("/a/b.py", registry)
    public = [name for name in namespace if not name.startswith("_")]
    assert public == []
    assert namespace["__all__"] == []
