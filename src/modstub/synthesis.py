from .registry import StubSpec

REGISTRY_GLOBAL = "__stubregistry__"
"""Name under which the loader exposes the registry to the stub source"""


def synthesize(path: str, spec: StubSpec) -> str:
    """Returns the source of a module exporting the stubs of `spec`

    Each export reads the registry when the module is executed, so that a
    module instance keeps the values it saw at that time; a new generation
    is needed to observe values changed afterwards.
    """
    entry = f"{REGISTRY_GLOBAL}.get({path!r})"
    lines = [f"# Stubs for {path}"]
    for name in spec.named:
        lines.append(f"{name} = {entry}.named[{name!r}]")
    if spec.has_default:
        lines.append(f"default = {entry}.default")
    lines.append(f"__all__ = {spec.exports!r}")
    return "\n".join(lines) + "\n"
