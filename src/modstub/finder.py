import logging
import sys
from dataclasses import dataclass
from importlib.abc import MetaPathFinder
from importlib.machinery import ModuleSpec
from types import ModuleType
from typing import Dict, Optional, Sequence, Union

from .exceptions import PathProbeSignal
from .identifiers import Mode, ModuleId, canonical_path, virtual_location
from .loader import LoadState, StubLoader
from .registry import StubRegistry
from .settings import get_settings

logger = logging.getLogger("modstub")


@dataclass(frozen=True)
class ProbedPath:
    name: str
    path: str


@dataclass(frozen=True)
class ProbeFailure:
    name: str
    error: ImportError


ProbeResult = Union[ProbedPath, ProbeFailure]


class StubFinder(MetaPathFinder):
    """A meta path finder that substitutes stub modules for registered paths

    Once installed first in `sys.meta_path`, the finder resolves every import
    with the finders that follow it. Modules whose canonical path has stubs
    get a spec tagged with the current generation and loaded by
    :class:`StubLoader`; every other module gets the spec the other finders
    returned, untouched, so that `sys.modules` keeps caching the same
    instance.
    """

    def __init__(self, registry: StubRegistry):
        self.registry = registry
        self.loader = StubLoader(registry)
        self._displaced: Dict[str, ModuleType] = {}

    def find_spec(self, fullname, path, target=None):
        identifier = ModuleId.parse(fullname)

        if identifier.mode is Mode.RESOLVE_PATH:
            result = self.probe(identifier.name, path, target)
            if isinstance(result, ProbeFailure):
                raise result.error
            raise PathProbeSignal(result.path)

        if not self.registry.populated:
            if identifier.marked:
                return self._default_find_spec(identifier.name, path, target)
            return None

        generation = self.registry.generation

        if identifier.mode is Mode.ORIGINAL:
            return self._default_find_spec(identifier.name, path, target)

        try:
            spec = self._default_find_spec(identifier.name, path, target)
        except ModuleNotFoundError:
            spec = None

        if spec is not None:
            location = canonical_path(spec)
            if self.registry.get(location) is None:
                # Builtins are never rewritten unless explicitly stubbed
                return spec
        else:
            location = self.registry.virtual_path(identifier.name)
            if location is None:
                location = virtual_location(identifier.name, path)
            if self.registry.get(location) is None:
                return None

        tagged = identifier.tag(location, generation)
        self._trace("Stubbing %s", identifier.name, identifier=tagged)
        stub_spec = ModuleSpec(
            identifier.name,
            self.loader,
            origin=tagged.origin,
            loader_state=LoadState(tagged, spec),
            is_package=spec is not None and spec.submodule_search_locations is not None,
        )
        if stub_spec.submodule_search_locations is not None:
            stub_spec.submodule_search_locations.extend(spec.submodule_search_locations)
        return stub_spec

    def probe(
        self, name: str, path: Optional[Sequence[str]] = None, target=None
    ) -> ProbeResult:
        """Resolves a module ignoring the stubs and reports its canonical path"""
        try:
            spec = self._default_find_spec(name, path, target)
        except ImportError as e:
            return ProbeFailure(name, e)

        location = canonical_path(spec)
        if location is None:
            return ProbeFailure(
                name, ImportError(f"Module {name!r} has no canonical path", name=name)
            )
        return ProbedPath(name, location)

    def _default_find_spec(self, name, path, target=None) -> ModuleSpec:
        for finder in sys.meta_path:
            if isinstance(finder, StubFinder):
                continue
            find_spec = getattr(finder, "find_spec", None)
            if find_spec is None:
                continue
            spec = find_spec(name, path, target)
            if spec is not None:
                return spec
        raise ModuleNotFoundError(f"No module named {name!r}", name=name)

    def invalidate_caches(self):
        """Drops stale stub modules from `sys.modules`

        Stub modules of a previous generation (or whose stubs were removed)
        are evicted, real modules whose path is now stubbed are put aside, and
        modules put aside are restored once their path is no longer stubbed.
        The parent package attribute follows `sys.modules`, since
        ``from package import module`` reads it before importing anything.
        Module objects are never modified, so instances already imported keep
        their values.
        """
        generation = self.registry.generation
        for name, module in list(sys.modules.items()):
            spec = getattr(module, "__spec__", None)
            if not isinstance(spec, ModuleSpec):
                continue

            if isinstance(spec.loader, StubLoader):
                if spec.loader is not self.loader:
                    continue
                identifier = spec.loader_state.identifier
                if (
                    identifier.generation != generation
                    or identifier.path not in self.registry
                ):
                    self._trace("Evicting %s", name, identifier=identifier)
                    del sys.modules[name]
                    _unbind(name, module)
            elif len(self.registry) and canonical_path(spec) in self.registry:
                self._trace("Putting aside %s", name)
                self._displaced[name] = sys.modules.pop(name)
                _unbind(name, module)

        if not get_settings().restore_originals:
            self._displaced.clear()
            return

        for name, module in list(self._displaced.items()):
            if name in sys.modules or canonical_path(module.__spec__) in self.registry:
                continue
            self._trace("Restoring %s", name)
            sys.modules[name] = self._displaced.pop(name)
            parent, _, child = name.rpartition(".")
            if parent and parent in sys.modules:
                setattr(sys.modules[parent], child, module)

    def _trace(self, message, *args, identifier: Optional[ModuleId] = None):
        level = logging.INFO if get_settings().debug else logging.DEBUG
        logger.log(level, message, *args, extra={"stub": identifier})

    def __repr__(self):
        return f"StubFinder({self.registry!r})"


def _unbind(name: str, module: ModuleType):
    """Removes `module` from its parent package, if still bound there"""
    parent, _, child = name.rpartition(".")
    package = sys.modules.get(parent) if parent else None
    if package is not None and getattr(package, child, None) is module:
        delattr(package, child)
