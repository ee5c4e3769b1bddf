import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger("modstub")


class _Missing:
    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


MISSING: Any = _Missing()
"""Marks the absence of a default export stub"""


@dataclass
class StubSpec:
    """The exports that replace the ones of a module"""

    named: Dict[str, Any] = field(default_factory=dict)
    """Named exports, held by reference"""

    default: Any = MISSING
    """The default export (if any)"""

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def exports(self) -> list[str]:
        """Names exported by a module synthesized from these stubs"""
        names = list(self.named)
        if self.has_default:
            names.append("default")
        return names


class StubRegistry:
    """Stubs indexed by canonical module path, with a generation counter

    Finders and loaders only read the registry; a new generation forces the
    modules stubbed under the previous one to be evaluated again on their
    next import.
    """

    def __init__(self):
        self._stubs: Dict[str, StubSpec] = {}
        self._virtual: Dict[str, str] = {}

        self.generation = 1
        """Current generation (starts at 1)"""

        self.populated = False
        """True once a stub has been registered (never goes back to False)"""

    def register(self, path: str, spec: StubSpec, name: Optional[str] = None):
        """Registers stubs for `path`

        `name` is given for virtual modules: the module is then found at
        `path` whatever the current directory is when it gets imported.
        """
        self._stubs[path] = spec
        if name is not None:
            self._virtual[name] = path
        self.populated = True
        logger.debug("Registered stub for %s (%s)", path, ", ".join(spec.exports))

    def get(self, path: Optional[str]) -> Optional[StubSpec]:
        if path is None:
            return None
        return self._stubs.get(path)

    def virtual_path(self, name: str) -> Optional[str]:
        """Path recorded for the virtual module `name`, while it has stubs"""
        path = self._virtual.get(name)
        if path is None or path not in self._stubs:
            return None
        return path

    def paths(self) -> Iterator[str]:
        return iter(list(self._stubs))

    def invalidate(self) -> int:
        """Starts a new generation, keeping the registered stubs"""
        self.generation += 1
        logger.debug("Stub generation is now %d", self.generation)
        return self.generation

    def reset(self) -> int:
        """Removes all the stubs and starts a new generation"""
        self._stubs.clear()
        self._virtual.clear()
        return self.invalidate()

    def __contains__(self, path: str) -> bool:
        return path in self._stubs

    def __len__(self):
        return len(self._stubs)

    def __repr__(self):
        return f"StubRegistry(generation={self.generation}, paths={list(self._stubs)})"
