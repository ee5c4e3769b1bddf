"""Module identifiers and the marker protocol

Markers are appended to module names (and to the origin of stub specs) as a
query-style suffix: ``pkg.mod?__modstubresolvepath`` asks the finder for the
canonical path of ``pkg.mod``, ``pkg.mod?__modstuboriginal`` bypasses the
stubs, and ``/path/to/mod.py?__modstub=3`` identifies the stub of a module
for generation 3. Python module names cannot contain ``?``, so the suffix
never clashes with a real name.
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from importlib.machinery import ModuleSpec
from pathlib import Path
from typing import Iterable, Optional

GENERATION_MARKER = "__modstub"
RESOLVE_PATH_MARKER = "__modstubresolvepath"
ORIGINAL_MARKER = "__modstuboriginal"

BUILTIN_ORIGINS = ("built-in", "frozen")


class Mode(Enum):
    RESOLVE_PATH = RESOLVE_PATH_MARKER
    """Resolve the module and report its canonical path"""

    ORIGINAL = ORIGINAL_MARKER
    """Resolve the module ignoring the stubs"""


_MARKER_SEPARATORS = re.compile(r"[?&]")


@dataclass(frozen=True)
class ModuleId:
    """Structured form of a (possibly marked) module identifier"""

    name: str
    """Absolute dotted module name, without markers"""

    path: Optional[str] = None
    """Canonical path of the module"""

    generation: Optional[int] = None
    """Stub generation the identifier is tagged with"""

    mode: Optional[Mode] = None

    @classmethod
    def parse(cls, specifier: str) -> "ModuleId":
        """Parses a module name, stripping all the reserved markers"""
        name, _, query = specifier.partition("?")
        generation = None
        mode = None
        for part in _MARKER_SEPARATORS.split(query):
            key, _, value = part.partition("=")
            if key == GENERATION_MARKER and value.isdigit():
                generation = int(value)
            elif key in (RESOLVE_PATH_MARKER, ORIGINAL_MARKER):
                mode = Mode(key)
        return cls(name, generation=generation, mode=mode)

    @property
    def marked(self) -> bool:
        return self.mode is not None or self.generation is not None

    def tag(self, path: str, generation: int) -> "ModuleId":
        return replace(self, path=path, generation=generation, mode=None)

    @property
    def specifier(self) -> str:
        """The module name, with the mode marker if any"""
        if self.mode is None:
            return self.name
        return f"{self.name}?{self.mode.value}"

    @property
    def origin(self) -> str:
        """The tagged path, as recorded in the spec of a stub module"""
        if self.generation is None:
            return self.path or self.name
        return f"{self.path}?{GENERATION_MARKER}={self.generation}"

    def __str__(self):
        return self.origin if self.path else self.specifier


def is_builtin(spec: ModuleSpec) -> bool:
    """Whether the module belongs to the interpreter (built-in or frozen)"""
    return spec.origin in BUILTIN_ORIGINS


def canonical_path(spec: ModuleSpec) -> Optional[str]:
    """Returns the normalized absolute path of a module

    Built-in and frozen modules have no file: their name stands for the path.
    Namespace packages have no canonical path.
    """
    if is_builtin(spec):
        return spec.name
    if spec.origin is None or not spec.has_location:
        return None
    return str(Path(spec.origin).resolve())


def virtual_location(name: str, search_path: Optional[Iterable[str]] = None) -> str:
    """Best effort path for a module that does not exist on disk

    The module is placed in the first directory of its parent package search
    path, or in the current directory for a top-level module.
    """
    leaf = name.rpartition(".")[2]
    base = next(iter(search_path or ()), None)
    root = Path(base) if base else Path.cwd()
    return str((root / f"{leaf}.py").resolve())
