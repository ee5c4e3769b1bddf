import importlib
import inspect
import logging
import os
import sys
from pathlib import Path
from types import FrameType
from typing import Any, Dict, Optional, Set, Tuple, Union

from .finder import StubFinder
from .identifiers import virtual_location
from .reflection import absolute_name, resolve_path
from .registry import MISSING, StubRegistry, StubSpec

logger = logging.getLogger("modstub")

_PACKAGE_DIR = Path(__file__).resolve().parent

Target = Union[str, "os.PathLike[str]"]


def _is_filename(target: Target) -> bool:
    if isinstance(target, os.PathLike):
        return True
    if "/" in target or os.sep in target:
        return True
    # "pkg.py" is a module name, "mod.py" a file
    return target.endswith(".py") and target.count(".") == 1


class StubContext:
    """Registers stubs and owns the finder that applies them

    Example:
        >>> context = StubContext()
        >>> context.stub("mypackage.clock", named={"now": lambda: 0})
        >>> from mypackage.clock import now  # the stub
        >>> context.reset()
        >>> from mypackage.clock import now  # the real function
    """

    def __init__(self, registry: Optional[StubRegistry] = None):
        self.registry = registry if registry is not None else StubRegistry()
        self.finder = StubFinder(self.registry)
        self._ignored: Set[str] = set()

    @property
    def installed(self) -> bool:
        return self.finder in sys.meta_path

    def install(self) -> StubFinder:
        """Puts the finder first in `sys.meta_path` (does nothing if already there)"""
        if not self.installed:
            sys.meta_path.insert(0, self.finder)
            self.finder.invalidate_caches()
            logger.info("Installed %r", self.finder)
        return self.finder

    def uninstall(self):
        """Removes all the stubs and the finder"""
        if not self.installed:
            return
        self.registry.reset()
        self.finder.invalidate_caches()
        sys.meta_path.remove(self.finder)
        logger.info("Uninstalled %r", self.finder)

    def stub(
        self,
        target: Target,
        named: Optional[Dict[str, Any]] = None,
        default: Any = MISSING,
        *,
        importer: Optional[str] = None,
    ) -> str:
        """Replaces the exports of a module

        Args:
            target: A module name (possibly relative to `importer`) or a file
                path (relative paths are resolved from the calling file).
                Modules that do not exist are stubbed as virtual modules,
                whose location is fixed when the stub is registered (a
                top-level one lives in the current directory at that time).
            named: Named exports, by reference
            default: The default export, exposed as the read-only attribute
                `default`
            importer: The module from which `target` is imported (defaults to
                the calling module)

        Returns:
            The canonical path the stubs are registered for
        """
        self.install()
        path, virtual = self._locate(target, importer)
        spec = StubSpec(named if named is not None else {}, default)
        self.registry.register(path, spec, name=virtual)
        self.finder.invalidate_caches()
        return path

    def locate(self, target: Target, importer: Optional[str] = None) -> str:
        """Returns the canonical path of a stub target"""
        return self._locate(target, importer)[0]

    def _locate(
        self, target: Target, importer: Optional[str]
    ) -> Tuple[str, Optional[str]]:
        """Returns the canonical path of a stub target, and the module name
        when the target is a virtual module"""
        if _is_filename(target):
            path = Path(target)
            if not path.is_absolute():
                path = self._importer_dir(importer) / path
            return str(path.resolve()), None

        name = absolute_name(target, importer or self._caller_module())
        try:
            return resolve_path(name), None
        except ModuleNotFoundError as e:
            if e.name != name:
                raise
            parent = name.rpartition(".")[0]
            search_path = None
            if parent:
                search_path = getattr(importlib.import_module(parent), "__path__", None)
            logger.debug("%s cannot be found, stubbing it as a virtual module", name)
            return virtual_location(name, search_path), name

    def resolve_path(self, specifier: str, importer: Optional[str] = None) -> str:
        self.install()
        return resolve_path(specifier, importer or self._caller_module())

    def invalidate(self) -> int:
        """Starts a new generation: stubbed modules are executed again when
        imported next"""
        generation = self.registry.invalidate()
        importlib.invalidate_caches()
        return generation

    def reset(self) -> int:
        """Removes all the stubs"""
        generation = self.registry.reset()
        importlib.invalidate_caches()
        logger.debug("Stubs reset (generation %d)", generation)
        return generation

    def ignore_calls_from_this_file(self, filename: Optional[str] = None):
        """Skips a file when looking for the module that registers stubs

        Useful for helpers that wrap :meth:`stub`: relative targets are then
        resolved from the helper's caller.
        """
        if filename is None:
            frame = self._caller()
            filename = frame.f_code.co_filename if frame else None
        if filename:
            self._ignored.add(str(Path(filename).resolve()))

    def _skipped(self, filename: str) -> bool:
        path = Path(filename).resolve()
        return path.parent == _PACKAGE_DIR or str(path) in self._ignored

    def _caller(self) -> Optional[FrameType]:
        frame = inspect.currentframe()
        while frame is not None and self._skipped(frame.f_code.co_filename):
            frame = frame.f_back
        return frame

    def _caller_module(self) -> Optional[str]:
        frame = self._caller()
        if frame is None:
            return None
        return frame.f_globals.get("__name__")

    def _importer_dir(self, importer: Optional[str]) -> Path:
        if importer is not None:
            filename = getattr(sys.modules.get(importer), "__file__", None)
        else:
            frame = self._caller()
            filename = frame.f_code.co_filename if frame else None
        if filename and Path(filename).is_file():
            return Path(filename).resolve().parent
        return Path.cwd()

    def __repr__(self):
        return f"StubContext({self.registry!r})"


_context: Optional[StubContext] = None


def get_context() -> StubContext:
    """Returns the process-wide stub context"""
    global _context
    if _context is None:
        _context = StubContext()
    return _context


def install() -> StubFinder:
    return get_context().install()


def uninstall():
    get_context().uninstall()


def is_installed() -> bool:
    return _context is not None and _context.installed


def stub(target: Target, named=None, default=MISSING, *, importer=None) -> str:
    return get_context().stub(target, named, default, importer=importer)


def reset() -> int:
    return get_context().reset()


def invalidate() -> int:
    return get_context().invalidate()


def ignore_calls_from_this_file(filename: Optional[str] = None):
    get_context().ignore_calls_from_this_file(filename)
