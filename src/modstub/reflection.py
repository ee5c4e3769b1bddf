"""Queries answered by the stub finder through the import system

The finder only talks to the outside world through `find_spec`, so these
helpers import a marked module name and read the answer: either the spec the
finder returns, or the :class:`PathProbeSignal` it raises.
"""

import importlib.util
import sys
from importlib.machinery import ModuleSpec
from types import ModuleType
from typing import Optional

from .exceptions import FinderNotInstalledError, PathProbeSignal
from .identifiers import Mode, ModuleId


def importer_package(importer: Optional[str]) -> Optional[str]:
    """Package against which relative names are resolved for `importer`"""
    if importer is None:
        return None
    module = sys.modules.get(importer)
    if module is not None and getattr(module, "__package__", None) is not None:
        return module.__package__
    return importer.rpartition(".")[0]


def absolute_name(specifier: str, importer: Optional[str] = None) -> str:
    if specifier.startswith("."):
        return importlib.util.resolve_name(specifier, importer_package(importer))
    return specifier


def resolve_path(specifier: str, importer: Optional[str] = None) -> str:
    """Returns the canonical path the finder uses to look up the stubs of
    `specifier` when imported from `importer`"""
    name = absolute_name(specifier, importer)
    try:
        importlib.util.find_spec(ModuleId(name, mode=Mode.RESOLVE_PATH).specifier)
    except PathProbeSignal as signal:
        return signal.path
    raise FinderNotInstalledError(specifier)


def find_original_spec(specifier: str, importer: Optional[str] = None) -> ModuleSpec:
    """Returns the spec `specifier` would have if it were not stubbed"""
    name = absolute_name(specifier, importer)
    spec = importlib.util.find_spec(ModuleId(name, mode=Mode.ORIGINAL).specifier)
    if spec is None:
        raise FinderNotInstalledError(specifier)
    return spec


def load_original(specifier: str, importer: Optional[str] = None) -> ModuleType:
    """Executes the real module behind a stub

    The returned module is a new instance that is not added to `sys.modules`.
    """
    spec = find_original_spec(specifier, importer)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
