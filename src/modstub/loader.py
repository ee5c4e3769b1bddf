import logging
from dataclasses import dataclass
from importlib.abc import Loader
from importlib.machinery import ModuleSpec
from types import ModuleType
from typing import Optional, Tuple

from .exceptions import StubRemovedError
from .identifiers import ModuleId
from .registry import StubRegistry, StubSpec
from .synthesis import REGISTRY_GLOBAL, synthesize

logger = logging.getLogger("modstub")

DEFAULT_EXPORT = "default"


@dataclass(frozen=True)
class LoadState:
    """What the finder hands over to the loader through the module spec"""

    identifier: ModuleId
    """The tagged identifier"""

    fallback: Optional[ModuleSpec] = None
    """The spec returned by the default finders (None for virtual modules)"""


class StubModule(ModuleType):
    """Module whose default export cannot be reassigned"""

    def __setattr__(self, name, value):
        if name == DEFAULT_EXPORT and DEFAULT_EXPORT in self.__dict__:
            raise AttributeError(
                f"cannot reassign the default export of stubbed module {self.__name__!r}"
            )
        super().__setattr__(name, value)

    def __delattr__(self, name):
        if name == DEFAULT_EXPORT:
            raise AttributeError(
                f"cannot delete the default export of stubbed module {self.__name__!r}"
            )
        super().__delattr__(name)


class StubLoader(Loader):
    """Loads stub modules from synthesized source

    Modules are only stubbed when their identifier is tagged with a
    generation and the registry holds stubs for their path; anything else is
    handed to the loader the default finders chose.
    """

    def __init__(self, registry: StubRegistry):
        self.registry = registry

    def lookup(self, identifier: ModuleId) -> Optional[Tuple[str, StubSpec]]:
        if identifier.generation is None or not self.registry.populated:
            return None
        spec = self.registry.get(identifier.path)
        if spec is None:
            return None
        return identifier.path, spec

    def create_module(self, spec: ModuleSpec):
        state: LoadState = spec.loader_state
        if self.lookup(state.identifier) is not None:
            return StubModule(spec.name)

        fallback = self._fallback(state)
        return fallback.loader.create_module(fallback)

    def exec_module(self, module: ModuleType):
        state: LoadState = module.__spec__.loader_state
        if not isinstance(module, StubModule):
            self._fallback(state).loader.exec_module(module)
            return

        match = self.lookup(state.identifier)
        if match is None:
            raise StubRemovedError(
                f"stubs for {state.identifier} were removed before the module was executed",
                name=module.__name__,
            )

        path, spec = match
        logger.debug("Executing stub module %s (%s)", module.__name__, state.identifier)
        code = compile(synthesize(path, spec), state.identifier.origin, "exec")
        module.__dict__[REGISTRY_GLOBAL] = self.registry
        exec(code, module.__dict__)

    def _fallback(self, state: LoadState) -> ModuleSpec:
        if state.fallback is None or state.fallback.loader is None:
            raise ModuleNotFoundError(
                f"No module named {state.identifier.name!r}", name=state.identifier.name
            )
        logger.debug("No stubs for %s, using %r", state.identifier, state.fallback.loader)
        return state.fallback

    def __repr__(self):
        return f"StubLoader({self.registry!r})"
