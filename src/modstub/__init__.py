# flake8: noqa: F401

from .exceptions import (
    ModstubError,
    PathProbeSignal,
    FinderNotInstalledError,
    StubRemovedError,
)
from .registry import MISSING, StubSpec, StubRegistry
from .identifiers import ModuleId, Mode, canonical_path
from .synthesis import synthesize
from .loader import StubLoader, StubModule
from .finder import StubFinder, ProbedPath, ProbeFailure
from .reflection import resolve_path, find_original_spec, load_original
from .api import (
    StubContext,
    get_context,
    install,
    uninstall,
    is_installed,
    stub,
    reset,
    invalidate,
    ignore_calls_from_this_file,
)

# Get version
__version__ = "0.1.0"
__version_tuple__ = (0, 1, 0)
