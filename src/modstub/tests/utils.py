import sys
import uuid
from pathlib import Path
from typing import Dict

# Builtin modules that tests are free to stub (rarely imported by anything)
BUILTIN_CANDIDATES = ("xxsubtype", "_symtable", "_tokenize", "_typing")

PACKAGE_FILES = {
    "__init__.py": "",
    "target.py": """
foo = "real"


def greet():
    return "hello"


class Thing:
    pass
""",
    "consumer.py": """
from .target import foo, greet
from .shared import Shared
""",
    "shared.py": """
class Shared:
    pass
""",
    "runner.py": """
from .target import foo

print(f"foo={foo}")
""",
    "subpkg/__init__.py": "",
    "subpkg/leaf.py": """
value = "leaf"
""",
}


class Package:
    """A package written to disk, with a unique name"""

    def __init__(self, root: Path, files: Dict[str, str] = PACKAGE_FILES):
        self.name = f"stubbed_{uuid.uuid4().hex[:8]}"
        self.path = (root / self.name).resolve()
        for relpath, content in files.items():
            path = self.path / relpath
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)

    def module(self, name: str) -> str:
        return f"{self.name}.{name}"

    def file(self, relpath: str) -> str:
        return str((self.path / relpath).resolve())

    def unload(self):
        for key in list(sys.modules):
            if key == self.name or key.startswith(f"{self.name}."):
                del sys.modules[key]


def builtin_module_name():
    for name in BUILTIN_CANDIDATES:
        if name in sys.builtin_module_names:
            return name
    return None
