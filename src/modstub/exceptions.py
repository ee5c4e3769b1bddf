class ModstubError(Exception):
    pass


class PathProbeSignal(ModstubError):
    """Raised by the finder to report the canonical path of a probed module.

    The import system gives a finder no way to hand a value back to whoever
    triggered the import, so the probe answer travels inside this exception.
    Only :func:`modstub.reflection.resolve_path` is expected to catch it.
    """

    code = "MODSTUB_RESOLVED_PATH"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{self.code}: {path}")


class FinderNotInstalledError(ModstubError):
    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(
            f"Could not resolve {specifier!r} through modstub: "
            "the stub finder is not installed in sys.meta_path"
        )


class StubRemovedError(ImportError):
    """The stub of a module disappeared between its creation and execution"""
