class RemitoError(Exception):
    """Base error for the remitos app."""


class ConfigError(RemitoError, RuntimeError):
    """Missing or unparseable deployment configuration. Fatal at startup."""


class CatalogUnavailable(RemitoError):
    """The spreadsheet could not be reached or read."""


class InputError(RemitoError, ValueError):
    """Rejected user action. Nothing was mutated."""


class CommitInProgress(InputError):
    pass


class RenderError(RemitoError):
    """Rasterization or PDF assembly failed."""


class CounterError(RemitoError):
    """The remito number could not be read or advanced."""
