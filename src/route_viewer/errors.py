"""Error taxonomy for the route viewer core.

All three errors are locally recoverable: the session catches them, logs a
warning and falls back to a placeholder scene or an empty selection.
"""


class RouteViewerError(ValueError):
    """Base class for route viewer failures."""


class EmptyGeometry(RouteViewerError):
    """Raised when a projection is requested for zero points."""


class MalformedSolution(RouteViewerError):
    """A solution payload that does not satisfy the data contract."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class SelectionOutOfRange(RouteViewerError):
    """A selection index outside ``[0, count)``."""

    def __init__(self, index: int, count: int, view: str):
        super().__init__(f"{view} index {index} outside [0, {count})")
        self.index = index
        self.count = count
        self.view = view
