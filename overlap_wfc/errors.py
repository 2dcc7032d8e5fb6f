"""Exceptions raised by the overlapping WFC solver."""


class WFCError(RuntimeError):
    """Base class for every error raised by overlap_wfc."""


class EmptyInputError(WFCError, ValueError):
    """The source grid is smaller than the pattern size."""

    def __init__(self, height, width, N):
        self.height = height
        self.width = width
        self.N = N
        super().__init__(
            "Source grid {}x{} is smaller than pattern size {}x{}.".format(height, width, N, N)
        )


class ContradictionError(WFCError):
    """A cell's possibility set became empty."""

    def __init__(self, x=None, y=None, attempt=None):
        self.x = x
        self.y = y
        self.attempt = attempt
        where = "" if x is None else " at cell (x={}, y={})".format(x, y)
        super().__init__("Contradiction{}: no possible patterns left.".format(where))


class ExhaustedRetriesError(WFCError):
    """Every attempt ended in a contradiction."""

    def __init__(self, retries, contradictions=None):
        self.retries = retries
        self.contradictions = contradictions
        super().__init__(
            "WFC failed after {} retries; try a new seed or increase max_retries.".format(retries)
        )


class NotResolvedError(WFCError):
    """Reading the pattern of a cell that still has several possibilities."""

    def __init__(self, x, y, options):
        self.x = x
        self.y = y
        self.options = options
        super().__init__(
            "Cell (x={}, y={}) is not resolved ({} possible patterns).".format(x, y, options)
        )


class SolveCancelled(WFCError):
    """The caller asked the solver to stop between steps."""
