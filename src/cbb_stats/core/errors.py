"""
Domain errors raised by the aggregation and ranking core.

None of these is fatal: the window selector and the stats services turn
EmptyInputError into empty results, the API maps InvalidWindowError to a 400,
and UndefinedRatioError never leaves the ratio helper that raises it.
"""


class StatsError(Exception):
    """Base class for stats core errors."""


class EmptyInputError(StatsError):
    """No game records were supplied for the requested scope."""

    def __init__(self, scope: str | None = None):
        self.scope = scope
        message = "No game records to aggregate"
        if scope:
            message = f"{message} for {scope}"
        super().__init__(message)


class InvalidWindowError(StatsError, ValueError):
    """Rolling window length is not a positive number of days."""

    def __init__(self, last_n_days: object):
        self.last_n_days = last_n_days
        super().__init__(f"last_n_days must be a positive integer, got {last_n_days!r}")


class UndefinedRatioError(StatsError, ZeroDivisionError):
    """A derived ratio has a zero or missing denominator."""

    def __init__(self, numerator: float | None, denominator: float | None):
        self.numerator = numerator
        self.denominator = denominator
        super().__init__(f"Undefined ratio {numerator!r} / {denominator!r}")
