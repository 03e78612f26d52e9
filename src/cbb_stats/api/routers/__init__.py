"""API routers."""

from . import games, stats

__all__ = ["games", "stats"]
