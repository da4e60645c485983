"""Home feed: audience visibility, merging and ranking."""

from .service import get_feed

__all__ = ["get_feed"]
