"""Feature detection over JavaScript syntax trees."""

from .feature_finder import TraversalContext, find_features

__all__ = ["TraversalContext", "find_features"]
