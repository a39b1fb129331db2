"""Personal bookmarks with hierarchical, path-addressed tags."""

__version__ = "0.1.0"
