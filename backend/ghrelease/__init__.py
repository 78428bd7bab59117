"""ghrelease — publish GitHub releases with changelog bodies and binary assets."""

__version__ = "1.0.0"
