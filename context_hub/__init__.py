"""Personal Context Hub: capture relevance search and AI answers."""

__version__ = "0.1.0"
