"""Export documentation metadata from a compiled knowledge base as JSON."""

__version__ = "0.1.0"
