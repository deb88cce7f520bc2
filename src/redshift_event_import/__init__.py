"""Incremental importer from an append-only Redshift table into an event sink."""

__version__ = "0.1.0"

__all__ = ["__version__"]
