"""Staging, indexing and check-result tools for a community marketplace of packages."""

__version__ = "1.0.0"