"""Paperless bridge: hands bookmarked PDFs to Paperless and returns their text."""

__version__ = "0.1.0"
