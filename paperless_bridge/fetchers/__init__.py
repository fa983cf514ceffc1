"""HTTP access to Paperless and to bookmarked sources."""

from .paperless_client import PaperlessClient

__all__ = ["PaperlessClient"]
