"""Response cache for AI answers."""

from .response_cache import ResponseCache, fingerprint_image

__all__ = ["ResponseCache", "fingerprint_image"]
