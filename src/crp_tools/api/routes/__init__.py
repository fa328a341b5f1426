"""Route group exports."""

from . import health, manifest, posts, reconciliation

__all__ = ["health", "manifest", "posts", "reconciliation"]
