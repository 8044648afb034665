"""
Common utilities shared across routers.
"""

from .responses import envelope

__all__ = [
    "envelope",
]
