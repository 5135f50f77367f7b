"""Shared utility functions for orbitjax.

Provides signed degree wrapping.
"""

from orbitjax.utils._angle import wrap_degrees

__all__ = [
    "wrap_degrees",
]
