"""Utility functions for tlvwire.

This module provides size calculation and wire inspection helpers.
"""

from __future__ import annotations

from .dump import dump_entries, iter_entries
from .sizing import encoded_size, field_sizes

__all__ = [
    # Sizing functions
    "encoded_size",
    "field_sizes",
    # Inspection functions
    "iter_entries",
    "dump_entries",
]
