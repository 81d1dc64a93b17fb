"""Pydantic record modeling for tlvwire.

This module provides the BaseRecord class and field helpers for declaring
TLV records using Pydantic.
"""

from __future__ import annotations

from .base import BaseRecord
from .fields import TlvField, Uint64

__all__ = [
    "BaseRecord",
    "TlvField",
    "Uint64",
]
