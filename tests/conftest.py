"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture
def sample_stream() -> bytes:
    """Two entries: tag 1 holding uint 42, tag 2 holding text "hi"."""
    return b"\x01\x01\x2a\x02\x02hi"


@pytest.fixture
def max_tag() -> int:
    """Largest tag representable on the wire."""
    return 0xFFFF_FFFF_FFFF_FFFF
