"""Pytest configuration and shared fixtures."""

import pytest

from bagcodec.codec import TypeRegistry


@pytest.fixture
def builtin_registry() -> TypeRegistry:
    """Fresh, unfrozen registry holding only the builtin types."""
    return TypeRegistry.with_builtins()
