"""Pytest configuration for dataknobs_strain tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_strain import SchemeRegistry, Strainer, register_builtin_filters  # noqa: E402


@pytest.fixture
def registry():
    """Fresh, empty scheme registry."""
    return SchemeRegistry("test")


@pytest.fixture
def strainer(registry):
    """Strainer on a fresh registry with the built-in filters."""
    strainer = Strainer(registry)
    register_builtin_filters(strainer)
    return strainer


@pytest.fixture
def bare_strainer(registry):
    """Strainer on a fresh registry without any filters."""
    return Strainer(registry)


class CallRecorder:
    """Unit that records its calls and returns a fixed raw verdict."""

    def __init__(self, name, returns=None):
        self.__name__ = name
        self.returns = returns
        self.calls = []

    def __call__(self, slot, options=None):
        self.calls.append((slot.value, options))
        return self.returns


@pytest.fixture
def recorder():
    """Factory for call-recording units."""
    return CallRecorder
