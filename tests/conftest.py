"""
Shared pytest fixtures for the namepath test suite.

Usage in tests:
    def test_something(resolver, tree):
        fn = tree.function("init")
        resolver.register(fn, resolved_doclet("mod.init"))
        ...
"""

import pytest

from namepath.core.resolver import NameResolver
from tests.factories import FakeTree


@pytest.fixture
def resolver():
    """A resolver with its own empty context and default dictionary."""
    return NameResolver()


@pytest.fixture
def tree():
    """An empty fake syntax tree."""
    return FakeTree()
