"""Shared test fixtures."""

import os
import sys

import pytest

# Ensure src and the shared builders are importable
sys.path.insert(0, "src")
sys.path.insert(0, os.path.dirname(__file__))

from builders import ADMIN, make_factory

from worldfactory import LocalStorage, WorldFactory
from worldfactory.tracing import InMemoryEventLog


@pytest.fixture
def storage():
    """Fresh LocalStorage instance."""
    return LocalStorage()


@pytest.fixture
def event_log():
    return InMemoryEventLog()


@pytest.fixture
def factory(event_log) -> WorldFactory:
    """Factory with the standard test classes declared and an event log attached."""
    return make_factory(events=event_log)


@pytest.fixture
def admin():
    return ADMIN
