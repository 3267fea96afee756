"""Shared fixtures for the FlashVocab test suite."""

import random

import pytest

from flashvocab.database import ItemStore


@pytest.fixture
def store():
    """In-memory item store, closed after the test."""
    with ItemStore() as db:
        yield db


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
