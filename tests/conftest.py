"""Shared fixtures."""

import pytest

from fakes import FakeArticleStorage, FakeDuplicateStorage, RecordingSleep


@pytest.fixture
def articles():
    return FakeArticleStorage()


@pytest.fixture
def duplicates():
    return FakeDuplicateStorage()


@pytest.fixture
def sleep():
    return RecordingSleep()
