"""Root conftest — shared test configuration."""

import os

import pytest

from tests.fake_collaborators import FakeMessenger, FakeRecordStore

# Ensure tests don't accidentally reach a real record store
os.environ.setdefault("SF_INSTANCE_URL", "https://test.my.salesforce.com")
os.environ.setdefault("SF_ACCESS_TOKEN", "00Dtest!fake-token")
os.environ.setdefault("VERIFY_RECORD_STORE_ON_STARTUP", "false")


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def messenger():
    return FakeMessenger()
