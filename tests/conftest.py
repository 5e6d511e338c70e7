import pytest

from tests.fakes import FakeDirectoryClient


@pytest.fixture
def directory():
    return FakeDirectoryClient()
