import pytest

from fakes import FakeParser


@pytest.fixture
def fake_parser():
    return FakeParser()
