import pytest

from fakes import FakeSpeech, InlineExecutor


@pytest.fixture
def speech() -> FakeSpeech:
    return FakeSpeech()


@pytest.fixture
def inline_executor() -> InlineExecutor:
    return InlineExecutor()
