from __future__ import annotations

import pytest

from eteon.domain.orchestration.core.relay import Relay
from tests.utils import FakeChannel, FakeCompletion


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def relay(channel: FakeChannel, completion: FakeCompletion) -> Relay:
    return Relay(channel=channel, completion=completion)
