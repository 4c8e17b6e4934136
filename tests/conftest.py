import pytest

from fakes import FakeClock, FakeDeviceTransport
from lifecycle.task_registry import TaskRegistry


@pytest.fixture(autouse=True)
def fresh_task_registry():
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def device():
    return FakeDeviceTransport()
