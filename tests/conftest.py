import pytest

from assertsupport import set_failure_notifier


@pytest.fixture(autouse=True)
def _reset_failure_notifier():
    yield
    set_failure_notifier(None)
