"""pytest configuration and fixtures for pyqt-editgrid tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from pyqt_editgrid.config import set_grid_config  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_grid_config():
    """Every test starts from the default grid configuration."""
    set_grid_config(None)
    yield
    set_grid_config(None)


@pytest.fixture
def rows():
    return [
        {"id": 1, "name": "a", "role": "dev"},
        {"id": 2, "name": "b", "role": "ops"},
        {"id": 3, "name": "c", "role": "dev"},
    ]


@pytest.fixture
def wait_until(qapp):
    """Process Qt events until ``predicate()`` holds or the timeout expires."""
    from PyQt6.QtTest import QTest

    def wait(predicate, timeout_ms=2000):
        waited = 0
        while not predicate():
            if waited >= timeout_ms:
                raise AssertionError(f"Condition not met within {timeout_ms}ms")
            QTest.qWait(10)
            waited += 10

    return wait
