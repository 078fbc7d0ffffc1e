"""pytest configuration and fixtures for pyqt-datalist tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture
def manual_scheduler():
    """FrameScheduler whose frames only run on flush()."""
    from pyqt_datalist.core import FrameScheduler

    return FrameScheduler(defer=lambda fn: None)


@pytest.fixture(autouse=True)
def reset_list_config():
    """Restore the default configuration after each test."""
    from pyqt_datalist.protocols import set_list_config

    yield
    set_list_config(None)
