"""
Every test starts and ends without a process-wide channel, so tests that use
the module-level ipcall.call/receive/ignore cannot leak into each other.
"""
from __future__ import annotations

import pytest

import ipcall


@pytest.fixture(autouse=True)
def _no_default_channel():
    ipcall.unbind()
    yield
    ipcall.unbind()
