"""Shared test fixtures."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture
def debug_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture everything the library logs, down to DEBUG."""
    caplog.set_level(logging.DEBUG, logger="twilio_client")
    return caplog
