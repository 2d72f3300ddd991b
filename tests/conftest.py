"""Global pytest configuration.

Every test starts from a freshly configured ``introlog`` root logger at INFO
and an uninitialized default failure sink, so level changes and cached sinks
do not leak between tests.
"""

from __future__ import annotations

import logging

import pytest

from introlog.failure import reset_default_sink
from introlog.logging import reset_logging, setup_root_logger


@pytest.fixture(autouse=True)
def _fresh_reporting_state():
    reset_logging()
    reset_default_sink()
    setup_root_logger(level=logging.INFO)
    yield
    reset_default_sink()
    reset_logging()
