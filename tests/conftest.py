from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _capture_ausvotes_logs(caplog):
    caplog.set_level(logging.INFO, logger="ausvotes")
    yield
    logger = logging.getLogger("ausvotes")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
