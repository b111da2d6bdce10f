# tests/test_logs.py
import logging

import pytest
from loguru import logger

from product_api.logs import configure_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_stdlib_records_are_forwarded(restore_root_logging):
    configure_logging("debug")
    records = []
    sink = logger.add(lambda m: records.append(m.record), level="DEBUG")
    try:
        logging.getLogger("uvicorn.error").info("Started server process")
        logging.getLogger("uvicorn.access").info("GET / 200")
        logging.getLogger("uvicorn.error").error("[Errno 98] address already in use")
        logging.getLogger("uvicorn.error").error("Exception in ASGI application")
    finally:
        logger.remove(sink)

    messages = [r["message"] for r in records]
    assert "Started server process" in messages
    assert "GET / 200" not in messages
    assert "[Errno 98] address already in use" in messages
    assert "Exception in ASGI application" not in messages


def test_request_id_defaults_to_dash(restore_root_logging):
    configure_logging("INFO")
    records = []
    sink = logger.add(lambda m: records.append(m.record), level="INFO")
    try:
        logger.info("outside a request")
        with logger.contextualize(request_id="r-1"):
            logger.info("inside a request")
    finally:
        logger.remove(sink)

    assert records[0]["extra"]["request_id"] == "-"
    assert records[1]["extra"]["request_id"] == "r-1"
