"""
Tests for request logging middleware and logging setup
"""

import json
import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from json_post_type.middleware.logging import (
    ACCESS_LOGGER,
    RequestIdFilter,
    RequestLoggingMiddleware,
    StructuredFormatter,
    get_request_id,
    request_id_var,
    setup_logging,
)


def make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/ok")
    async def ok():
        return {"request_id": get_request_id()}

    @app.get("/missing")
    async def missing():
        from fastapi import HTTPException

        raise HTTPException(status_code=404)

    return app


class TestRequestLoggingMiddleware:
    def test_request_id_generated(self):
        response = TestClient(make_app()).get("/ok")

        assert response.headers["X-Request-ID"]
        assert response.json()["request_id"] == response.headers["X-Request-ID"]

    def test_request_id_propagated(self):
        response = TestClient(make_app()).get("/ok", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_logs_request(self, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            TestClient(make_app()).get("/ok")

        record = next(r for r in caplog.records if r.name == ACCESS_LOGGER)
        assert record.levelno == logging.INFO
        assert record.method == "GET"
        assert record.path == "/ok"
        assert record.status_code == 200

    def test_client_errors_logged_as_warning(self, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            TestClient(make_app()).get("/missing")

        record = next(r for r in caplog.records if r.name == ACCESS_LOGGER)
        assert record.levelno == logging.WARNING
        assert record.status_code == 404


class TestFormatting:
    def test_structured_formatter(self):
        record = logging.LogRecord("json_post_type", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.request_id = "req-1"
        record.status_code = 201

        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["request_id"] == "req-1"
        assert data["status_code"] == 201
        assert data["level"] == "INFO"

    def test_request_id_filter(self):
        token = request_id_var.set("req-2")
        try:
            record = logging.LogRecord("x", logging.INFO, __file__, 1, "m", None, None)
            assert RequestIdFilter().filter(record) is True
            assert record.request_id == "req-2"
        finally:
            request_id_var.reset(token)

    def test_setup_logging(self):
        root = logging.getLogger()
        previous_handlers, previous_level = root.handlers[:], root.level
        try:
            setup_logging("debug", json_format=True)

            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.handlers[:] = previous_handlers
            root.setLevel(previous_level)
