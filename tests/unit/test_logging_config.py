"""
Unit tests for logging helpers.
"""
import json
import logging
import sys
from dataclasses import dataclass

import pytest

from event_platform.domain.exceptions import DuplicateEntityException
from event_platform.logging_config import (
    REDACTED,
    JsonFormatter,
    log_command,
    redact,
)


@dataclass
class SampleCommand:
    username: str
    password: str


class SampleService:

    @log_command
    async def handle(self, command):
        return command.username

    @log_command
    async def fail(self, command):
        raise RuntimeError("boom")

    @log_command
    async def reject(self, command):
        raise DuplicateEntityException("User", "username", command.username)


class TestRedact:

    def test_masks_sensitive_keys(self):
        data = redact({"username": "alice", "Password": "pw", "refresh_token": "rt"})

        assert data == {"username": "alice", "Password": REDACTED, "refresh_token": REDACTED}

    def test_leaves_input_untouched(self):
        data = {"salt": "abc"}

        redact(data)

        assert data == {"salt": "abc"}


class TestLogCommand:

    @pytest.mark.asyncio
    async def test_logs_redacted_command_and_timing(self, caplog):
        with caplog.at_level(logging.INFO):
            result = await SampleService().handle(SampleCommand("alice", "hunter22"))

        assert result == "alice"
        messages = [record.getMessage() for record in caplog.records]
        assert messages[0] == "Handling SampleCommand"
        assert messages[1].startswith("Handled SampleCommand in ")
        assert caplog.records[0].context == {"username": "alice", "password": REDACTED}
        assert "hunter22" not in caplog.text

    @pytest.mark.asyncio
    async def test_logs_and_reraises_errors(self, caplog):
        with caplog.at_level(logging.INFO):
            with pytest.raises(RuntimeError):
                await SampleService().fail(SampleCommand("alice", "hunter22"))

        error = caplog.records[-1]
        assert error.levelno == logging.ERROR
        assert error.getMessage().startswith("Error handling SampleCommand after ")
        assert error.exc_info is not None

    @pytest.mark.asyncio
    async def test_domain_errors_logged_without_traceback(self, caplog):
        with caplog.at_level(logging.INFO):
            with pytest.raises(DuplicateEntityException):
                await SampleService().reject(SampleCommand("alice", "hunter22"))

        rejected = caplog.records[-1]
        assert rejected.levelno == logging.WARNING
        assert rejected.getMessage().startswith("Rejected SampleCommand after ")
        assert rejected.getMessage().endswith(": DUPLICATE_ENTITY")
        assert rejected.exc_info is None
        assert not any(record.levelno >= logging.ERROR for record in caplog.records)


class TestJsonFormatter:

    def test_renders_context_and_exception(self):
        logger = logging.getLogger("test.json")
        try:
            raise ValueError("bad")
        except ValueError:
            record = logger.makeRecord(
                "test.json", logging.ERROR, __file__, 1, "failed %s", ("op",),
                exc_info=sys.exc_info(),
                extra={"context": {"user_id": "42"}},
            )

        payload = json.loads(JsonFormatter().format(record))

        assert payload["level"] == "ERROR"
        assert payload["logger"] == "test.json"
        assert payload["message"] == "failed op"
        assert payload["context"] == {"user_id": "42"}
        assert "ValueError: bad" in payload["exception"]
