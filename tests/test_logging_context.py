"""Tests for session-scoped logging."""

import asyncio
import logging

import pytest

from mechapp.logging_context import (
    SessionIdFilter,
    get_session_id,
    get_session_logger,
    install_session_filter,
    new_session_id,
    session_scope,
    set_session_id,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("mechapp", logging.INFO, __file__, 1, "hola", None, None)


class TestSessionId:
    def test_new_session_id_format(self):
        session_id = new_session_id()
        assert session_id.startswith("SES-")
        assert len(session_id) == 12

    def test_scope_restores_previous_id(self):
        before = get_session_id()
        with session_scope("SES-outer001"):
            with session_scope("SES-inner001") as inner:
                assert inner == get_session_id() == "SES-inner001"
            assert get_session_id() == "SES-outer001"
        assert get_session_id() == before

    def test_scope_generates_id(self):
        with session_scope() as session_id:
            assert session_id.startswith("SES-")

    @pytest.mark.asyncio
    async def test_concurrent_tasks_keep_their_own_id(self):
        async def run(session_id: str) -> str:
            set_session_id(session_id)
            await asyncio.sleep(0)
            return get_session_id()

        results = await asyncio.gather(run("SES-aaaaaaaa"), run("SES-bbbbbbbb"))
        assert results == ["SES-aaaaaaaa", "SES-bbbbbbbb"]


class TestSessionIdFilter:
    def test_filter_stamps_record(self):
        record = _record()
        with session_scope("SES-00000001"):
            assert SessionIdFilter().filter(record) is True
        assert record.session_id == "SES-00000001"

    def test_session_logger_has_single_filter(self):
        get_session_logger("mechapp.test")
        logger = get_session_logger("mechapp.test")
        assert sum(isinstance(f, SessionIdFilter) for f in logger.filters) == 1

    def test_install_on_handlers(self):
        logger = logging.getLogger("mechapp.test.handlers")
        handler = logging.NullHandler()
        logger.addHandler(handler)
        try:
            install_session_filter(logger)
            install_session_filter(logger)
            assert sum(isinstance(f, SessionIdFilter) for f in handler.filters) == 1
        finally:
            logger.removeHandler(handler)
