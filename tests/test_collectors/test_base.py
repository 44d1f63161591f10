"""Tests for BaseCollector and the safe_gather decorator."""

import logging
from unittest.mock import Mock

import pytest

from arangodb_monitor.collectors.arangodb_collector import Endpoint
from arangodb_monitor.collectors.base import BaseCollector, CycleSummary, safe_gather
from arangodb_monitor.collectors.errors import CollectionError, DecodeError


class MockCollector(BaseCollector):
    """Mock collector for testing BaseCollector functionality."""

    def __init__(self, config=None, logger=None, failure=None):
        if logger is None:
            logger = logging.getLogger(__name__)
        super().__init__(config or [], logger)
        self.failure = failure
        self.calls = []

    async def gather(self, sink):
        ok = await self._gather_endpoint(Endpoint("http://db1:8529", "http://db1:8529"), sink)
        return CycleSummary(configured=1, succeeded=int(ok), failed=int(not ok))

    @safe_gather
    async def _gather_endpoint(self, endpoint, sink):
        self.calls.append(endpoint)
        if self.failure is not None:
            raise self.failure
        sink.submit("arangodb_server", {"url": endpoint.url}, {"uptime": 1.0})


class TestBaseCollector:

    def test_child_logger(self):
        collector = MockCollector(logger=logging.getLogger("parent"))
        assert collector.logger.name == "parent.MockCollector"

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            BaseCollector([], logging.getLogger(__name__))

    def test_cycle_summary_dispatched(self):
        summary = CycleSummary(configured=5, skipped=1, succeeded=3, failed=1)
        assert summary.dispatched == 4


class TestSafeGather:

    @pytest.mark.asyncio
    async def test_success_returns_true(self):
        collector = MockCollector()
        sink = Mock()

        summary = await collector.gather(sink)

        assert summary.succeeded == 1
        sink.submit.assert_called_once_with(
            "arangodb_server", {"url": "http://db1:8529"}, {"uptime": 1.0}
        )
        sink.report_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_taxonomy_error_reported_as_is(self):
        error = DecodeError("bad body", url="http://db1:8529")
        collector = MockCollector(failure=error)
        sink = Mock()

        summary = await collector.gather(sink)

        assert summary.failed == 1
        sink.report_error.assert_called_once_with(error)
        sink.submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self):
        collector = MockCollector(failure=KeyError("counts"))
        sink = Mock()

        await collector.gather(sink)

        reported = sink.report_error.call_args[0][0]
        assert isinstance(reported, CollectionError)
        assert reported.url == "http://db1:8529"
        assert "counts" in str(reported)
