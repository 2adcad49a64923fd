"""Tests for JobPoller."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.live_auctioneer.client.poller import JobPoller, PollerState
from src.live_auctioneer.errors import PollingFailure, TransportError
from src.live_auctioneer.models.video import Job, JobState


def vendor_job(status: str, result_url: str | None = None) -> Job:
    return Job(
        id="job123",
        state=JobState.from_vendor(status),
        raw_status=status,
        result_url=result_url,
    )


class TestJobPollerRun:
    @pytest.mark.asyncio
    async def test_polls_until_done(self, clock):
        fetch = AsyncMock(
            side_effect=[vendor_job("created"), vendor_job("started"), vendor_job("done", "X")]
        )
        notices = []
        poller = JobPoller(fetch, interval=2.0, sleep=clock.sleep, on_notice=notices.append)

        outcome = await poller.run("job123")

        assert outcome.state == PollerState.completed
        assert outcome.result_url == "X"
        assert outcome.attempts == 3
        assert poller.transitions == [
            PollerState.polling,
            PollerState.polling,
            PollerState.polling,
            PollerState.completed,
        ]
        assert notices == ["Preparing: created", "Preparing: started", "Auction Live!"]
        assert clock.delays == [2.0, 2.0]
        assert fetch.await_count == 3

    @pytest.mark.asyncio
    async def test_first_query_is_immediate(self, clock):
        fetch = AsyncMock(return_value=vendor_job("done", "X"))
        poller = JobPoller(fetch, sleep=clock.sleep)

        outcome = await poller.run("job123")

        assert outcome.state == PollerState.completed
        assert clock.delays == []
        fetch.assert_awaited_once_with("job123")

    @pytest.mark.asyncio
    async def test_vendor_error_stops_without_further_polling(self, clock):
        fetch = AsyncMock(side_effect=[vendor_job("error"), vendor_job("done", "X")])
        notices = []
        poller = JobPoller(fetch, sleep=clock.sleep, on_notice=notices.append)

        outcome = await poller.run("job123")

        assert outcome.state == PollerState.failed
        assert isinstance(outcome.error, PollingFailure)
        assert outcome.result_url is None
        assert fetch.await_count == 1
        assert clock.delays == []
        assert notices == ["Error starting auction"]

    @pytest.mark.asyncio
    async def test_transport_failure_fails_immediately(self, clock):
        fetch = AsyncMock(side_effect=[vendor_job("started"), TransportError("connection reset")])
        notices = []
        poller = JobPoller(fetch, sleep=clock.sleep, on_notice=notices.append)

        outcome = await poller.run("job123")

        assert outcome.state == PollerState.failed
        assert outcome.error.message == "connection reset"
        assert fetch.await_count == 2
        assert notices[-1] == "Error: connection reset"

    @pytest.mark.asyncio
    async def test_plain_exception_message(self, clock):
        poller = JobPoller(AsyncMock(side_effect=ValueError("bad json")), sleep=clock.sleep)

        outcome = await poller.run("job123")

        assert outcome.state == PollerState.failed
        assert outcome.error.message == "bad json"

    @pytest.mark.asyncio
    async def test_done_without_url_keeps_polling(self, clock):
        fetch = AsyncMock(side_effect=[vendor_job("done"), vendor_job("done", "X")])
        notices = []
        poller = JobPoller(fetch, sleep=clock.sleep, on_notice=notices.append)

        outcome = await poller.run("job123")

        assert outcome.state == PollerState.completed
        assert notices[0] == "Preparing: done"
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_unlimited_by_default(self, clock):
        responses = [vendor_job("started")] * 50 + [vendor_job("done", "X")]
        poller = JobPoller(AsyncMock(side_effect=responses), sleep=clock.sleep)

        outcome = await poller.run("job123")

        assert outcome.state == PollerState.completed
        assert outcome.attempts == 51

    @pytest.mark.asyncio
    async def test_max_attempts_cap(self, clock):
        fetch = AsyncMock(return_value=vendor_job("started"))
        poller = JobPoller(fetch, max_attempts=3, sleep=clock.sleep)

        outcome = await poller.run("job123")

        assert outcome.state == PollerState.failed
        assert outcome.attempts == 3
        assert fetch.await_count == 3
        assert "3 checks" in outcome.error.message


class TestJobPollerCancel:
    @pytest.mark.asyncio
    async def test_cancel_clears_pending_poll(self):
        fetch = AsyncMock(return_value=vendor_job("started"))
        poller = JobPoller(fetch, interval=3600)

        task = poller.start("job123")
        while fetch.await_count == 0:
            await asyncio.sleep(0)
        poller.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert poller.state == PollerState.cancelled
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_cancel_after_completion_is_noop(self, clock):
        poller = JobPoller(AsyncMock(return_value=vendor_job("done", "X")), sleep=clock.sleep)

        task = poller.start("job123")
        outcome = await task
        poller.cancel()

        assert outcome.state == PollerState.completed
        assert poller.state == PollerState.completed
