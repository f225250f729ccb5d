"""Tests for throttled progress delivery."""

import asyncio

import pytest

from deepresearch.orchestrator import ProgressReporter, ResearchProgress, ResearchStatus


def snap(percent, status=ResearchStatus.SEARCHING):
    return ResearchProgress(status=status, percent=percent, current_step=f"step {percent}", source_count=0)


@pytest.mark.asyncio
async def test_zero_interval_delivers_every_update():
    received = []
    reporter = ProgressReporter(received.append, interval=0)

    for percent in (5, 15, 40):
        reporter.update(snap(percent))

    assert [s.percent for s in received] == [5, 15, 40]


@pytest.mark.asyncio
async def test_updates_within_window_collapse_to_latest():
    received = []
    reporter = ProgressReporter(received.append, interval=0.05)

    for percent in (5, 15, 20, 25):
        reporter.update(snap(percent))
    assert received == []

    await asyncio.sleep(0.1)

    assert [s.percent for s in received] == [25]
    assert reporter.delivered_count == 1


@pytest.mark.asyncio
async def test_flush_delivers_immediately_and_cancels_timer():
    received = []
    reporter = ProgressReporter(received.append, interval=10)

    reporter.update(snap(5))
    reporter.update(snap(100, ResearchStatus.COMPLETE))
    reporter.flush()

    assert [s.percent for s in received] == [100]

    # Nothing left to deliver
    reporter.flush()
    assert len(received) == 1


@pytest.mark.asyncio
async def test_dispose_stops_delivery():
    received = []
    reporter = ProgressReporter(received.append, interval=0.05)

    reporter.update(snap(5))
    reporter.dispose()
    await asyncio.sleep(0.1)
    reporter.update(snap(15))
    reporter.flush()

    assert received == []
    assert reporter.disposed


@pytest.mark.asyncio
async def test_async_callback_is_awaited():
    received = []

    async def on_progress(snapshot):
        received.append(snapshot.percent)

    reporter = ProgressReporter(on_progress, interval=0)
    reporter.update(snap(70))
    await asyncio.sleep(0)

    assert received == [70]


@pytest.mark.asyncio
async def test_failing_callback_is_logged(caplog):
    def on_progress(snapshot):
        raise RuntimeError("boom")

    reporter = ProgressReporter(on_progress, interval=0)
    reporter.update(snap(5))

    assert "Progress callback failed: boom" in caplog.text
    assert reporter.latest.percent == 5


@pytest.mark.asyncio
async def test_no_callback_is_allowed():
    reporter = ProgressReporter(None, interval=0)
    reporter.update(snap(5))
    reporter.flush()

    assert reporter.delivered_count == 0
