"""Tests for the APScheduler-backed sweep timer."""

import asyncio

import pytest

from lanwake.scheduler.sweep import SweepTimer


async def _noop() -> None:
    return None


class TestSweepTimerLifecycle:
    def test_not_running_until_started(self) -> None:
        assert SweepTimer(_noop).running is False

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            SweepTimer(_noop, interval=0)

    def test_start_is_idempotent(self) -> None:
        async def scenario() -> tuple[bool, bool, bool]:
            timer = SweepTimer(_noop, interval=60)
            first = timer.start()
            second = timer.start()
            running = timer.running
            timer.stop()
            return first, second, running

        assert asyncio.run(scenario()) == (True, False, True)

    def test_stop_is_idempotent(self) -> None:
        async def scenario() -> tuple[bool, bool, bool]:
            timer = SweepTimer(_noop, interval=60)
            timer.start()
            first = timer.stop()
            second = timer.stop()
            return first, second, timer.running

        assert asyncio.run(scenario()) == (True, False, False)

    def test_stop_without_start(self) -> None:
        assert SweepTimer(_noop).stop() is False

    def test_can_restart_after_stop(self) -> None:
        async def scenario() -> bool:
            timer = SweepTimer(_noop, interval=60)
            timer.start()
            timer.stop()
            restarted = timer.start()
            timer.stop()
            return restarted

        assert asyncio.run(scenario()) is True


# ─────────────────────────────────────────────────────────────────────────────
# Integration tests: real AsyncIOScheduler on a real event loop
# ─────────────────────────────────────────────────────────────────────────────


class TestSweepTimerIntegration:
    def test_ticks_fire_until_stopped(self) -> None:
        calls: list[int] = []

        async def tick() -> None:
            calls.append(1)

        async def scenario() -> tuple[int, int]:
            timer = SweepTimer(tick, interval=0.05)
            timer.start()
            await asyncio.sleep(0.4)
            timer.stop()
            await asyncio.sleep(0.05)
            at_stop = len(calls)
            await asyncio.sleep(0.2)
            return at_stop, len(calls)

        at_stop, final = asyncio.run(scenario())
        assert at_stop >= 1
        assert final == at_stop

    def test_stop_lets_tick_in_progress_finish(self) -> None:
        finished: list[bool] = []

        async def scenario() -> tuple[int, int]:
            began = asyncio.Event()

            async def slow_tick() -> None:
                began.set()
                await asyncio.sleep(0.1)
                finished.append(True)

            timer = SweepTimer(slow_tick, interval=0.05)
            timer.start()
            await asyncio.wait_for(began.wait(), timeout=2)
            timer.stop()
            in_flight = timer.pending_ticks
            await asyncio.sleep(0.3)
            return in_flight, timer.pending_ticks

        in_flight, remaining = asyncio.run(scenario())
        assert in_flight >= 1
        assert remaining == 0
        assert finished

    def test_failing_tick_does_not_stop_timer(self) -> None:
        calls: list[int] = []

        async def tick() -> None:
            calls.append(1)
            raise RuntimeError("boom")

        async def scenario() -> int:
            timer = SweepTimer(tick, interval=0.05)
            timer.start()
            await asyncio.sleep(0.4)
            timer.stop()
            return len(calls)

        assert asyncio.run(scenario()) >= 2
