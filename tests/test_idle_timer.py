"""Tests for the cancellable idle timer."""

import asyncio

from guild_jukebox.application.services.idle_timer import IdleTimer


class TestIdleTimer:
    async def test_fires_once_after_delay(self):
        fired = []

        async def on_fire():
            fired.append(True)

        timer = IdleTimer(0.01, on_fire)
        timer.arm()
        assert timer.armed

        await asyncio.sleep(0.05)

        assert fired == [True]
        assert not timer.armed

    async def test_disarm_prevents_fire(self):
        fired = []

        async def on_fire():
            fired.append(True)

        timer = IdleTimer(0.01, on_fire)
        timer.arm()
        timer.disarm()
        await asyncio.sleep(0.05)

        assert fired == []
        assert not timer.armed

    async def test_rearm_restarts_countdown(self):
        fired = []

        async def on_fire():
            fired.append(True)

        timer = IdleTimer(0.05, on_fire)
        timer.arm()
        await asyncio.sleep(0.03)
        timer.arm()
        await asyncio.sleep(0.03)

        assert fired == []

        await asyncio.sleep(0.05)
        assert fired == [True]

    async def test_callback_may_rearm(self):
        calls = []
        timer: IdleTimer

        async def on_fire():
            calls.append(True)
            if len(calls) == 1:
                timer.arm()

        timer = IdleTimer(0.01, on_fire)
        timer.arm()
        await asyncio.sleep(0.08)

        assert len(calls) == 2

    async def test_callback_errors_are_logged(self, caplog):
        async def on_fire():
            raise RuntimeError("boom")

        timer = IdleTimer(0.01, on_fire, name="idle-timer-test")
        timer.arm()
        await asyncio.sleep(0.05)

        assert "idle-timer-test" in caplog.text
        assert not timer.armed

    def test_disarm_when_not_armed_is_noop(self):
        async def on_fire():
            pass

        timer = IdleTimer(1.0, on_fire)
        timer.disarm()
        assert not timer.armed
        assert timer.delay == 1.0
