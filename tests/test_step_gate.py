"""Step gate tests for auto pacing, manual advances and mode switches."""

import asyncio

import pytest

from bsttrainer.step_gate import StepGate, StepGateBusyError, StepMode


async def _settle(ticks: int = 5):
    for _ in range(ticks):
        await asyncio.sleep(0)


def test_auto_pause_resumes_after_duration():
    async def scenario():
        gate = StepGate(default_duration=0.01)
        loop = asyncio.get_running_loop()
        start = loop.time()
        await gate.pause()
        assert loop.time() - start >= 0.005
        assert not gate.waiting

    asyncio.run(scenario())


def test_manual_pause_waits_for_advance():
    async def scenario():
        gate = StepGate(mode=StepMode.MANUAL)
        task = asyncio.create_task(gate.pause(0.0))
        await _settle()

        assert gate.awaiting_advance
        assert not task.done()

        assert gate.advance()
        await asyncio.wait_for(task, timeout=1.0)
        assert not gate.waiting

    asyncio.run(scenario())


def test_advance_releases_exactly_one_step():
    async def scenario():
        gate = StepGate(mode=StepMode.MANUAL)
        steps = []

        async def two_steps():
            await gate.pause()
            steps.append(1)
            await gate.pause()
            steps.append(2)

        task = asyncio.create_task(two_steps())
        await _settle()
        assert steps == []

        assert gate.advance()
        assert not gate.advance()
        await _settle()
        assert steps == [1]
        assert gate.awaiting_advance

        assert gate.advance()
        await asyncio.wait_for(task, timeout=1.0)
        assert steps == [1, 2]

    asyncio.run(scenario())


def test_advance_is_noop_when_idle_or_auto():
    async def scenario():
        gate = StepGate(default_duration=0.0)
        assert not gate.advance()

        task = asyncio.create_task(gate.pause(0.05))
        await _settle()
        assert gate.waiting
        assert not gate.advance()
        await task

        gate.set_mode(StepMode.MANUAL)
        assert not gate.advance()

    asyncio.run(scenario())


def test_switch_to_auto_releases_waiting_pause():
    async def scenario():
        gate = StepGate(default_duration=60.0, mode=StepMode.MANUAL)
        task = asyncio.create_task(gate.pause())
        await _settle()
        assert gate.awaiting_advance

        gate.set_mode(StepMode.AUTO)
        # Must not wait for the 60 s default duration
        await asyncio.wait_for(task, timeout=1.0)
        assert gate.mode is StepMode.AUTO

    asyncio.run(scenario())


def test_switch_to_manual_during_auto_pause_waits_for_advance():
    async def scenario():
        gate = StepGate(default_duration=0.05)
        task = asyncio.create_task(gate.pause())
        await _settle()

        gate.set_mode(StepMode.MANUAL)
        await asyncio.sleep(0.1)
        assert not task.done()
        assert gate.awaiting_advance

        assert gate.advance()
        await asyncio.wait_for(task, timeout=1.0)

    asyncio.run(scenario())


def test_overlapping_pause_is_rejected():
    async def scenario():
        gate = StepGate(mode=StepMode.MANUAL)
        task = asyncio.create_task(gate.pause())
        await _settle()

        with pytest.raises(StepGateBusyError):
            await gate.pause()

        gate.advance()
        await asyncio.wait_for(task, timeout=1.0)

    asyncio.run(scenario())


def test_ready_callback_reports_manual_waits():
    async def scenario():
        signals = []
        gate = StepGate(mode=StepMode.MANUAL, on_ready=signals.append)
        task = asyncio.create_task(gate.pause())
        await _settle()
        assert signals == [True]

        gate.advance()
        await task
        assert signals == [True, False]

    asyncio.run(scenario())
