# tests/test_submission_guard.py
import asyncio
import pytest
from wonderwhiz.services.submission_guard import AlreadyProcessing, SubmissionGuard


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_second_begin_is_rejected_while_in_flight():
    guard = SubmissionGuard(cooldown_seconds=0.5, clock=FakeClock())
    guard.try_begin()
    assert guard.is_processing
    with pytest.raises(AlreadyProcessing):
        guard.try_begin()


def test_cooldown_after_release():
    clock = FakeClock()
    guard = SubmissionGuard(cooldown_seconds=0.5, clock=clock)
    guard.try_begin().release()

    clock.now += 0.4
    with pytest.raises(AlreadyProcessing):
        guard.try_begin()

    clock.now += 0.2
    assert not guard.is_processing
    guard.try_begin()


def test_release_is_idempotent():
    clock = FakeClock()
    guard = SubmissionGuard(cooldown_seconds=0.5, clock=clock)
    handle = guard.try_begin()
    handle.release()
    clock.now += 1
    handle.release()
    # a second release must not restart the cooldown
    assert not guard.is_processing


def test_handle_releases_when_body_raises():
    clock = FakeClock()
    guard = SubmissionGuard(cooldown_seconds=0, clock=clock)

    async def run():
        async with guard.try_begin():
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(run())
    assert not guard.is_processing


def test_guards_are_independent():
    first = SubmissionGuard(clock=FakeClock())
    second = SubmissionGuard(name="block", clock=FakeClock())
    first.try_begin()
    second.try_begin()
    assert first.is_processing and second.is_processing
