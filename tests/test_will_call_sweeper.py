"""
Will-call sweeper loop tests.
"""

import asyncio
from datetime import timedelta

from rxworkflow.adapters.db.memory import InMemoryWillCallBinRepository
from rxworkflow.application.dto import ProcessWillCallExpirationResponse
from rxworkflow.application.use_cases import ProcessWillCallExpirationUseCase
from rxworkflow.core.config import WillCallSettings
from rxworkflow.workers import run_will_call_sweeper_forever
from rxworkflow.workers.will_call_sweeper import sweep_once

from factories import NOW, make_bin
from fakes import FakeClaimReversalService, FakeNotificationSink


class CountingUseCase:
    def __init__(self, stop_event=None, fail_first=False):
        self.calls = 0
        self.stop_event = stop_event
        self.fail_first = fail_first

    async def execute(self):
        self.calls += 1
        if self.fail_first and self.calls == 1:
            raise RuntimeError("database went away")
        if self.stop_event is not None and self.calls >= 2:
            self.stop_event.set()
        return ProcessWillCallExpirationResponse()


async def test_sweep_once_runs_the_use_case(clock):
    repo = InMemoryWillCallBinRepository()
    await repo.add(make_bin(placed_at=NOW - timedelta(days=10)))
    use_case = ProcessWillCallExpirationUseCase(repo, FakeClaimReversalService(), FakeNotificationSink(), clock=clock)

    response = await sweep_once(use_case)
    assert len(response.reversed) == 1
    assert await repo.list_active() == []


async def test_disabled_sweeper_returns_immediately():
    use_case = CountingUseCase()
    await run_will_call_sweeper_forever(use_case, WillCallSettings(sweeper_enabled=False))
    assert use_case.calls == 0


async def test_stop_event_ends_the_loop(monkeypatch):
    monkeypatch.setattr("rxworkflow.workers.will_call_sweeper.MIN_INTERVAL_SECONDS", 0)
    stop_event = asyncio.Event()
    use_case = CountingUseCase(stop_event=stop_event, fail_first=True)
    settings = WillCallSettings(sweeper_enabled=True, sweeper_interval_seconds=0)

    await asyncio.wait_for(run_will_call_sweeper_forever(use_case, settings, stop_event), timeout=5)
    assert use_case.calls == 2


async def test_preset_stop_event_skips_sweeping():
    stop_event = asyncio.Event()
    stop_event.set()
    use_case = CountingUseCase()
    await run_will_call_sweeper_forever(use_case, WillCallSettings(sweeper_enabled=True), stop_event)
    assert use_case.calls == 0
