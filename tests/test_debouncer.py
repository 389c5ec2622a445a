import asyncio

import pytest

from core.services.debouncer import Debouncer


@pytest.mark.asyncio
async def test_burst_collapses_to_last_call():
    calls = []
    debouncer = Debouncer(calls.append, delay_ms=20)

    debouncer("a")
    debouncer("b")
    debouncer("c")
    assert debouncer.pending
    assert calls == []

    await debouncer.wait()

    assert calls == ["c"]
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_each_call_restarts_the_window():
    calls = []
    debouncer = Debouncer(calls.append, delay_ms=40)

    debouncer(1)
    await asyncio.sleep(0.025)
    debouncer(2)
    await asyncio.sleep(0.025)
    assert calls == []

    await debouncer.wait()
    assert calls == [2]


@pytest.mark.asyncio
async def test_flush_runs_pending_call_now():
    calls = []
    debouncer = Debouncer(lambda value, *, tag: calls.append((value, tag)), delay_ms=10_000)

    debouncer("x", tag="t")
    debouncer.flush()

    assert calls == [("x", "t")]
    assert not debouncer.pending
    debouncer.flush()
    assert calls == [("x", "t")]


@pytest.mark.asyncio
async def test_cancel_drops_pending_call():
    calls = []
    debouncer = Debouncer(calls.append, delay_ms=10)

    debouncer("x")
    debouncer.cancel()
    await asyncio.sleep(0.03)

    assert calls == []
    await asyncio.wait_for(debouncer.wait(), timeout=1)


@pytest.mark.asyncio
async def test_failing_callback_is_logged(caplog):
    def boom(_value):
        raise RuntimeError("boom")

    debouncer = Debouncer(boom, delay_ms=0)
    debouncer("x")
    await debouncer.wait()

    assert "Debounced callback" in caplog.text
    assert not debouncer.pending


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        Debouncer(print, delay_ms=-1)
