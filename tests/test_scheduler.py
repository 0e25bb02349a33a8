# tests/test_scheduler.py
import asyncio

import pytest

from app.ingestion import scheduler
from app.pricing.errors import UpstreamError


@pytest.mark.anyio
async def test_scheduler_survives_failed_refresh(memory_service, memory_kv, upstream, monkeypatch, caplog):
    calls = []
    refresh = memory_service.refresh_from_upstream

    async def flaky_refresh():
        calls.append(1)
        if len(calls) == 1:
            raise UpstreamError("NSW API returned status: 503")
        if len(calls) == 3:
            # stop the loop
            raise asyncio.CancelledError
        return await refresh()

    monkeypatch.setattr(memory_service, "refresh_from_upstream", flaky_refresh)
    monkeypatch.setattr(scheduler.settings, "REFRESH_INTERVAL_SECONDS", 0)

    with pytest.raises(asyncio.CancelledError):
        await scheduler.start_scheduler(memory_service)

    assert len(calls) == 3
    assert "Scheduled fuel price refresh failed" in caplog.text
    assert memory_kv.data["fuel_prices"]["latest"]["diesel"] == 190.0
