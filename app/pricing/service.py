"""
Price service: the refresh (write) path and the read path for the cached
fuel price document.

Refresh is read-merge-write against the store with no locking. Two refreshes
racing each other end up last-write-wins; the daily trigger keeps that from
happening in practice.
"""
import logging
import random
from datetime import datetime
from typing import Any, Callable

from pydantic import ValidationError

from app.core.settings import settings
from app.fuelcheck.client import FuelCheckClient
from app.fuelcheck.parsers import parse_observations
from app.pricing.aggregator import aggregate
from app.pricing.averages import compute_averages
from app.pricing.categories import FuelCategory
from app.pricing.history import date_key, entry_from_snapshot, merge_entry
from app.pricing.models import (
    AveragesBlock,
    CategoryPrices,
    DailyPriceEntry,
    DataPoints,
    FallbackPriceDocument,
    LatestPriceSnapshot,
    PriceDocument,
)
from app.pricing.seed import generate_history, synthetic_data_points
from app.pricing.timeutil import as_utc, iso_timestamp, utcnow
from app.store.base import PriceHistoryStore

logger = logging.getLogger(__name__)

DEFAULT_PRICES = {"unleaded": 180.0, "premium": 200.0, "diesel": 190.0}


def fallback_document(now: datetime | None = None) -> FallbackPriceDocument:
    stamp = iso_timestamp(now or utcnow())
    defaults = CategoryPrices(**DEFAULT_PRICES)
    return FallbackPriceDocument(
        latest=LatestPriceSnapshot(**DEFAULT_PRICES, lastUpdated=stamp, dataPoints=DataPoints()),
        averages=AveragesBlock(last7Days=defaults, last30Days=defaults.model_copy()),
        history=[],
        lastUpdated=stamp,
    )


def is_old_format(raw: Any) -> bool:
    # early deployments stored the bare snapshot: prices at the top level
    return isinstance(raw, dict) and "latest" not in raw and any(
        raw.get(c.value) is not None for c in FuelCategory
    )


def history_from_stored(raw: Any, retention_days: int) -> list[DailyPriceEntry]:
    """
    Recover whatever usable history a stored blob holds.

    Entries that fail validation are dropped individually; an old-format
    snapshot becomes a one-day history dated by its ``lastUpdated``.
    """
    if raw is None:
        return []
    if not isinstance(raw, dict):
        logger.warning("Stored price document is a %s, ignoring it", type(raw).__name__)
        return []

    if is_old_format(raw):
        try:
            day = date_key(datetime.fromisoformat(str(raw["lastUpdated"]).replace("Z", "+00:00")))
            entry = DailyPriceEntry(date=day, **{c.value: raw.get(c.value) for c in FuelCategory})
        except (KeyError, ValueError, ValidationError):
            logger.warning("Old-format price document could not be migrated, starting fresh")
            return []
        logger.info("Migrating old-format price document dated %s", day)
        return [entry]

    items = raw.get("history")
    if not isinstance(items, list):
        return []

    history: list[DailyPriceEntry] = []
    dropped = 0
    for item in items:
        try:
            entry = DailyPriceEntry.model_validate(item)
        except ValidationError:
            dropped += 1
            continue
        history = merge_entry(history, entry, retention_days)
    if dropped:
        logger.warning("Dropped %d malformed history entries", dropped)
    return history


def _parse_timestamp(value: Any) -> datetime | None:
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _recover_latest(raw: dict, history: list[DailyPriceEntry]) -> LatestPriceSnapshot | None:
    try:
        return LatestPriceSnapshot.model_validate(raw.get("latest"))
    except ValidationError:
        pass

    try:
        data_points = DataPoints.model_validate(raw.get("dataPoints") or {})
    except ValidationError:
        data_points = DataPoints()

    stamp = raw.get("lastUpdated")
    if is_old_format(raw) and _parse_timestamp(stamp):
        try:
            return LatestPriceSnapshot(
                **{c.value: raw.get(c.value) for c in FuelCategory},
                lastUpdated=str(stamp),
                dataPoints=data_points,
            )
        except ValidationError:
            pass

    if history:
        newest = history[0]
        return LatestPriceSnapshot(
            unleaded=newest.unleaded,
            premium=newest.premium,
            diesel=newest.diesel,
            lastUpdated=str(stamp) if _parse_timestamp(stamp) else f"{newest.date}T00:00:00.000Z",
        )
    return None


def document_from_stored(raw: Any, retention_days: int) -> PriceDocument | None:
    """
    Build a servable document from a stored blob.

    A blob that validates is returned as is. Otherwise the usable parts are
    salvaged the same way a refresh would (malformed history entries dropped,
    old-format snapshots migrated) and the averages are recomputed. Returns
    None when nothing usable remains.
    """
    if raw is None:
        return None
    try:
        return PriceDocument.model_validate(raw)
    except ValidationError:
        if not isinstance(raw, dict):
            return None

    history = history_from_stored(raw, retention_days)
    latest = _recover_latest(raw, history)
    if latest is None:
        return None

    logger.warning("Stored price document needed repair (%d days of history kept)", len(history))
    stamp = raw.get("lastUpdated")
    return PriceDocument(
        latest=latest,
        averages=compute_averages(history),
        history=history,
        lastUpdated=str(stamp) if _parse_timestamp(stamp) else latest.lastUpdated,
    )


class PriceService:
    def __init__(
        self,
        store: PriceHistoryStore,
        client: FuelCheckClient | None = None,
        *,
        retention_days: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.client = client or FuelCheckClient()
        self.retention_days = retention_days if retention_days is not None else settings.RETENTION_DAYS
        self.clock = clock

    # ------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------
    async def refresh_from_upstream(self) -> PriceDocument:
        payload = await self.client.get_prices()
        return await self.refresh(payload)

    async def refresh(self, payload: Any) -> PriceDocument:
        """
        Aggregate a raw feed payload into today's entry and persist the new
        document. Raises ``UpstreamError`` for an unreadable payload and
        ``StoreWriteError`` when the write fails; nothing is written in
        either case.
        """
        observations = parse_observations(payload)
        now = self.clock()

        snapshot = aggregate(observations, now=now)
        logger.info(
            "Aggregated %d observations: unleaded=%s premium=%s diesel=%s",
            len(observations), snapshot.unleaded, snapshot.premium, snapshot.diesel,
        )

        history = await self._prior_history()
        history = merge_entry(history, entry_from_snapshot(snapshot, date_key(now)), self.retention_days)

        document = PriceDocument(
            latest=snapshot,
            averages=compute_averages(history),
            history=history,
            lastUpdated=iso_timestamp(now),
        )
        await self.store.put(document)
        logger.info("Fuel prices refreshed (%d days of history)", len(history))
        return document

    async def _prior_history(self) -> list[DailyPriceEntry]:
        try:
            raw = await self.store.get()
        except Exception:
            logger.warning("Could not read existing price history, continuing with none", exc_info=True)
            return []
        return history_from_stored(raw, self.retention_days)

    async def seed(self, days: int = 90, rng: random.Random | None = None) -> PriceDocument:
        """Replace the stored document with synthetic history."""
        if days < 1:
            raise ValueError("days must be at least 1")
        rng = rng or random.Random()
        now = self.clock()

        history: list[DailyPriceEntry] = []
        for entry in generate_history(days, as_utc(now).date(), rng):
            history = merge_entry(history, entry, self.retention_days)

        newest = history[0]
        document = PriceDocument(
            latest=LatestPriceSnapshot(
                unleaded=newest.unleaded,
                premium=newest.premium,
                diesel=newest.diesel,
                lastUpdated=iso_timestamp(now),
                dataPoints=synthetic_data_points(rng),
            ),
            averages=compute_averages(history),
            history=history,
            lastUpdated=iso_timestamp(now),
        )
        await self.store.put(document)
        logger.info("Seeded %d days of synthetic prices (%d retained)", days, len(history))
        return document

    # ------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------
    async def read(self) -> PriceDocument:
        """Never raises: falls back to the default document on any failure."""
        try:
            document = document_from_stored(await self.store.get(), self.retention_days)
        except Exception:
            logger.warning("Error reading fuel prices, serving fallback", exc_info=True)
            return fallback_document(self.clock())

        if document is None:
            logger.warning("No cached prices found, serving fallback")
            return fallback_document(self.clock())
        return document

    async def describe(self) -> dict | None:
        raw = await self.store.get()
        if raw is None:
            return None

        history = raw.get("history") if isinstance(raw, dict) else None
        return {
            "dataStructure": {
                "hasLatest": bool(isinstance(raw, dict) and raw.get("latest")),
                "hasAverages": bool(isinstance(raw, dict) and raw.get("averages")),
                "hasHistory": isinstance(history, list),
                "historyLength": len(history) if isinstance(history, list) else 0,
                "lastUpdated": raw.get("lastUpdated") if isinstance(raw, dict) else None,
                "isOldFormat": is_old_format(raw),
            },
            "rawData": raw,
        }
