"""Live gold price stream: periodic aggregation pushed to subscribers."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable

from .aggregator import Aggregator
from .currencies import normalize_code
from .errors import NoSourcesAvailable
from .models import AggregatedPrice
from .seed_prices import BASE_CURRENCY

logger = logging.getLogger(__name__)

PriceCallback = Callable[[AggregatedPrice], None]


class StreamState(str, enum.Enum):
    IDLE = "idle"  # No subscribers, no timer
    ACTIVE = "active"  # At least one subscriber, timer running


class GoldPriceStream:
    """Republishes Aggregator output to a set of callbacks on a fixed interval.

    The stream is IDLE until the first subscriber arrives. Subscribing the first
    callback runs one aggregation immediately, delivers it, then starts a
    background task that repeats every ``interval`` seconds. Removing the last
    callback cancels that task. The stream can be re-activated at any time.

    Lifecycle:
        stream = GoldPriceStream(aggregator, currency="EUR")
        await stream.subscribe(on_price)      # immediate delivery, timer armed
        await stream.change_currency("GBP")   # immediate delivery in GBP
        await stream.unsubscribe(on_price)    # timer cancelled, IDLE again

    Aggregation cycles are serialized by a lock. Cancelling the timer never
    cancels a cycle already in flight; its result goes to whoever is still
    subscribed when it completes, and is dropped if the display currency has
    changed in the meantime.
    """

    DEFAULT_INTERVAL = 5.0

    def __init__(
        self,
        aggregator: Aggregator,
        currency: str = BASE_CURRENCY,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._aggregator = aggregator
        self._currency = normalize_code(currency)
        self._interval = interval
        # dict preserves insertion order -> deterministic notification order
        self._subscribers: dict[PriceCallback, None] = {}
        self._state = StreamState.IDLE
        self._task: asyncio.Task | None = None
        self._cycle_lock = asyncio.Lock()
        self._last_price: AggregatedPrice | None = None

    # --- Public API ---

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is StreamState.ACTIVE

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def last_price(self) -> AggregatedPrice | None:
        """Most recently delivered price, or None before the first delivery."""
        return self._last_price

    async def subscribe(self, callback: PriceCallback) -> None:
        """Register a callback. The first one activates the stream.

        Subscribing an already registered callback is a no-op.
        """
        if callback in self._subscribers:
            return
        self._subscribers[callback] = None
        if len(self._subscribers) == 1:
            await self._start()

    async def unsubscribe(self, callback: PriceCallback) -> None:
        """Remove a callback. Removing the last one idles the stream.

        Unknown callbacks are ignored.
        """
        if callback not in self._subscribers:
            return
        del self._subscribers[callback]
        if not self._subscribers:
            await self._stop()

    async def change_currency(self, currency: str) -> None:
        """Switch the display currency.

        When active, the timer is restarted so subscribers get a price in the
        new currency right away instead of after a full interval.
        """
        self._currency = normalize_code(currency)
        logger.info("Price stream currency changed to %s", self._currency)
        if self._state is StreamState.ACTIVE:
            await self._stop()
            await self._start()

    async def close(self) -> None:
        """Drop every subscriber and go idle. Safe to call multiple times."""
        self._subscribers.clear()
        await self._stop()

    # --- Internals ---

    async def _start(self) -> None:
        self._state = StreamState.ACTIVE
        logger.info(
            "Price stream active: %s, %.1fs interval, %d subscriber(s)",
            self._currency,
            self._interval,
            len(self._subscribers),
        )
        await self._run_cycle()
        # Subscribers may have left, or another _start armed the timer, while
        # the first cycle was running
        if self._state is StreamState.ACTIVE and self._task is None:
            self._task = asyncio.create_task(self._tick_loop(), name="gold-price-stream")

    async def _stop(self) -> None:
        was_active = self._state is StreamState.ACTIVE
        self._state = StreamState.IDLE
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if was_active:
            logger.info("Price stream idle")

    async def _tick_loop(self) -> None:
        """Repeat cycles on interval. The first cycle already ran in _start()."""
        while True:
            await asyncio.sleep(self._interval)
            await asyncio.shield(self._run_cycle())

    async def _run_cycle(self) -> None:
        """Aggregate once and notify subscribers. Never raises."""
        async with self._cycle_lock:
            currency = self._currency
            try:
                price = await self._aggregator.aggregate(currency)
            except NoSourcesAvailable as e:
                # Stay active; the next tick retries
                logger.error("Gold price update skipped: %s", e)
                return
            except Exception:
                logger.exception("Gold price update failed")
                return

            if price.currency != self._currency:
                logger.debug("Dropping stale %s price after currency change", price.currency)
                return
            self._last_price = price
            self._notify(price)

    def _notify(self, price: AggregatedPrice) -> None:
        for callback in list(self._subscribers):
            try:
                callback(price)
            except Exception:
                logger.exception("Price subscriber %r failed", callback)
