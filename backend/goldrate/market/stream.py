"""HTTP endpoints for the gold price feed, including the SSE live stream."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from .aggregator import Aggregator
from .currencies import SUPPORTED_CURRENCIES, currency_symbol
from .errors import NoSourcesAvailable
from .models import AggregatedPrice
from .price_stream import GoldPriceStream
from .seed_prices import BASE_CURRENCY

logger = logging.getLogger(__name__)


def create_stream_router(
    aggregator: Aggregator,
    interval: float = GoldPriceStream.DEFAULT_INTERVAL,
) -> APIRouter:
    """Create the gold price router around a shared Aggregator.

    This factory pattern lets us inject the Aggregator without globals. Each
    SSE connection gets its own GoldPriceStream, so every client can pick its
    own display currency.
    """
    router = APIRouter(prefix="/api/gold", tags=["gold"])

    @router.get("/currencies")
    async def list_currencies() -> list[dict]:
        """Display currencies offered to clients."""
        return [c._asdict() for c in SUPPORTED_CURRENCIES]

    @router.get("/price")
    async def current_price(currency: str = BASE_CURRENCY) -> dict:
        """Run one aggregation cycle and return the result."""
        try:
            price = await aggregator.aggregate(currency)
        except NoSourcesAvailable as e:
            raise HTTPException(status_code=503, detail=str(e)) from e
        return _to_payload(price)

    @router.get("/stream")
    async def stream_prices(request: Request, currency: str = BASE_CURRENCY) -> StreamingResponse:
        """SSE endpoint for live gold prices.

        The client connects with EventSource and receives one event per
        successful aggregation cycle:

            data: {"price": 2253.48, "currency": "EUR", "sources": [...], ...}

        Includes a retry directive so the browser auto-reconnects on
        disconnection (EventSource built-in behavior).
        """
        stream = GoldPriceStream(aggregator, currency=currency, interval=interval)
        return StreamingResponse(
            _generate_events(stream, request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


def _to_payload(price: AggregatedPrice) -> dict:
    data = price.to_dict()
    data["symbol"] = currency_symbol(price.currency)
    return data


async def _generate_events(
    stream: GoldPriceStream,
    request: Request,
    disconnect_check: float = 0.5,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted price events.

    Subscribes a queue to ``stream`` and forwards every delivered price. Stops
    when the client disconnects (checked every ``disconnect_check`` seconds)
    and unsubscribes, which idles the stream.
    """
    # Tell the client to retry after 1 second if the connection drops
    yield "retry: 1000\n\n"

    queue: asyncio.Queue[AggregatedPrice] = asyncio.Queue()
    push = queue.put_nowait
    client_ip = request.client.host if request.client else "unknown"
    logger.info("SSE client connected: %s (%s)", client_ip, stream.currency)

    await stream.subscribe(push)
    try:
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break

            try:
                price = await asyncio.wait_for(queue.get(), timeout=disconnect_check)
            except asyncio.TimeoutError:
                continue

            yield f"data: {json.dumps(_to_payload(price))}\n\n"
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
    finally:
        await stream.unsubscribe(push)
