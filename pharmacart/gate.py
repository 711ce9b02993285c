"""
ActionGate — single-flight guard for async requests, bound to a view's lifetime.

    gate = ActionGate()
    url = await gate.run(f"payment:{order.order_id}", lambda: client.generate_payment_url(order.order_id))

    # view goes away
    gate.close()    # in-flight requests are cancelled, their results dropped

A second ``run`` for a key that is still in flight raises DuplicateSubmission
instead of sending the request twice.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pharmacart.errors import DuplicateSubmission, RequestDropped

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ActionGate:
    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Future[object]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def busy(self, key: str) -> bool:
        return key in self._inflight

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``factory()`` unless a request for ``key`` is outstanding.

        Raises:
            DuplicateSubmission: ``key`` already in flight
            RequestDropped: gate closed before the result was delivered
        """
        if self._closed:
            logger.info("Dropped %s: gate closed", key)
            raise RequestDropped(key)
        if key in self._inflight:
            logger.info("Duplicate submission for %s", key)
            raise DuplicateSubmission(key)

        task = asyncio.ensure_future(factory())
        self._inflight[key] = task
        try:
            result = await task
        except asyncio.CancelledError:
            if self._closed and task.cancelled():
                logger.info("Dropped %s: cancelled on close", key)
                raise RequestDropped(key) from None
            raise
        finally:
            if self._inflight.get(key) is task:
                del self._inflight[key]

        if self._closed:
            logger.info("Dropped %s: result arrived after close", key)
            raise RequestDropped(key)
        return result

    def close(self) -> None:
        """Cancel every outstanding request; later results are discarded."""
        self._closed = True
        for task in self._inflight.values():
            task.cancel()

    async def __aenter__(self) -> ActionGate:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.close()


__all__ = ("ActionGate",)
