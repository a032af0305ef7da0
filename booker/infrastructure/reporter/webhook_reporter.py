from __future__ import annotations

import asyncio
import logging
import time

import httpx

from booker.application.ports.status_reporter import StatusReporterPort
from booker.domain.entities.booking_state import BookingPhase
from booker.domain.entities.effect import ManualTriggerOffer


class WebhookStatusReporter(StatusReporterPort):
    """POSTs status lines to a webhook, one countdown line per phase. Deliveries run as background tasks."""

    def __init__(self, url: str, client: httpx.AsyncClient | None = None) -> None:
        self._url = url
        self._client = client or httpx.AsyncClient(timeout=5.0)
        self._last_phase: BookingPhase | None = None
        self._tasks: set[asyncio.Task] = set()
        self._logger = logging.getLogger(__name__)

    def report(self, phase: BookingPhase, message: str, offer: ManualTriggerOffer) -> None:
        # Countdown ticks repeat within a phase; only the first is sent
        if phase == self._last_phase and phase in (
            BookingPhase.awaiting_window,
            BookingPhase.preparation_ready,
        ):
            return
        self._last_phase = phase

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._logger.warning("No running loop, status webhook skipped", extra={"phase": phase.value})
            return

        payload = {
            "phase": phase.value,
            "message": message,
            "offer": offer.value,
            "reported_at": time.time(),
        }
        task = loop.create_task(self._post(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _post(self, payload: dict[str, object]) -> None:
        try:
            resp = await self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            self._logger.error("Status webhook unreachable", extra={"reason": str(e)})
            return
        if resp.status_code >= 400:
            self._logger.error(
                "Status webhook rejected report",
                extra={"reason": f"HTTP {resp.status_code}", "phase": payload["phase"]},
            )

    async def aclose(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self._client.aclose()
