"""Live frame probe — loads the target in an isolated frame under a time budget.

The load attempt and a timer race for one settle-once future; whichever
fires first decides the ProbeOutcome and anything arriving afterwards is
dropped. Each run carries a generation number so a caller that has moved
on (``reset()``) can tell a stale outcome from the current one.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from framecheck.core.config import DEFAULT_TIMEOUT_MS
from framecheck.core.models import ProbeOutcome

NOT_RENDERED = ProbeOutcome(rendered=False, interactive=False, timed_out=False)
TIMED_OUT = ProbeOutcome(rendered=False, interactive=False, timed_out=True)


class FrameHost(ABC):
    """The embedding context the probe drives (a browser page with one iframe)."""

    @abstractmethod
    async def reset(self) -> None:
        """Put the embedding slot back to a blank frame."""
        ...

    @abstractmethod
    async def load(self, url: str) -> bool:
        """Point the frame at *url*; True on the load event, False on error."""
        ...

    @abstractmethod
    async def can_access(self) -> bool:
        """Try to read a property of the embedded window from the outside."""
        ...


class FrameProbe:
    """
    Single-slot probe over a FrameHost.

    Usage:
        probe = FrameProbe(host, logger)
        outcome = await probe.probe("https://example.com", timeout_ms=3000)
    """

    def __init__(self, host: FrameHost, logger=None):
        self.host = host
        self.logger = logger
        self._generation = 0

    # ── generations ─────────────────────────────────────────────

    @property
    def generation(self) -> int:
        return self._generation

    def reset(self) -> int:
        """Invalidate whatever run is in flight and return the new generation."""
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ── public API ──────────────────────────────────────────────

    async def probe(self, url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS,
                    generation: Optional[int] = None) -> ProbeOutcome:
        if generation is None:
            generation = self.reset()

        # A superseded run must not touch the shared frame slot.
        if not self.is_current(generation):
            self._log_debug(f"Skipping stale generation {generation}")
            return NOT_RENDERED

        try:
            await self.host.reset()
        except Exception as exc:
            self._log_debug(f"Frame slot reset failed: {exc}")
            return NOT_RENDERED

        if not self.is_current(generation):
            self._log_debug(f"Skipping stale generation {generation}")
            return NOT_RENDERED

        loop = asyncio.get_running_loop()
        settled: asyncio.Future = loop.create_future()

        def settle(outcome: ProbeOutcome, source: str):
            if settled.done():
                self._log_debug(
                    f"Ignoring late {source} for generation {generation}")
                return
            settled.set_result(outcome)

        timer = loop.call_later(max(timeout_ms, 0) / 1000.0,
                                settle, TIMED_OUT, "timeout")
        attempt = asyncio.ensure_future(self._attempt(url))
        attempt.add_done_callback(
            lambda task: settle(self._outcome_of(task), "frame event"))

        try:
            outcome = await settled
        finally:
            timer.cancel()

        if not self.is_current(generation):
            self._log_debug(f"Probe generation {generation} went stale")
        elif outcome.timed_out:
            self._log_debug(f"Frame did not settle within {timeout_ms} ms")
        return outcome

    # ── internals ───────────────────────────────────────────────

    async def _attempt(self, url: str) -> ProbeOutcome:
        if not await self.host.load(url):
            return NOT_RENDERED
        try:
            interactive = bool(await self.host.can_access())
        except Exception as exc:
            self._log_debug(f"Frame access denied: {exc}")
            interactive = False
        return ProbeOutcome(rendered=True, interactive=interactive)

    def _outcome_of(self, task: asyncio.Future) -> ProbeOutcome:
        if task.cancelled():
            return NOT_RENDERED
        exc = task.exception()
        if exc is not None:
            self._log_debug(f"Frame load error: {exc}")
            return NOT_RENDERED
        return task.result()

    def _log_debug(self, msg: str):
        if self.logger:
            self.logger.debug(msg)
