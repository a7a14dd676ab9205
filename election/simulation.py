"""
Traffic simulator - demo harness that trickles random votes into the roster

Not part of the voting contract: it never sets voter markers or the exact
ballot counter, it only makes dashboards move. Each tick picks a random
office and, most of the time, one random candidate of that office, and
routes the increment through the tally engine.
"""

import asyncio
import random
from typing import Optional

from config import config, get_logger
from election import tally
from election.models import Candidate, Office
from election.store import CandidateStore
from exceptions import BallotError
from server.metrics import metrics

logger = get_logger(__name__).bind(component="simulation")


class TrafficSimulator:
    """Background task that adds a random vote every interval"""

    def __init__(
        self,
        store: CandidateStore,
        interval_seconds: Optional[float] = None,
        skip_probability: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else config.SIMULATION_INTERVAL_SECONDS
        )
        self.skip_probability = (
            skip_probability if skip_probability is not None else config.SIMULATION_SKIP_PROBABILITY
        )
        self.rng = rng or random.Random()
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0
        self.failed_ticks = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> Optional[Candidate]:
        """Apply one simulated vote. Returns the candidate voted for, or None."""
        self.ticks += 1
        office = self.rng.choice(list(Office))
        contenders = self.store.for_office(office)
        if not contenders:
            return None

        if self.rng.random() < self.skip_probability:
            return None

        chosen = self.rng.choice(contenders)
        self.store.replace(tally.apply_ballot(self.store.candidates, {office: chosen.id}))
        metrics.simulated_votes.inc()
        return self.store.get(chosen.id)

    async def _run(self):
        logger.info("traffic simulation started", interval_seconds=self.interval_seconds)
        try:
            while True:
                await asyncio.sleep(self.interval_seconds)
                try:
                    self.tick()
                except BallotError as e:
                    self.failed_ticks += 1
                    metrics.record_error(component="simulation", error=e)
                    logger.error(
                        "simulated vote failed",
                        error=str(e),
                        error_type=type(e).__name__,
                        failed_ticks=self.failed_ticks,
                    )
        except asyncio.CancelledError:
            logger.info("traffic simulation stopped", ticks=self.ticks, failed_ticks=self.failed_ticks)
            raise

    def start(self) -> bool:
        """Start the background loop on the running event loop. False if already running."""
        if self.is_running:
            return False
        self._task = asyncio.get_running_loop().create_task(self._run())
        return True

    async def stop(self) -> bool:
        """Cancel the background loop. False if it was not running."""
        if not self.is_running:
            return False
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        return True

    def status(self) -> dict:
        return {
            "running": self.is_running,
            "interval_seconds": self.interval_seconds,
            "skip_probability": self.skip_probability,
            "ticks": self.ticks,
            "failed_ticks": self.failed_ticks,
        }
