"""
Scouter - Follows the network log and keeps a Turtle session up to date.

Two asyncio tasks share a SightingAggregator: the ingestion task reads log
lines and records sightings, and the flush task submits a snapshot once per
interval whenever something changed.
"""

import asyncio
import logging
from pathlib import Path

from .aggregator import SightingAggregator
from .config import ScouterConfig
from .models import Sighting
from .parser import LineParser
from .reference import ReferenceData, load_reference_data
from .spawnpoints import SpawnpointResolver
from .submitter import TurtleSubmitter
from .tail_reader import tail_file


class Scouter:
    """
    Pipeline driver: tail, parse, filter, aggregate, submit.

    The pipeline has no normal end; ``run`` returns only when cancelled
    (``stop``) or when reading the log fails.
    """

    def __init__(
        self,
        config: ScouterConfig,
        reference: ReferenceData | None = None,
        submitter: TurtleSubmitter | None = None,
    ):
        """
        Initialize the scouter.

        Args:
            config: Scouting configuration
            reference: Reference tables (default: bundled tables)
            submitter: Submitter to use (default: one built from config)
        """
        self.config = config
        self.reference = reference or load_reference_data()
        self.submitter = submitter or TurtleSubmitter(
            session_id=config.session,
            password=config.password,
            reference=self.reference,
            base_url=config.service_url,
            timeout=config.submit_timeout,
        )
        self.parser = LineParser(
            reference=self.reference,
            resolver=SpawnpointResolver(self.reference),
            lookback=config.lookback,
        )
        self.aggregator = SightingAggregator()

        self._task: asyncio.Task | None = None
        self._logger = logging.getLogger(__name__)

        self.accepted_mobs = self._accepted_mobs(config.expansions)

    def _accepted_mobs(self, expansions: list[str]) -> frozenset[str]:
        if not expansions:
            return frozenset(self.reference.mob_names())

        known = self.reference.expansions
        for expansion in expansions:
            if expansion not in known:
                self._logger.warning(
                    f"Unknown expansion {expansion!r}, known: {', '.join(known)}"
                )
        return frozenset(self.reference.mob_names(expansions))

    # ============================================================================
    # Lifecycle Methods
    # ============================================================================

    async def run(self, log_path: str | Path) -> None:
        """
        Follow a log file and submit sightings until cancelled.

        Args:
            log_path: Network log file to follow

        Raises:
            RuntimeError: If the pipeline is already running
            OSError: If the log file cannot be opened or read
        """
        if self.is_running():
            raise RuntimeError("Scouter is already running")

        self._task = asyncio.current_task()
        self._logger.info(f"Scouting to {self.config.share_url}")

        try:
            async with tail_file(log_path, poll_interval=self.config.tail_poll_interval) as reader:
                flush_task = asyncio.create_task(self._flush_loop())
                try:
                    async for line in reader.lines():
                        await self.process_line(line)
                finally:
                    flush_task.cancel()
                    await asyncio.gather(flush_task, return_exceptions=True)
        finally:
            self._task = None
            self._logger.info("Scouter stopped")

    def stop(self) -> None:
        """Cancel a running pipeline; the log file is closed on the way out."""
        if self._task is not None and not self._task.done():
            self._logger.info("Stopping Scouter...")
            self._task.cancel()

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ============================================================================
    # Core Pipeline Methods
    # ============================================================================

    async def process_line(self, line: str) -> Sighting | None:
        """
        Parse one log line and record the sighting if it is in scope.

        Returns:
            The recorded sighting, or None if the line was skipped
        """
        sighting = self.parser.parse(line)
        if sighting is None:
            return None

        if sighting.name not in self.accepted_mobs:
            self._logger.debug(f"Ignoring {sighting.name}, not in selected expansions")
            return None

        await self.aggregator.update(sighting)
        return sighting

    async def flush(self) -> bool | None:
        """
        Submit the current sightings if anything changed.

        Returns:
            Submission outcome, or None when there was nothing to send
        """
        snapshot = await self.aggregator.flush_if_pending()
        if not snapshot:
            return None
        return await self.submitter.submit(snapshot)

    async def _flush_loop(self) -> None:
        """
        Flush on a fixed interval (runs in background task).

        Errors in one cycle are logged and the next cycle proceeds.
        """
        self._logger.debug(f"Flush loop started (interval: {self.config.flush_interval}s)")

        while True:
            await asyncio.sleep(self.config.flush_interval)
            try:
                await self.flush()
            except Exception as e:
                self._logger.error(f"Error during flush: {e}")
