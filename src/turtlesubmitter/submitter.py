"""
TurtleSubmitter - Uploads sighting batches to a Turtle scout session.

Each flush becomes one PATCH to the session endpoint. Submission problems are
logged and reported through the return value; they are never raised, since the
next flush resends the full current state anyway.
"""

import json
import logging
from collections.abc import Iterable

import aiohttp

from .logging_manager import log_submission_event
from .models import Sighting, TurtleSighting, TurtleSightings
from .reference import ReferenceData


class TurtleSubmitter:
    """
    Sends sightings to ``{base_url}/api/v1/scout/{session_id}``.

    Example:
        >>> submitter = TurtleSubmitter("abc", "secret", reference=reference)
        >>> ok = await submitter.submit(snapshot)
    """

    DEFAULT_BASE_URL = "https://scout.wobbuffet.net"
    DEFAULT_TIMEOUT = 5.0  # seconds

    def __init__(
        self,
        session_id: str,
        password: str,
        reference: ReferenceData,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the submitter.

        Args:
            session_id: Turtle scout session id
            password: Collaborator password for the session
            reference: Reference tables used to resolve mob ids
            base_url: Turtle service root URL
            timeout: Total request timeout in seconds (default: 5)
        """
        self.session_id = session_id
        self.password = password
        self.reference = reference
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/v1/scout/{self.session_id}"

    def build_payload(self, sightings: Iterable[Sighting]) -> TurtleSightings:
        """Build the wire envelope for a snapshot."""
        return TurtleSightings(
            collaborator_password=self.password,
            sightings=[
                TurtleSighting.from_sighting(s, self.reference.mob_id(s.name)) for s in sightings
            ],
        )

    async def submit(self, sightings: list[Sighting]) -> bool:
        """
        Send one batch of sightings.

        Args:
            sightings: Snapshot taken from the aggregator

        Returns:
            True if Turtle answered 200, False otherwise. Never raises.
        """
        try:
            payload = self.build_payload(sightings)
            body = json.dumps(payload.to_dict())
        except (TypeError, ValueError) as e:
            self.logger.error(f"Failed to serialize sightings: {e}")
            log_submission_event(
                "submission_failed", self.session_id, len(sightings), {"error": str(e)}
            )
            return False

        self.logger.info(f"Sending {len(payload.sightings)} mobs to {self.url}")

        try:
            status, response_text = await self._patch(body)

        except TimeoutError:
            self.logger.warning(f"Timed out sending mobs after {self.timeout}s")
            log_submission_event(
                "submission_timeout", self.session_id, len(payload.sightings)
            )
            return False

        except aiohttp.ClientError as e:
            self.logger.warning(f"Network error sending mobs: {e}")
            log_submission_event(
                "submission_failed", self.session_id, len(payload.sightings), {"error": str(e)}
            )
            return False

        if status != 200:
            self.logger.warning(f"Failed to send mobs: status {status}: {response_text[:500]}")
            log_submission_event(
                "submission_rejected",
                self.session_id,
                len(payload.sightings),
                {"status": status, "body": response_text[:500]},
            )
            return False

        self.logger.info("Mobs successfully sent")
        log_submission_event("submission_succeeded", self.session_id, len(payload.sightings))
        return True

    async def _patch(self, body: str) -> tuple[int, str]:
        """
        Issue the PATCH request.

        Returns:
            Tuple of (status, response_text); text is empty on success

        Raises:
            aiohttp.ClientError: On network errors
            TimeoutError: On timeout
        """
        headers = {"Content-Type": "application/json"}
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.patch(self.url, data=body, headers=headers) as response:
                if response.status != 200:
                    return response.status, await response.text()
                return response.status, ""

    def __repr__(self) -> str:
        return f"TurtleSubmitter(url={self.url}, timeout={self.timeout}s)"
