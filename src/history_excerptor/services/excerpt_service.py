"""Excerpt generation: sign, submit, then poll until the generator is done."""

from __future__ import annotations

import threading
from typing import Protocol
from uuid import UUID

import structlog

from history_excerptor.clients.excerpt import ExcerptClient, ThirdPartyHeader
from history_excerptor.clients.schemas import ExcerptEventDto, StatusDto
from history_excerptor.errors import ExcerptWaitCancelledError, HistoryExcerptGenerationError
from history_excerptor.services.digital_signature import DigitalSignatureService

logger = structlog.get_logger(__name__)

EXCERPT_STATUS_CHECK_DELAY_S = 5


class Sleeper(Protocol):
    def sleep(self, seconds: float) -> None:
        """Block for `seconds`; raise ExcerptWaitCancelledError if interrupted."""
        raise NotImplementedError


class CancellableSleeper:
    """
    Timed wait that can be aborted from another thread via cancel().

    Ctrl-C during the wait is reported as a cancellation too.
    """

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def sleep(self, seconds: float) -> None:
        try:
            interrupted = self._cancelled.wait(timeout=seconds)
        except KeyboardInterrupt as e:
            raise ExcerptWaitCancelledError("Waiting for excerpt status was interrupted") from e
        if interrupted:
            raise ExcerptWaitCancelledError("Waiting for excerpt status was cancelled")


class ExcerptService:
    def __init__(
        self,
        excerpt_status_check_max_attempts: int,
        excerpt_client: ExcerptClient,
        digital_signature_service: DigitalSignatureService,
        sleeper: Sleeper | None = None,
    ) -> None:
        if excerpt_status_check_max_attempts < 1:
            raise ValueError("excerpt_status_check_max_attempts must be a positive integer")
        self._max_attempts = excerpt_status_check_max_attempts
        self._excerpt_client = excerpt_client
        self._signature_service = digital_signature_service
        self._sleeper = sleeper or CancellableSleeper()

    def generate(self, event: ExcerptEventDto) -> UUID:
        """Submit a signed generation request; returns the generator-assigned excerpt id."""
        derived_signature = self._signature_service.sign(event)
        signature_key = self._signature_service.save_signature(derived_signature)
        headers = create_excerpt_request_headers(signature_key)

        logger.info("excerpt_generation_requested", excerpt_type=event.excerpt_type)
        excerpt_id = self._excerpt_client.generate(event, headers).excerpt_identifier
        logger.debug("excerpt_generation_accepted", excerpt_id=str(excerpt_id))
        return excerpt_id

    def get_current_status(self, excerpt_id: UUID) -> StatusDto:
        status = self._excerpt_client.status(excerpt_id)
        logger.info("excerpt_status_checked", excerpt_id=str(excerpt_id), status=status.status)
        return status

    def get_final_processing_status(self, excerpt_id: UUID) -> StatusDto:
        """
        Poll until the status is anything but IN_PROGRESS.

        A FAILED status is returned like any other terminal status; only
        running out of attempts raises HistoryExcerptGenerationError.
        """
        for attempt in range(1, self._max_attempts + 1):
            status = self.get_current_status(excerpt_id)
            if not status.in_progress:
                return status
            if attempt == self._max_attempts:
                break
            logger.info(
                "excerpt_status_wait",
                seconds=EXCERPT_STATUS_CHECK_DELAY_S,
                attempt=attempt,
                max_attempts=self._max_attempts,
            )
            self._sleeper.sleep(EXCERPT_STATUS_CHECK_DELAY_S)

        raise HistoryExcerptGenerationError(self._max_attempts)


def create_excerpt_request_headers(signature_key: str) -> dict[str, str]:
    # Both headers reference the same stored artifact.
    return {
        ThirdPartyHeader.X_DIGITAL_SIGNATURE.value: signature_key,
        ThirdPartyHeader.X_DIGITAL_SIGNATURE_DERIVED.value: signature_key,
    }
