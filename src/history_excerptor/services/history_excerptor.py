"""End-to-end history excerpt workflow."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

import structlog

from history_excerptor.clients.excerpt import ExcerptClient
from history_excerptor.clients.schemas import ExcerptEventDto, StatusDto
from history_excerptor.models.domain import HistoryExcerptData
from history_excerptor.repos.history_table_repo import HistoryTableSelectRepo
from history_excerptor.services.excerpt_service import ExcerptService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ExcerptOutcome:
    excerpt_id: UUID
    status: StatusDto
    row_count: int


class HistoryExcerptorService:
    """
    Read a record's history trail and turn it into a generated excerpt.

    The final status is returned uninterpreted; FAILED from the generator
    is an outcome, not an exception.
    """

    def __init__(
        self,
        history_repo: HistoryTableSelectRepo,
        excerpt_service: ExcerptService,
        excerpt_client: ExcerptClient,
        excerpt_type: str = "history-excerpt",
        requires_system_signature: bool = True,
    ) -> None:
        self._history_repo = history_repo
        self._excerpt_service = excerpt_service
        self._excerpt_client = excerpt_client
        self._excerpt_type = excerpt_type
        self._requires_system_signature = requires_system_signature

    def build_event(self, record_id: UUID, history: HistoryExcerptData) -> ExcerptEventDto:
        return ExcerptEventDto(
            record_id=record_id,
            excerpt_type=self._excerpt_type,
            excerpt_input_data=history.to_dict(),
            requires_system_signature=self._requires_system_signature,
        )

    def excerpt(self, table_name: str, record_id: UUID) -> ExcerptOutcome:
        history = self._history_repo.get_record_history(table_name, record_id)
        event = self.build_event(record_id, history)

        excerpt_id = self._excerpt_service.generate(event)
        status = self._excerpt_service.get_final_processing_status(excerpt_id)
        logger.info(
            "history_excerpt_finished",
            table_name=table_name,
            excerpt_id=str(excerpt_id),
            status=status.status,
        )
        return ExcerptOutcome(excerpt_id=excerpt_id, status=status, row_count=len(history.rows))

    def download(self, excerpt_id: UUID) -> bytes:
        return self._excerpt_client.download(excerpt_id)
