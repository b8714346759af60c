"""
Persistence store that writes engine results to ParticipantRecord rows.

Results are buffered per block and the whole participant row is upserted on
every save, so there is exactly one row per (session, participant_id). When
the database is unavailable the buffer is kept and the write is handed to a
Huey task for retry; the engine is told the result went to the fallback.
"""
import logging

from django.db import DatabaseError
from django.utils import timezone

from cogtrials.engine.types import Block
from cogtrials.engine.types import SaveOutcome
from cogtrials.tasks.models import ParticipantRecord
from cogtrials.tasks.tasks import upsert_participant_record_task

logger = logging.getLogger(__name__)


def upsert_participant_record(session_id, participant_id, fields: dict) -> ParticipantRecord:
    record, _ = ParticipantRecord.objects.update_or_create(
        session_id=session_id,
        participant_id=participant_id,
        defaults=fields,
    )
    return record


class ParticipantRecordStore:
    """Engine PersistenceStore backed by a ParticipantRecord."""

    def __init__(self, record: ParticipantRecord):
        self.record = record
        self._buffers = {
            Block.PRACTICE: list(record.practice_trials or []),
            Block.MAIN: list(record.trials or []),
        }
        self.pending_retry = False

    @property
    def share_data(self) -> bool:
        return self.record.share_data

    def fields(self) -> dict:
        return {
            "paradigm": self.record.paradigm,
            "participant_name": self.record.participant_name,
            "share_data": self.record.share_data,
            "started_at": self.record.started_at,
            "practice_trials": list(self._buffers[Block.PRACTICE]),
            "trials": list(self._buffers[Block.MAIN]),
        }

    def save(self, result) -> SaveOutcome:
        self._buffers[Block(result.phase)].append(result.to_dict())
        if self.record.started_at is None:
            self.record.started_at = timezone.now()
        fields = self.fields()
        try:
            self.record = upsert_participant_record(self.record.session_id, self.record.participant_id, fields)
        except DatabaseError:
            logger.exception(
                "Could not save trial %s for participant %s; queueing a retry",
                result.trial_index,
                self.record.participant_id,
            )
            self.pending_retry = True
            upsert_participant_record_task(str(self.record.session_id), self.record.participant_id, fields)
            return SaveOutcome(success=False, shared=False, fallback=True)
        self.pending_retry = False
        return SaveOutcome(success=True, shared=self.share_data)

    def results(self, block: Block) -> list[dict]:
        return list(self._buffers[Block(block)])
