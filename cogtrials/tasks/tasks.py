"""
Huey background tasks for participant records.

Each function here is a thin wrapper: delegate to a helper, handle
queue-specific concerns (retries).
"""
import logging

from huey.contrib.djhuey import db_task

logger = logging.getLogger(__name__)


@db_task(retries=2, retry_delay=60)
def upsert_participant_record_task(session_id: str, participant_id: str, fields: dict) -> None:
    """
    Retry a ParticipantRecord write that failed inline.

    ``fields`` is the complete row as the store saw it when the write failed.
    """
    from django.db import DatabaseError

    from cogtrials.tasks.persistence import upsert_participant_record

    try:
        upsert_participant_record(session_id, participant_id, fields)
    except DatabaseError:
        logger.exception(
            "upsert_participant_record_task: write failed for %s in session %s",
            participant_id,
            session_id,
        )
        raise
