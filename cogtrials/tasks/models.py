from uuid import uuid4

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import CASCADE
from django.db.models import BooleanField
from django.db.models import CharField
from django.db.models import DateTimeField
from django.db.models import JSONField
from django.db.models import Model
from django.db.models import TextChoices
from django.db.models import UUIDField
from django.utils import timezone

from cogtrials.tasks.registry import PARADIGM_REGISTRY


class ExperimentSession(Model):
    """An instructor-run session: every participant gets the same seeded trial lists."""

    id = UUIDField(primary_key=True, default=uuid4, editable=False)
    paradigm = CharField(max_length=50)
    random_seed = CharField(max_length=64)
    config = JSONField(default=dict, blank=True)
    created_at = DateTimeField(auto_now_add=True)
    is_active = BooleanField(default=True)

    def clean(self):
        if self.paradigm not in PARADIGM_REGISTRY:
            raise ValidationError(
                {"paradigm": f"'{self.paradigm}' is not a registered paradigm."}
            )

    def __str__(self) -> str:
        return f"{self.paradigm} session {self.id}"


class ParticipantRecord(Model):
    class CompletionStatus(TextChoices):
        COMPLETE = "complete", "Complete"
        ABANDONED = "abandoned", "Abandoned"
        IN_PROGRESS = "in_progress", "In Progress"

    session = models.ForeignKey(ExperimentSession, on_delete=CASCADE, related_name="participants")
    participant_id = CharField(max_length=100)
    participant_name = CharField(max_length=200, blank=True)
    share_data = BooleanField(default=False)
    paradigm = CharField(max_length=50)
    started_at = DateTimeField(null=True, blank=True)
    completed_at = DateTimeField(null=True, blank=True)
    practice_trials = JSONField(default=list, blank=True)
    trials = JSONField(default=list, blank=True)
    summary_metrics = JSONField(default=dict, blank=True)
    quality_flags = JSONField(default=list, blank=True)
    completion_status = CharField(
        max_length=20,
        choices=CompletionStatus.choices,
        default=CompletionStatus.IN_PROGRESS,
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["session", "participant_id"], name="unique_participant_per_session"
            ),
        ]
        indexes = [
            models.Index(fields=["session", "completion_status"], name="participant_status_idx"),
        ]

    def clean(self):
        if self.paradigm not in PARADIGM_REGISTRY:
            raise ValidationError(
                {"paradigm": f"'{self.paradigm}' is not a registered paradigm."}
            )

    def mark_complete(self):
        """Close the record; the post_save signal fills in metrics and flags."""
        self.completion_status = self.CompletionStatus.COMPLETE
        self.completed_at = timezone.now()
        self.save(update_fields=["completion_status", "completed_at"])

    def mark_abandoned(self):
        self.completion_status = self.CompletionStatus.ABANDONED
        self.save(update_fields=["completion_status"])

    def __str__(self) -> str:
        return f"{self.participant_id} \u2013 {self.session}"
