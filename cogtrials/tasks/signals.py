"""Signals for the tasks app."""
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from cogtrials.tasks.models import ParticipantRecord

logger = logging.getLogger(__name__)


@receiver(post_save, sender=ParticipantRecord)
def compute_summary_on_complete(sender, instance, created, **kwargs):
    """Compute summary metrics and quality flags when a record is marked complete."""
    if instance.completion_status != ParticipantRecord.CompletionStatus.COMPLETE:
        return

    from cogtrials.engine.recorder import summarise_block
    from cogtrials.tasks.helpers.metrics import METRIC_COMPUTERS
    from cogtrials.tasks.helpers.metrics.common import attach_stimuli
    from cogtrials.tasks.helpers.quality import compute_quality_flags
    from cogtrials.tasks.helpers.session_helpers import main_trial_specs

    compute_fn = METRIC_COMPUTERS.get(instance.paradigm)
    summary = {}
    if compute_fn is not None:
        trials = attach_stimuli(instance.trials or [], main_trial_specs(instance.session))
        summary = compute_fn(trials)
    summary["practice"] = summarise_block(instance.practice_trials or [])
    flags = compute_quality_flags(instance)
    logger.info(
        "Participant %s completed %s: %d trials, flags=%s",
        instance.participant_id,
        instance.paradigm,
        len(instance.trials or []),
        flags,
    )
    ParticipantRecord.objects.filter(pk=instance.pk).update(summary_metrics=summary, quality_flags=flags)
    instance.summary_metrics = summary
    instance.quality_flags = flags
