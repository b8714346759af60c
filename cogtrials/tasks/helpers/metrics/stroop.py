"""Server-side summary metric computation for the Stroop colour-word task."""
from cogtrials.tasks.helpers.metrics.common import compute_basic_summary
from cogtrials.tasks.helpers.metrics.common import compute_congruency_summary


def compute_stroop_summary(trials):
    """
    Same shape as the flanker summary; the RT difference is reported as
    stroop_effect_ms.
    """
    summary = compute_basic_summary(trials)
    summary.update(compute_congruency_summary(trials, "stroop_effect_ms"))
    return summary
