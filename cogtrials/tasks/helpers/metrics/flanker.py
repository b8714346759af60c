"""Server-side summary metric computation for the Eriksen Flanker task."""
from cogtrials.tasks.helpers.metrics.common import compute_basic_summary
from cogtrials.tasks.helpers.metrics.common import compute_congruency_summary


def compute_flanker_summary(trials):
    """
    Compute Flanker summary metrics from a list of trial dicts.

    Each trial dict is expected to have:
      condition (str)                 : "congruent" or "incongruent"
      is_correct (bool)               : whether the response was correct
      timed_out (bool)                : no response within the window
      reaction_time_ms (float | None) : response time in ms

    Returns the basic summary plus:
      congruent_median_rt    : median RT on correct congruent trials (ms)
      incongruent_median_rt  : median RT on correct incongruent trials (ms)
      conflict_effect_ms     : incongruent_median_rt - congruent_median_rt
      congruent_accuracy     : proportion correct on congruent trials (float 0-1)
      incongruent_accuracy   : proportion correct on incongruent trials (float 0-1)
    """
    summary = compute_basic_summary(trials)
    summary.update(compute_congruency_summary(trials, "conflict_effect_ms"))
    return summary
