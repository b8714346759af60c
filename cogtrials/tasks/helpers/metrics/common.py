"""
Shared building blocks for the per-paradigm summary metrics.

Trials are the dicts stored on ParticipantRecord.trials (TrialResult.to_dict()),
optionally with a "stimulus" key added by attach_stimuli().
"""
import statistics


def attach_stimuli(results, specs):
    """Return copies of ``results`` with the matching TrialSpec stimulus under "stimulus"."""
    by_index = {spec.index: spec.to_dict()["stimulus"] for spec in specs}
    return [dict(r, stimulus=by_index.get(r["trial_index"], {})) for r in results]


def correct_rts(trials):
    """Reaction times of correct, non-timeout trials."""
    return [
        t["reaction_time_ms"] for t in trials
        if t.get("is_correct") and not t.get("timed_out") and t.get("reaction_time_ms") is not None
    ]


def accuracy(trials):
    if not trials:
        return None
    return sum(1 for t in trials if t.get("is_correct", False)) / len(trials)


def median_rt(trials):
    rts = correct_rts(trials)
    return statistics.median(rts) if rts else None


def difference(a, b):
    return (a - b) if (a is not None and b is not None) else None


def rt_slope(points):
    """
    Least-squares slope of RT against x for [(x, rt), ...].

    None unless there are at least two distinct x values.
    """
    xs = [x for x, _ in points]
    if len(set(xs)) < 2:
        return None
    return statistics.linear_regression(xs, [rt for _, rt in points]).slope


def compute_basic_summary(trials):
    """
    Metrics every paradigm reports.

    Returns dict with:
      trial_count, accuracy, median_rt (correct trials only), mean_rt,
      timeout_count
    """
    rts = correct_rts(trials)
    return {
        "trial_count": len(trials),
        "accuracy": accuracy(trials),
        "median_rt": statistics.median(rts) if rts else None,
        "mean_rt": statistics.mean(rts) if rts else None,
        "timeout_count": sum(1 for t in trials if t.get("timed_out", False)),
    }


def compute_congruency_summary(trials, effect_key):
    """Congruent vs incongruent accuracy and median RT, plus their RT difference."""
    congruent = [t for t in trials if t.get("condition") == "congruent"]
    incongruent = [t for t in trials if t.get("condition") == "incongruent"]
    c_median = median_rt(congruent)
    i_median = median_rt(incongruent)
    return {
        "congruent_median_rt": c_median,
        "incongruent_median_rt": i_median,
        effect_key: difference(i_median, c_median),
        "congruent_accuracy": accuracy(congruent),
        "incongruent_accuracy": accuracy(incongruent),
    }
