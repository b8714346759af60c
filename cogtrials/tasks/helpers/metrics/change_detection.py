"""Server-side summary metric computation for the change detection task."""
import statistics

from cogtrials.tasks.helpers.metrics.common import accuracy
from cogtrials.tasks.helpers.metrics.common import compute_basic_summary
from cogtrials.tasks.helpers.metrics.common import median_rt


def _rates(trials):
    """Hit and false alarm rates over answered trials; None where a kind is missing."""
    answered = [t for t in trials if not t.get("timed_out")]
    changes = [t for t in answered if t.get("condition") == "change"]
    sames = [t for t in answered if t.get("condition") == "same"]
    hit_rate = sum(1 for t in changes if t.get("is_correct")) / len(changes) if changes else None
    fa_rate = sum(1 for t in sames if not t.get("is_correct")) / len(sames) if sames else None
    return hit_rate, fa_rate


def cowans_k(set_size, hit_rate, false_alarm_rate):
    """Working-memory capacity estimate K = N * (H - FA), floored at zero."""
    if hit_rate is None or false_alarm_rate is None:
        return None
    return max(0.0, set_size * (hit_rate - false_alarm_rate))


def compute_change_detection_summary(trials):
    """
    Compute change detection metrics.

    Timeouts are left out of the hit and false alarm rates.

    Returns the basic summary plus:
      hit_rate, false_alarm_rate
      by_set_size  : {set size: {accuracy, median_rt, hit_rate, false_alarm_rate, k}}
      cowans_k     : mean K across set sizes
    """
    by_size = {}
    for t in trials:
        if t.get("set_size") is not None:
            by_size.setdefault(t["set_size"], []).append(t)

    by_set_size = {}
    capacities = []
    for size in sorted(by_size):
        group = by_size[size]
        hit_rate, fa_rate = _rates(group)
        k = cowans_k(size, hit_rate, fa_rate)
        by_set_size[str(size)] = {
            "accuracy": accuracy(group),
            "median_rt": median_rt(group),
            "hit_rate": hit_rate,
            "false_alarm_rate": fa_rate,
            "k": k,
        }
        if k is not None:
            capacities.append(k)

    hit_rate, fa_rate = _rates(trials)
    summary = compute_basic_summary(trials)
    summary.update(
        {
            "hit_rate": hit_rate,
            "false_alarm_rate": fa_rate,
            "by_set_size": by_set_size,
            "cowans_k": statistics.mean(capacities) if capacities else None,
        }
    )
    return summary
