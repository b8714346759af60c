"""Server-side summary metric computation for the n-back task."""
import statistics

from cogtrials.tasks.helpers.metrics.common import compute_basic_summary


def d_prime(hits, misses, false_alarms, correct_rejections):
    """
    Signal-detection sensitivity with the log-linear correction
    (add 0.5 to each count), so perfect rates stay finite.
    """
    hit_rate = (hits + 0.5) / (hits + misses + 1)
    fa_rate = (false_alarms + 0.5) / (false_alarms + correct_rejections + 1)
    z = statistics.NormalDist().inv_cdf
    return z(hit_rate) - z(fa_rate)


def compute_nback_summary(trials):
    """
    Compute n-back summary metrics.

    Targets are the trials whose correct_response is "match". A timeout
    counts as a miss on a target and as neither a false alarm nor a
    correct rejection on a non-target.

    Returns the basic summary plus:
      hits, misses, false_alarms, correct_rejections,
      hit_rate, false_alarm_rate, d_prime
    """
    targets = [t for t in trials if t.get("correct_response") == "match"]
    lures = [t for t in trials if t.get("correct_response") == "no_match"]

    hits = sum(1 for t in targets if t.get("response") == "match")
    misses = len(targets) - hits
    false_alarms = sum(1 for t in lures if t.get("response") == "match")
    correct_rejections = sum(1 for t in lures if t.get("response") == "no_match")

    summary = compute_basic_summary(trials)
    summary.update(
        {
            "hits": hits,
            "misses": misses,
            "false_alarms": false_alarms,
            "correct_rejections": correct_rejections,
            "hit_rate": hits / len(targets) if targets else None,
            "false_alarm_rate": false_alarms / len(lures) if lures else None,
            "d_prime": d_prime(hits, misses, false_alarms, correct_rejections) if targets and lures else None,
        }
    )
    return summary
