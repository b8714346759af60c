"""Server-side summary metric computation for the visual search task."""
from cogtrials.tasks.helpers.metrics.common import accuracy
from cogtrials.tasks.helpers.metrics.common import compute_basic_summary
from cogtrials.tasks.helpers.metrics.common import median_rt
from cogtrials.tasks.helpers.metrics.common import rt_slope


def _search_slope(trials):
    # slope of median correct RT per set size
    points = []
    for size in sorted({t["set_size"] for t in trials if t.get("set_size") is not None}):
        rt = median_rt([t for t in trials if t.get("set_size") == size])
        if rt is not None:
            points.append((size, rt))
    return rt_slope(points)


def compute_visual_search_summary(trials):
    """
    Compute visual search summary metrics.

    Target presence is read from correct_response ("j" present, "k" absent).

    Returns the basic summary plus:
      present_accuracy, absent_accuracy
      conditions : {condition: {accuracy, median_rt, slope_ms_per_item}}
    """
    present = [t for t in trials if t.get("correct_response") == "j"]
    absent = [t for t in trials if t.get("correct_response") == "k"]

    conditions = {}
    for condition in sorted({t["condition"] for t in trials if t.get("condition")}):
        subset = [t for t in trials if t.get("condition") == condition]
        conditions[condition] = {
            "accuracy": accuracy(subset),
            "median_rt": median_rt(subset),
            "slope_ms_per_item": _search_slope(subset),
        }

    summary = compute_basic_summary(trials)
    summary.update(
        {
            "present_accuracy": accuracy(present),
            "absent_accuracy": accuracy(absent),
            "conditions": conditions,
        }
    )
    return summary
