"""Server-side summary metric computation for the mental rotation task."""
from cogtrials.tasks.helpers.metrics.common import accuracy
from cogtrials.tasks.helpers.metrics.common import compute_basic_summary
from cogtrials.tasks.helpers.metrics.common import median_rt
from cogtrials.tasks.helpers.metrics.common import rt_slope


def compute_mental_rotation_summary(trials):
    """
    Compute mental rotation metrics.

    Returns the basic summary plus:
      same_accuracy, different_accuracy
      rt_by_disparity        : {degrees: median correct RT} for "same" trials
      rotation_slope_ms_per_degree
    """
    same = [t for t in trials if t.get("condition") == "same"]
    different = [t for t in trials if t.get("condition") == "different"]

    by_disparity = {}
    for t in same:
        angle = t.get("stimulus", {}).get("angular_disparity")
        if angle is not None:
            by_disparity.setdefault(angle, []).append(t)

    rt_by_disparity = {}
    points = []
    for angle in sorted(by_disparity):
        rt = median_rt(by_disparity[angle])
        rt_by_disparity[str(angle)] = rt
        if rt is not None:
            points.append((angle, rt))

    summary = compute_basic_summary(trials)
    summary.update(
        {
            "same_accuracy": accuracy(same),
            "different_accuracy": accuracy(different),
            "rt_by_disparity": rt_by_disparity,
            "rotation_slope_ms_per_degree": rt_slope(points),
        }
    )
    return summary
