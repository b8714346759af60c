"""
Quality flag computation for ParticipantRecord.

All functions are pure (no ORM calls). Flag strings are snake_case
identifiers stored in ParticipantRecord.quality_flags (a list of strings).
"""
from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.paradigms import get_paradigm

ANTICIPATION_MS = 100


def flag_anticipation_bursts(trials: list) -> bool:
    """Return True if 3 or more responses came in faster than 100 ms."""
    count = sum(
        1 for t in trials
        if not t.get("timed_out", False)
        and t.get("reaction_time_ms") is not None
        and t["reaction_time_ms"] < ANTICIPATION_MS
    )
    return count >= 3


def flag_excessive_timeouts(trials: list, threshold: float = 0.5) -> bool:
    """Return True if more than `threshold` proportion of trials timed out."""
    if not trials:
        return False
    timeouts = sum(1 for t in trials if t.get("timed_out", False))
    return (timeouts / len(trials)) > threshold


def chance_accuracy(paradigm: str) -> float | None:
    """
    1 / number of response options, or None where guessing has no meaning
    (single-response detection tasks, unknown paradigms).
    """
    try:
        responses = get_paradigm(paradigm).responses
    except InvalidConfig:
        return None
    if len(responses) < 2:
        return None
    return 1 / len(responses)


def flag_low_accuracy(trials: list, paradigm: str) -> bool:
    """Return True if accuracy is below chance for the paradigm."""
    chance = chance_accuracy(paradigm)
    if chance is None or not trials:
        return False
    correct = sum(1 for t in trials if t.get("is_correct", False))
    return (correct / len(trials)) < chance


def compute_quality_flags(record) -> list[str]:
    """
    Compute all quality flags for a ParticipantRecord's main block.

    Flags:
      "anticipation_burst"   : 3+ responses under 100 ms
      "excessive_timeouts"   : > 50% of trials timed out
      "low_accuracy"         : accuracy below chance
    """
    trials = record.trials or []
    flags = []
    if flag_anticipation_bursts(trials):
        flags.append("anticipation_burst")
    if flag_excessive_timeouts(trials):
        flags.append("excessive_timeouts")
    if flag_low_accuracy(trials, record.paradigm):
        flags.append("low_accuracy")
    return flags
