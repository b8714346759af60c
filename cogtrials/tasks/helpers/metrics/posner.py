"""Server-side summary metric computation for the Posner cueing task."""
from cogtrials.tasks.helpers.metrics.common import compute_basic_summary
from cogtrials.tasks.helpers.metrics.common import difference
from cogtrials.tasks.helpers.metrics.common import median_rt


def compute_posner_summary(trials):
    """
    Compute Posner cueing metrics.

    condition is "valid" or "invalid"; cue type and SOA come from the
    attached stimulus (see attach_stimuli). Trials without a stimulus only
    contribute to the overall validity effect.

    Returns the basic summary plus:
      valid_median_rt, invalid_median_rt, validity_effect_ms
      cue_types : {cue_type: {valid_median_rt, invalid_median_rt, validity_effect_ms}}
      soas      : {soa_ms: validity_effect_ms}
    """
    valid = [t for t in trials if t.get("condition") == "valid"]
    invalid = [t for t in trials if t.get("condition") == "invalid"]

    cue_types = {}
    for cue_type in sorted({t.get("stimulus", {}).get("cue_type") for t in trials} - {None}):
        v = median_rt([t for t in valid if t.get("stimulus", {}).get("cue_type") == cue_type])
        i = median_rt([t for t in invalid if t.get("stimulus", {}).get("cue_type") == cue_type])
        cue_types[cue_type] = {
            "valid_median_rt": v,
            "invalid_median_rt": i,
            "validity_effect_ms": difference(i, v),
        }

    soas = {}
    for soa in sorted({t.get("stimulus", {}).get("soa_ms") for t in trials} - {None}):
        v = median_rt([t for t in valid if t.get("stimulus", {}).get("soa_ms") == soa])
        i = median_rt([t for t in invalid if t.get("stimulus", {}).get("soa_ms") == soa])
        # JSONField keys must be strings
        soas[str(soa)] = difference(i, v)

    valid_rt = median_rt(valid)
    invalid_rt = median_rt(invalid)
    summary = compute_basic_summary(trials)
    summary.update(
        {
            "valid_median_rt": valid_rt,
            "invalid_median_rt": invalid_rt,
            "validity_effect_ms": difference(invalid_rt, valid_rt),
            "cue_types": cue_types,
            "soas": soas,
        }
    )
    return summary
