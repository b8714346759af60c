"""
Posner cueing: detect a target that follows a (valid or invalid) spatial cue.

The cue appears during the end of the fixation period, ``soa_ms`` before the
target, so the fixation delay for each trial is stretched by its SOA and the
response window opens at target onset.
"""
import itertools

from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.paradigms.base import ParadigmAdapter
from cogtrials.engine.paradigms.base import balanced_labels
from cogtrials.engine.paradigms.base import check_choices

LOCATIONS = ("left", "right")
_OPPOSITE = {"left": "right", "right": "left"}


class PosnerParadigm(ParadigmAdapter):
    name = "posner"
    label = "Posner Cueing Task"
    responses = ("space",)
    defaults = {
        "soas": (50, 150, 300, 500),
        # probability that the target appears at the cued location
        "cue_validity": {"endogenous": 0.8, "exogenous": 0.5},
        "cue_duration_ms": 200,
    }

    def validate(self, params):
        check_choices(params, "soas")
        for soa in params["soas"]:
            if isinstance(soa, bool) or not isinstance(soa, int) or soa < 0:
                raise InvalidConfig(f"soas must be non-negative integers, got {soa!r}")
        validity = params["cue_validity"]
        if not isinstance(validity, dict) or not validity:
            raise InvalidConfig("cue_validity must map cue types to probabilities")
        for cue_type, p in validity.items():
            if isinstance(p, bool) or not isinstance(p, (int, float)) or not 0 <= p <= 1:
                raise InvalidConfig(f"cue_validity[{cue_type!r}] must be between 0 and 1, got {p!r}")
        duration = params["cue_duration_ms"]
        if isinstance(duration, bool) or not isinstance(duration, int) or duration < 0:
            raise InvalidConfig(f"cue_duration_ms must be a non-negative integer, got {duration!r}")

    def build(self, count, rng, params):
        cells = list(itertools.product(sorted(params["cue_validity"]), params["soas"]))
        assigned = [cells[i % len(cells)] for i in range(count)]
        rng.shuffle(assigned)

        # Exact validity proportions within each cue type.
        validity_by_type = {}
        for cue_type, p in params["cue_validity"].items():
            n = sum(1 for t, _ in assigned if t == cue_type)
            validity_by_type[cue_type] = iter(balanced_labels(n, p, "valid", "invalid", rng))

        trials = []
        for cue_type, soa in assigned:
            validity = next(validity_by_type[cue_type])
            cue_location = rng.choice(LOCATIONS)
            target_location = cue_location if validity == "valid" else _OPPOSITE[cue_location]
            trials.append(
                {
                    "correct_response": "space",
                    "condition": validity,
                    "stimulus": {
                        "cue_type": cue_type,
                        "cue_location": cue_location,
                        "target_location": target_location,
                        "soa_ms": soa,
                        "cue_duration_ms": min(params["cue_duration_ms"], soa),
                    },
                }
            )
        return trials

    def fixation_delay_ms(self, trial, default_ms):
        return default_ms + trial.stimulus["soa_ms"]

    def render_stimulus(self, trial, phase):
        rendered = super().render_stimulus(trial, phase)
        rendered["cue"] = {
            "location": trial.stimulus["cue_location"],
            "type": trial.stimulus["cue_type"],
            "onset_before_target_ms": trial.stimulus["soa_ms"],
            "duration_ms": trial.stimulus["cue_duration_ms"],
        }
        rendered["target_location"] = trial.stimulus["target_location"]
        return rendered
