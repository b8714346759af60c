"""Eriksen flanker: respond to the direction of the centre arrow."""
from cogtrials.engine.paradigms.base import ParadigmAdapter
from cogtrials.engine.paradigms.base import balanced_labels
from cogtrials.engine.paradigms.base import check_positive_int
from cogtrials.engine.paradigms.base import check_ratio

_ARROWS = {"left": "<", "right": ">"}
_OPPOSITE = {"left": "right", "right": "left"}


class FlankerParadigm(ParadigmAdapter):
    name = "flanker"
    label = "Eriksen Flanker Task"
    responses = ("left", "right")
    defaults = {"congruent_ratio": 0.5, "flankers_per_side": 2}

    def validate(self, params):
        check_ratio(params, "congruent_ratio")
        check_positive_int(params, "flankers_per_side")

    def build(self, count, rng, params):
        per_side = params["flankers_per_side"]
        conditions = balanced_labels(count, params["congruent_ratio"], "congruent", "incongruent", rng)
        trials = []
        for condition in conditions:
            target = rng.choice(self.responses)
            flanker = target if condition == "congruent" else _OPPOSITE[target]
            display = _ARROWS[flanker] * per_side + _ARROWS[target] + _ARROWS[flanker] * per_side
            trials.append(
                {
                    "correct_response": target,
                    "condition": condition,
                    "stimulus": {
                        "display": display,
                        "target_direction": target,
                        "flanker_direction": flanker,
                    },
                }
            )
        return trials

    def render_stimulus(self, trial, phase):
        rendered = super().render_stimulus(trial, phase)
        rendered["text"] = trial.stimulus["display"]
        return rendered
