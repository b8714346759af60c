"""Stroop colour-word task: name the ink colour, ignore the word."""
from cogtrials.engine.paradigms.base import ParadigmAdapter
from cogtrials.engine.paradigms.base import balanced_labels
from cogtrials.engine.paradigms.base import check_ratio

# word -> (response key, ink hex)
COLOURS = {
    "RED": ("r", "#ef4444"),
    "GREEN": ("g", "#22c55e"),
    "BLUE": ("b", "#3b82f6"),
    "YELLOW": ("y", "#eab308"),
}


class StroopParadigm(ParadigmAdapter):
    name = "stroop"
    label = "Stroop Colour-Word Task"
    responses = tuple(key for key, _ in COLOURS.values())
    defaults = {"congruent_ratio": 0.5}

    def validate(self, params):
        check_ratio(params, "congruent_ratio")

    def build(self, count, rng, params):
        words = list(COLOURS)
        conditions = balanced_labels(count, params["congruent_ratio"], "congruent", "incongruent", rng)
        trials = []
        for condition in conditions:
            ink = rng.choice(words)
            if condition == "congruent":
                word = ink
            else:
                word = rng.choice([w for w in words if w != ink])
            key, ink_hex = COLOURS[ink]
            trials.append(
                {
                    "correct_response": key,
                    "condition": condition,
                    "stimulus": {"word": word, "ink": ink.lower(), "ink_hex": ink_hex},
                }
            )
        return trials

    def render_stimulus(self, trial, phase):
        rendered = super().render_stimulus(trial, phase)
        rendered["text"] = trial.stimulus["word"]
        rendered["colour"] = trial.stimulus["ink_hex"]
        return rendered
