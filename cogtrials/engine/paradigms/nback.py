"""
N-back: does the current letter match the one shown ``level`` trials ago?

Participants answer every trial with ``match`` or ``no_match``, so a missing
response is always an error. This differs from the go/no-go form of the task,
where only matches get a keypress and withholding on a non-match counts as
correct; scores from the two forms are not directly comparable.
"""
from cogtrials.engine.paradigms.base import ParadigmAdapter
from cogtrials.engine.paradigms.base import check_choices
from cogtrials.engine.paradigms.base import check_positive_int
from cogtrials.engine.paradigms.base import check_ratio

MATCH = "match"
NO_MATCH = "no_match"


class NBackParadigm(ParadigmAdapter):
    name = "nback"
    label = "N-Back Working Memory Task"
    responses = (MATCH, NO_MATCH)
    defaults = {"level": 2, "letters": ("F", "H", "K", "L"), "target_ratio": 0.25}

    def validate(self, params):
        check_positive_int(params, "level")
        check_choices(params, "letters", minimum=2)
        check_ratio(params, "target_ratio")

    def build(self, count, rng, params):
        level = params["level"]
        letters = list(params["letters"])
        eligible = list(range(level, count))
        n_targets = int(len(eligible) * params["target_ratio"])
        targets = set(rng.sample(eligible, n_targets))

        sequence = []
        for i in range(count):
            if i < level:
                sequence.append(rng.choice(letters))
            elif i in targets:
                sequence.append(sequence[i - level])
            else:
                sequence.append(rng.choice([l for l in letters if l != sequence[i - level]]))

        trials = []
        for i, letter in enumerate(sequence):
            is_target = i >= level and letter == sequence[i - level]
            trials.append(
                {
                    "correct_response": MATCH if is_target else NO_MATCH,
                    "condition": "target" if is_target else "nontarget",
                    "stimulus": {
                        "letter": letter,
                        "level": level,
                        "is_target": is_target,
                        "previous_letter": sequence[i - level] if i >= level else None,
                    },
                }
            )
        return trials

    def render_stimulus(self, trial, phase):
        rendered = super().render_stimulus(trial, phase)
        rendered["text"] = trial.stimulus["letter"]
        return rendered
