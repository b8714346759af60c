"""
Visual search: report whether the target is among the distractors.

Conditions rotate evenly through colour pop-out, orientation pop-out and two
conjunction searches; target-present and target-absent trials are split
exactly by ``present_ratio``.
"""
from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.paradigms.base import ParadigmAdapter
from cogtrials.engine.paradigms.base import balanced_labels
from cogtrials.engine.paradigms.base import check_choices
from cogtrials.engine.paradigms.base import check_ratio

CONDITIONS = (
    {
        "type": "color_popout",
        "target": ("blue", "vertical"),
        "distractors": (("orange", "vertical"),),
    },
    {
        "type": "orientation_popout",
        "target": ("blue", "vertical"),
        "distractors": (("blue", "horizontal"),),
    },
    {
        "type": "conjunction",
        "target": ("blue", "vertical"),
        "distractors": (("blue", "horizontal"), ("orange", "vertical")),
    },
    {
        "type": "conjunction",
        "target": ("orange", "horizontal"),
        "distractors": (("orange", "vertical"), ("blue", "horizontal")),
    },
)

PRESENT_KEY = "j"
ABSENT_KEY = "k"


def _item(kind, colour, orientation):
    return {"type": kind, "color": colour, "orientation": orientation}


class VisualSearchParadigm(ParadigmAdapter):
    name = "visual_search"
    label = "Visual Search Task"
    responses = (PRESENT_KEY, ABSENT_KEY)
    defaults = {"set_sizes": (4, 8, 16, 24), "present_ratio": 0.5}

    def validate(self, params):
        check_ratio(params, "present_ratio")
        check_choices(params, "set_sizes")
        for size in params["set_sizes"]:
            if isinstance(size, bool) or not isinstance(size, int) or size < 1:
                raise InvalidConfig(f"set_sizes must be positive integers, got {size!r}")

    def build(self, count, rng, params):
        conditions = [CONDITIONS[i % len(CONDITIONS)] for i in range(count)]
        presence = balanced_labels(count, params["present_ratio"], True, False, rng)
        cells = list(zip(conditions, presence))
        rng.shuffle(cells)

        trials = []
        for condition, present in cells:
            set_size = rng.choice(list(params["set_sizes"]))
            items = []
            if present:
                items.append(_item("target", *condition["target"]))
            while len(items) < set_size:
                items.append(_item("distractor", *rng.choice(condition["distractors"])))
            rng.shuffle(items)
            trials.append(
                {
                    "correct_response": PRESENT_KEY if present else ABSENT_KEY,
                    "condition": condition["type"],
                    "set_size": set_size,
                    "stimulus": {
                        "target_present": present,
                        "target": _item("target", *condition["target"]),
                        "items": [dict(item, position=pos) for pos, item in enumerate(items)],
                    },
                }
            )
        return trials

    def render_stimulus(self, trial, phase):
        rendered = super().render_stimulus(trial, phase)
        rendered["items"] = rendered["stimulus"]["items"]
        return rendered
