"""
Change detection: was one square in a briefly shown colour array recoloured?

Each trial shows a memory array of ``set_size`` coloured squares on a grid for
``memory_ms``, then a blank retention interval of ``retention_ms``, then a
single test square at one of the remembered positions. Both periods run
before the response window opens, so the fixation delay for each trial is
stretched by their sum and reaction time is measured from test onset.
"""
from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.paradigms.base import ParadigmAdapter
from cogtrials.engine.paradigms.base import balanced_labels
from cogtrials.engine.paradigms.base import check_choices
from cogtrials.engine.paradigms.base import check_positive_int
from cogtrials.engine.paradigms.base import check_ratio

SAME_KEY = "s"
CHANGE_KEY = "d"

COLOURS = ("red", "blue", "green", "yellow", "purple", "orange", "pink", "cyan")


def _check_ms(params, key):
    value = params[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidConfig(f"{key} must be a non-negative integer, got {value!r}")


class ChangeDetectionParadigm(ParadigmAdapter):
    name = "change_detection"
    label = "Change Detection Task"
    responses = (SAME_KEY, CHANGE_KEY)
    defaults = {
        "set_sizes": (4, 8),
        "colours": COLOURS,
        "grid_size": 6,
        "change_ratio": 0.5,
        "memory_ms": 200,
        "retention_ms": 900,
    }

    def validate(self, params):
        check_choices(params, "colours", minimum=2)
        check_choices(params, "set_sizes")
        check_positive_int(params, "grid_size")
        check_ratio(params, "change_ratio")
        _check_ms(params, "memory_ms")
        _check_ms(params, "retention_ms")
        cells = params["grid_size"] ** 2
        for size in params["set_sizes"]:
            if isinstance(size, bool) or not isinstance(size, int) or not 1 <= size <= cells:
                raise InvalidConfig(f"set_sizes must be integers between 1 and {cells}, got {size!r}")

    def build(self, count, rng, params):
        sizes = list(params["set_sizes"])
        assigned = [sizes[i % len(sizes)] for i in range(count)]
        rng.shuffle(assigned)

        # Exact change proportion within each set size, so capacity can be estimated per size.
        changes_by_size = {}
        for size in sizes:
            n = assigned.count(size)
            changes_by_size[size] = iter(balanced_labels(n, params["change_ratio"], True, False, rng))

        colours = list(params["colours"])
        trials = []
        for set_size in assigned:
            has_change = next(changes_by_size[set_size])
            positions = rng.sample(range(params["grid_size"] ** 2), set_size)
            memory_array = [{"position": pos, "color": rng.choice(colours)} for pos in positions]
            probe = rng.choice(memory_array)
            probe_colour = probe["color"]
            if has_change:
                probe_colour = rng.choice([c for c in colours if c != probe["color"]])
            trials.append(
                {
                    "correct_response": CHANGE_KEY if has_change else SAME_KEY,
                    "condition": "change" if has_change else "same",
                    "set_size": set_size,
                    "stimulus": {
                        "grid_size": params["grid_size"],
                        "memory_array": memory_array,
                        "test_array": [{"position": probe["position"], "color": probe_colour}],
                        "has_change": has_change,
                        "original_color": probe["color"],
                        "memory_ms": params["memory_ms"],
                        "retention_ms": params["retention_ms"],
                    },
                }
            )
        return trials

    def fixation_delay_ms(self, trial, default_ms):
        return default_ms + trial.stimulus["memory_ms"] + trial.stimulus["retention_ms"]

    def render_stimulus(self, trial, phase):
        rendered = super().render_stimulus(trial, phase)
        stimulus = rendered["stimulus"]
        rendered["memory"] = {
            "squares": stimulus["memory_array"],
            "onset_before_test_ms": stimulus["memory_ms"] + stimulus["retention_ms"],
            "duration_ms": stimulus["memory_ms"],
        }
        rendered["test_array"] = stimulus["test_array"]
        return rendered
