"""Mental rotation: are two rotated shapes the same or mirror images?"""
from cogtrials.engine.paradigms.base import ParadigmAdapter
from cogtrials.engine.paradigms.base import balanced_labels
from cogtrials.engine.paradigms.base import check_choices
from cogtrials.engine.paradigms.base import check_positive_int
from cogtrials.engine.paradigms.base import check_ratio

SAME_KEY = "s"
DIFFERENT_KEY = "d"


def angular_disparity(left: int, right: int) -> int:
    """Smallest rotation (0-180 degrees) that aligns the two shapes."""
    diff = abs(left - right) % 360
    return min(diff, 360 - diff)


class MentalRotationParadigm(ParadigmAdapter):
    name = "mental_rotation"
    label = "Mental Rotation Task"
    responses = (SAME_KEY, DIFFERENT_KEY)
    defaults = {"shapes": ("F", "R", "P", "G"), "angle_step": 15, "same_ratio": 0.5}

    def validate(self, params):
        check_choices(params, "shapes")
        check_positive_int(params, "angle_step")
        check_ratio(params, "same_ratio")

    def build(self, count, rng, params):
        shapes = list(params["shapes"])
        step = params["angle_step"]
        angles = list(range(0, 360, step))
        kinds = balanced_labels(count, params["same_ratio"], "same", "different", rng)

        trials = []
        for i, kind in enumerate(kinds):
            shape = shapes[i % len(shapes)]
            left_rotation = rng.choice(angles)
            right_rotation = rng.choice(angles)
            if kind == "same":
                left_shape = right_shape = shape
            elif rng.random() < 0.5:
                left_shape, right_shape = shape, f"{shape}_MIRROR"
            else:
                left_shape, right_shape = f"{shape}_MIRROR", shape
            trials.append(
                {
                    "correct_response": SAME_KEY if kind == "same" else DIFFERENT_KEY,
                    "condition": kind,
                    "stimulus": {
                        "left_shape": left_shape,
                        "right_shape": right_shape,
                        "left_rotation": left_rotation,
                        "right_rotation": right_rotation,
                        "angular_disparity": angular_disparity(left_rotation, right_rotation),
                    },
                }
            )
        return trials
