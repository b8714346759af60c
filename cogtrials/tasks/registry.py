# Registry of the paradigms an instructor can run.
# Each entry holds the engine timing defaults and the text shown to participants.
# inter_trial_delay_ms is an int, a {block: ms} dict, or a (low, high) range
# that is jittered per trial from the session seed.

PARADIGM_REGISTRY: dict[str, dict] = {
    "flanker": {
        "label": "Eriksen Flanker Task",
        "practice_trials": 10,
        "main_trials": 40,
        "response_timeout_ms": 2000,
        "fixation_delay_ms": 500,
        "inter_trial_delay_ms": {"practice": 1200, "main": 500},
        "feedback_duration_ms": 500,
        "instructions": (
            "A row of arrows will appear. "
            "Press the left or right arrow key to match the direction of the centre arrow only. "
            "Ignore the arrows on either side of it."
        ),
    },
    "stroop": {
        "label": "Stroop Colour-Word Task",
        "practice_trials": 10,
        "main_trials": 40,
        "response_timeout_ms": 3000,
        "fixation_delay_ms": 500,
        "inter_trial_delay_ms": 1000,
        "feedback_duration_ms": 500,
        "instructions": (
            "A colour word will appear in coloured ink. "
            "Press R, G, B or Y for the colour of the ink. "
            "Ignore what the word says."
        ),
    },
    "visual_search": {
        "label": "Visual Search Task",
        "practice_trials": 12,
        "main_trials": 80,
        "response_timeout_ms": 5000,
        "fixation_delay_ms": 500,
        "inter_trial_delay_ms": 500,
        "feedback_duration_ms": 500,
        "instructions": (
            "Look for the target shape among the distractor shapes. "
            "Press J if you see the target and K if no target is present. "
            "Some searches pop out, others take longer."
        ),
    },
    "nback": {
        "label": "N-Back Working Memory Task",
        "practice_trials": 15,
        "main_trials": 60,
        "response_timeout_ms": 2500,
        "fixation_delay_ms": 500,
        "inter_trial_delay_ms": {"practice": 1500, "main": 2000},
        "feedback_duration_ms": 500,
        "instructions": (
            "Letters appear one at a time. "
            "Answer 'match' if the letter is the same as the one two letters back, "
            "otherwise answer 'no match'."
        ),
    },
    "posner": {
        "label": "Posner Cueing Task",
        "practice_trials": 16,
        "main_trials": 100,
        "response_timeout_ms": 2000,
        "fixation_delay_ms": 500,
        "inter_trial_delay_ms": (800, 1200),
        "feedback_duration_ms": 500,
        "instructions": (
            "Keep your eyes on the central cross. "
            "A cue will appear, then a target on the left or right. "
            "Press the space bar as soon as you see the target."
        ),
    },
    "mental_rotation": {
        "label": "Mental Rotation Task",
        "practice_trials": 12,
        "main_trials": 48,
        "response_timeout_ms": 5000,
        "fixation_delay_ms": 500,
        "inter_trial_delay_ms": {"practice": 1500, "main": 800},
        "feedback_duration_ms": 500,
        "instructions": (
            "Two shapes are shown at different angles. "
            "Press S if they are the same shape and D if one is a mirror image of the other."
        ),
    },
    "change_detection": {
        "label": "Change Detection Task",
        "practice_trials": 8,
        "main_trials": 40,
        "response_timeout_ms": 5000,
        "fixation_delay_ms": 300,
        "inter_trial_delay_ms": 1000,
        "feedback_duration_ms": 1000,
        "instructions": (
            "A set of coloured squares will flash briefly, then disappear. "
            "One square then comes back. "
            "Press S if its colour is the same as before and D if it has changed."
        ),
    },
}
