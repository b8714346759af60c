import pytest

from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.types import RESPONSE_WINDOW_CAP_MS
from cogtrials.engine.types import Block
from cogtrials.engine.types import ExperimentConfig
from cogtrials.engine.types import TrialSpec
from cogtrials.engine.types import resolve_delay

TRIALS = (TrialSpec(index=0, correct_response="left"),)


class TestExperimentConfig:
    def test_lists_are_normalised_to_tuples(self):
        config = ExperimentConfig(main_trials=list(TRIALS), valid_responses=["left", "right"])
        assert config.main_trials == TRIALS
        assert config.valid_responses == frozenset({"left", "right"})

    def test_one_empty_block_is_allowed(self):
        assert ExperimentConfig(practice_trials=TRIALS).main_trials == ()

    def test_both_blocks_empty_is_invalid(self):
        with pytest.raises(InvalidConfig):
            ExperimentConfig()

    def test_items_must_be_trial_specs(self):
        with pytest.raises(InvalidConfig):
            ExperimentConfig(main_trials=[{"index": 0, "correct_response": "left"}])

    @pytest.mark.parametrize(
        "field,value",
        [
            ("response_timeout_ms", -1),
            ("fixation_delay_ms", -5),
            ("inter_trial_delay_ms", -1),
            ("feedback_duration_ms", {"practice": -1}),
            ("response_timeout_ms", True),
            ("fixation_delay_ms", "500"),
        ],
    )
    def test_bad_durations_are_invalid(self, field, value):
        with pytest.raises(InvalidConfig):
            ExperimentConfig(main_trials=TRIALS, **{field: value})

    def test_callbacks_must_be_callable(self):
        with pytest.raises(InvalidConfig):
            ExperimentConfig(main_trials=TRIALS, on_trial_end="print")

    def test_empty_valid_responses_is_invalid(self):
        with pytest.raises(InvalidConfig):
            ExperimentConfig(main_trials=TRIALS, valid_responses=[])

    def test_zero_timeout_uses_the_cap(self):
        assert ExperimentConfig(main_trials=TRIALS, response_timeout_ms=0).effective_response_window_ms == RESPONSE_WINDOW_CAP_MS
        assert ExperimentConfig(main_trials=TRIALS, response_timeout_ms=750).effective_response_window_ms == 750


class TestResolveDelay:
    def test_plain_int(self):
        assert resolve_delay("iti", 300, Block.MAIN) == 300

    def test_mapping_with_default(self):
        setting = {"practice": 1200, "default": 400}
        assert resolve_delay("iti", setting, Block.PRACTICE) == 1200
        assert resolve_delay("iti", setting, Block.MAIN) == 400

    def test_callable_result_is_rounded(self):
        assert resolve_delay("iti", lambda block: 812.6, Block.MAIN) == 813

    def test_callable_returning_negative_is_invalid(self):
        with pytest.raises(InvalidConfig):
            resolve_delay("iti", lambda block: -10, Block.MAIN)


def test_trial_spec_stimulus_is_read_only():
    spec = TrialSpec(index=0, correct_response="j", stimulus={"items": [{"type": "target"}]})
    assert spec.to_dict()["stimulus"] == {"items": [{"type": "target"}]}
    with pytest.raises(TypeError):
        spec.stimulus["items"][0]["type"] = "distractor"
