"""Tests for trial sequence generation and the paradigm adapters."""
from collections import Counter

import pytest

from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.paradigms import PARADIGMS
from cogtrials.engine.paradigms import get_paradigm
from cogtrials.engine.paradigms.mental_rotation import angular_disparity
from cogtrials.engine.sequences import dump_sequence
from cogtrials.engine.sequences import generate
from cogtrials.engine.sequences import sequence_fingerprint
from cogtrials.engine.types import Block
from cogtrials.engine.types import TrialSpec


class TestGenerate:
    @pytest.mark.parametrize("paradigm", sorted(PARADIGMS))
    @pytest.mark.parametrize("count", [1, 7, 40])
    def test_length_and_indices(self, paradigm, count):
        trials = generate({"paradigm": paradigm}, count, seed="length")
        assert len(trials) == count
        assert [t.index for t in trials] == list(range(count))
        assert all(isinstance(t, TrialSpec) and t.paradigm == paradigm for t in trials)

    @pytest.mark.parametrize("paradigm", sorted(PARADIGMS))
    def test_same_seed_is_byte_identical(self, paradigm):
        first = generate({"paradigm": paradigm}, 24, seed=1234)
        second = generate({"paradigm": paradigm}, 24, seed=1234)
        assert first == second
        assert dump_sequence(first) == dump_sequence(second)
        assert sequence_fingerprint(first) == sequence_fingerprint(second)

    def test_different_seeds_differ(self):
        a = generate({"paradigm": "visual_search"}, 24, seed="a")
        b = generate({"paradigm": "visual_search"}, 24, seed="b")
        assert sequence_fingerprint(a) != sequence_fingerprint(b)

    def test_unseeded_generation_still_has_the_right_length(self):
        assert len(generate({"paradigm": "flanker"}, 5)) == 5

    @pytest.mark.parametrize("count", [0, -3, 2.5, True, "10"])
    def test_bad_count_is_invalid(self, count):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "flanker"}, count)

    def test_missing_paradigm_key_is_invalid(self):
        with pytest.raises(InvalidConfig):
            generate({"congruent_ratio": 0.5}, 4)

    def test_unknown_paradigm_is_invalid(self):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "go_no_go"}, 4)

    def test_unknown_parameter_is_invalid(self):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "flanker", "colour": "red"}, 4)

    def test_incomplete_parameters_are_invalid(self):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "nback", "level": None}, 4)

    def test_bad_seed_type_is_invalid(self):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "flanker"}, 4, seed=1.5)

    def test_trials_are_immutable(self):
        trial = generate({"paradigm": "flanker"}, 1, seed=1)[0]
        with pytest.raises(AttributeError):
            trial.correct_response = "right"
        with pytest.raises(TypeError):
            trial.stimulus["display"] = "<<<<<"


class TestBalancing:
    def test_flanker_congruent_split(self):
        trials = generate({"paradigm": "flanker"}, 11, seed=5)
        counts = Counter(t.condition for t in trials)
        assert counts == {"congruent": 6, "incongruent": 5}

    def test_flanker_correct_response_is_centre_arrow(self):
        for trial in generate({"paradigm": "flanker"}, 20, seed=5):
            display = trial.stimulus["display"]
            centre = display[len(display) // 2]
            assert trial.correct_response == {"<": "left", ">": "right"}[centre]
            if trial.condition == "congruent":
                assert set(display) == {centre}
            else:
                assert len(set(display)) == 2

    def test_stroop_ratio_and_ink_mapping(self):
        trials = generate({"paradigm": "stroop", "congruent_ratio": 0.25}, 20, seed=9)
        assert Counter(t.condition for t in trials)["congruent"] == 5
        for trial in trials:
            assert trial.correct_response == trial.stimulus["ink"][0]
            word_matches_ink = trial.stimulus["word"].lower() == trial.stimulus["ink"]
            assert word_matches_ink == (trial.condition == "congruent")

    def test_stroop_rejects_ratio_out_of_range(self):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "stroop", "congruent_ratio": 1.5}, 4)

    def test_visual_search_present_absent_is_balanced(self):
        trials = generate({"paradigm": "visual_search"}, 40, seed=11)
        present = [t for t in trials if t.stimulus["target_present"]]
        assert len(present) == 20
        assert all(t.correct_response == "j" for t in present)
        assert all(t.correct_response == "k" for t in trials if not t.stimulus["target_present"])

    def test_visual_search_items_match_set_size(self):
        for trial in generate({"paradigm": "visual_search", "set_sizes": (4, 8)}, 16, seed=2):
            assert trial.set_size in (4, 8)
            items = trial.stimulus["items"]
            assert len(items) == trial.set_size
            targets = [item for item in items if item["type"] == "target"]
            assert len(targets) == (1 if trial.stimulus["target_present"] else 0)

    def test_visual_search_conditions_are_evenly_spread(self):
        trials = generate({"paradigm": "visual_search"}, 40, seed=3)
        counts = Counter(t.condition for t in trials)
        assert counts == {"color_popout": 10, "orientation_popout": 10, "conjunction": 20}

    def test_visual_search_rejects_empty_set_sizes(self):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "visual_search", "set_sizes": ()}, 4)

    def test_nback_targets_match_letter_n_back(self):
        trials = generate({"paradigm": "nback", "level": 2}, 30, seed=4)
        letters = [t.stimulus["letter"] for t in trials]
        for i, trial in enumerate(trials):
            expected = i >= 2 and letters[i] == letters[i - 2]
            assert trial.stimulus["is_target"] == expected
            assert trial.correct_response == ("match" if expected else "no_match")
        assert sum(t.stimulus["is_target"] for t in trials) == int(28 * 0.25)

    def test_nback_needs_two_letters(self):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "nback", "letters": ("A",)}, 4)

    def test_posner_validity_proportions(self):
        trials = generate({"paradigm": "posner"}, 80, seed=6)
        endogenous = [t for t in trials if t.stimulus["cue_type"] == "endogenous"]
        exogenous = [t for t in trials if t.stimulus["cue_type"] == "exogenous"]
        assert len(endogenous) == len(exogenous) == 40
        assert sum(t.condition == "valid" for t in endogenous) == 32
        assert sum(t.condition == "valid" for t in exogenous) == 20
        for trial in trials:
            same_side = trial.stimulus["cue_location"] == trial.stimulus["target_location"]
            assert same_side == (trial.condition == "valid")
            assert trial.correct_response == "space"

    def test_mental_rotation_same_and_mirror(self):
        trials = generate({"paradigm": "mental_rotation"}, 16, seed=8)
        assert Counter(t.condition for t in trials) == {"same": 8, "different": 8}
        for trial in trials:
            s = trial.stimulus
            assert s["left_rotation"] % 15 == 0
            if trial.condition == "same":
                assert s["left_shape"] == s["right_shape"]
                assert trial.correct_response == "s"
            else:
                assert s["left_shape"].removesuffix("_MIRROR") == s["right_shape"].removesuffix("_MIRROR")
                assert s["left_shape"] != s["right_shape"]
                assert trial.correct_response == "d"

    def test_change_detection_is_balanced_within_each_set_size(self):
        trials = generate({"paradigm": "change_detection"}, 40, seed=12)
        counts = Counter((t.set_size, t.condition) for t in trials)
        assert counts == {(4, "change"): 10, (4, "same"): 10, (8, "change"): 10, (8, "same"): 10}

    def test_change_detection_probe_is_a_remembered_square(self):
        for trial in generate({"paradigm": "change_detection", "grid_size": 4}, 24, seed=13):
            s = trial.stimulus
            positions = [square["position"] for square in s["memory_array"]]
            assert len(positions) == len(set(positions)) == trial.set_size
            assert all(0 <= pos < 16 for pos in positions)
            (probe,) = s["test_array"]
            (remembered,) = [sq for sq in s["memory_array"] if sq["position"] == probe["position"]]
            assert s["original_color"] == remembered["color"]
            changed = probe["color"] != remembered["color"]
            assert changed == s["has_change"] == (trial.condition == "change")
            assert trial.correct_response == ("d" if changed else "s")

    @pytest.mark.parametrize(
        "params",
        [{"set_sizes": (40,)}, {"colours": ("red",)}, {"memory_ms": -1}, {"change_ratio": 2}],
    )
    def test_change_detection_rejects_bad_params(self, params):
        with pytest.raises(InvalidConfig):
            generate({"paradigm": "change_detection", **params}, 4)

    @pytest.mark.parametrize(
        "left,right,expected",
        [(0, 0, 0), (0, 90, 90), (345, 15, 30), (0, 180, 180), (270, 0, 90)],
    )
    def test_angular_disparity(self, left, right, expected):
        assert angular_disparity(left, right) == expected


class TestAdapters:
    def test_get_paradigm_unknown(self):
        with pytest.raises(InvalidConfig):
            get_paradigm("nope")

    @pytest.mark.parametrize("paradigm", sorted(PARADIGMS))
    def test_correct_response_is_always_a_valid_response(self, paradigm):
        adapter = get_paradigm(paradigm)
        for trial in generate({"paradigm": paradigm}, 12, seed=10):
            assert trial.correct_response in adapter.valid_responses(trial)

    @pytest.mark.parametrize("paradigm", sorted(PARADIGMS))
    def test_render_stimulus_is_plain_data(self, paradigm):
        adapter = get_paradigm(paradigm)
        trial = generate({"paradigm": paradigm}, 1, seed=10)[0]
        rendered = adapter.render_stimulus(trial, Block.MAIN)
        assert rendered["paradigm"] == paradigm
        assert rendered["show_feedback"] is False
        assert isinstance(rendered["stimulus"], dict)
