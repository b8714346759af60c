"""Unit tests for quality flag computation functions."""
import pytest

from cogtrials.tasks.helpers.quality import chance_accuracy
from cogtrials.tasks.helpers.quality import compute_quality_flags
from cogtrials.tasks.helpers.quality import flag_anticipation_bursts
from cogtrials.tasks.helpers.quality import flag_excessive_timeouts
from cogtrials.tasks.helpers.quality import flag_low_accuracy
from cogtrials.tasks.tests.factories import ParticipantRecordFactory
from cogtrials.tasks.tests.factories import trial_dict


class TestFlagAnticipationBursts:
    def test_false_for_fewer_than_three(self):
        trials = [trial_dict(0, rt=50), trial_dict(1, rt=60), trial_dict(2, rt=300)]
        assert flag_anticipation_bursts(trials) is False

    def test_true_for_exactly_three(self):
        trials = [trial_dict(i, rt=80) for i in range(3)]
        assert flag_anticipation_bursts(trials) is True

    def test_100ms_is_not_an_anticipation(self):
        trials = [trial_dict(i, rt=100) for i in range(5)]
        assert flag_anticipation_bursts(trials) is False

    def test_timeouts_are_ignored(self):
        trials = [trial_dict(i, timed_out=True) for i in range(5)]
        assert flag_anticipation_bursts(trials) is False


class TestFlagExcessiveTimeouts:
    def test_empty_is_false(self):
        assert flag_excessive_timeouts([]) is False

    def test_exactly_half_is_false(self):
        trials = [trial_dict(0, timed_out=True), trial_dict(1)]
        assert flag_excessive_timeouts(trials) is False

    def test_more_than_half_is_true(self):
        trials = [trial_dict(0, timed_out=True), trial_dict(1, timed_out=True), trial_dict(2)]
        assert flag_excessive_timeouts(trials) is True


class TestFlagLowAccuracy:
    @pytest.mark.parametrize(
        "paradigm,expected",
        [("flanker", 0.5), ("stroop", 0.25), ("posner", None), ("not_a_paradigm", None)],
    )
    def test_chance_accuracy(self, paradigm, expected):
        assert chance_accuracy(paradigm) == expected

    def test_below_chance_is_flagged(self):
        trials = [trial_dict(0), trial_dict(1, correct=False), trial_dict(2, correct=False)]
        assert flag_low_accuracy(trials, "flanker") is True

    def test_at_chance_is_not_flagged(self):
        trials = [trial_dict(0), trial_dict(1, correct=False)]
        assert flag_low_accuracy(trials, "flanker") is False

    def test_detection_task_is_never_flagged(self):
        trials = [trial_dict(i, timed_out=True) for i in range(4)]
        assert flag_low_accuracy(trials, "posner") is False


@pytest.mark.django_db
class TestComputeQualityFlags:
    def test_clean_record_has_no_flags(self):
        record = ParticipantRecordFactory(trials=[trial_dict(i) for i in range(4)])
        assert compute_quality_flags(record) == []

    def test_all_flags(self):
        trials = [trial_dict(i, rt=50, correct=False) for i in range(3)]
        trials += [trial_dict(i, timed_out=True) for i in range(3, 10)]
        record = ParticipantRecordFactory(trials=trials)
        assert compute_quality_flags(record) == ["anticipation_burst", "excessive_timeouts", "low_accuracy"]
