from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from cogtrials.tasks.models import ExperimentSession
from cogtrials.tasks.models import ParticipantRecord


def _run(*args):
    out = StringIO()
    call_command("simulate_session", *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestSimulateSession:
    @pytest.mark.parametrize("paradigm", ["flanker", "nback", "posner", "mental_rotation", "change_detection"])
    def test_runs_to_completion(self, paradigm):
        output = _run(paradigm, "--seed", "sim", "--practice", "2", "--trials", "6")
        record = ParticipantRecord.objects.get(participant_id="simulated")
        assert record.completion_status == ParticipantRecord.CompletionStatus.COMPLETE
        assert len(record.practice_trials) == 2
        assert len(record.trials) == 6
        assert "6 main trials recorded" in output
        assert record.summary_metrics["trial_count"] == 6
        assert record.summary_metrics["practice"]["trial_count"] == 2

    def test_same_seed_same_results(self):
        _run("stroop", "--seed", "repeat", "--participant", "a", "--trials", "5", "--practice", "0")
        _run("stroop", "--seed", "repeat", "--participant", "b", "--trials", "5", "--practice", "0")
        a, b = (ParticipantRecord.objects.get(participant_id=p) for p in ("a", "b"))
        assert a.trials == b.trials

    def test_everything_times_out(self):
        _run("flanker", "--timeout-rate", "1", "--trials", "4", "--practice", "0")
        record = ParticipantRecord.objects.get()
        assert all(t["timed_out"] for t in record.trials)
        assert "excessive_timeouts" in record.quality_flags

    def test_rejects_out_of_range_rates(self):
        with pytest.raises(CommandError):
            _run("flanker", "--accuracy", "1.5")
        assert not ExperimentSession.objects.exists()

    def test_rejects_bad_trial_counts(self):
        with pytest.raises(CommandError):
            _run("flanker", "--trials", "0", "--practice", "0")

    def test_reports_practice_accuracy(self):
        output = _run("change_detection", "--accuracy", "1", "--timeout-rate", "0", "--practice", "4", "--trials", "4")
        assert "Practice accuracy 100% over 4 answered trials" in output
