"""Management command to run a paradigm end to end with a simulated participant."""
import logging
import random

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError

from cogtrials.engine.clock import ManualClock
from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.events import TrialStarted
from cogtrials.tasks.helpers.session_helpers import create_experiment_session
from cogtrials.tasks.helpers.session_helpers import create_participant_engine
from cogtrials.tasks.helpers.session_helpers import start_participant
from cogtrials.tasks.registry import PARADIGM_REGISTRY

logger = logging.getLogger(__name__)


class SimulatedParticipant:
    """
    Answers each trial after a gaussian RT, correctly with probability
    ``accuracy``, or not at all with probability ``timeout_rate``.
    """

    def __init__(self, engine, clock, rng, accuracy, mean_rt, timeout_rate):
        self.engine = engine
        self.clock = clock
        self.rng = rng
        self.accuracy = accuracy
        self.mean_rt = mean_rt
        self.timeout_rate = timeout_rate

    def __call__(self, event):
        if not isinstance(event, TrialStarted):
            return
        if self.rng.random() < self.timeout_rate:
            return
        window = self.engine.config.effective_response_window_ms
        rt = max(150.0, self.rng.gauss(self.mean_rt, self.mean_rt * 0.25))
        if rt >= window:
            return

        trial = event.trial
        if self.rng.random() < self.accuracy:
            response = trial.correct_response
        else:
            wrong = sorted(self.engine.adapter.valid_responses(trial) - {trial.correct_response})
            response = self.rng.choice(wrong) if wrong else trial.correct_response
        block, index = event.phase, event.index

        def respond():
            if self.engine.current_block() == block and self.engine.current_trial_index() == index:
                self.engine.submit_response(response, self.clock.now_ms())

        self.clock.call_later(rt, respond)


class Command(BaseCommand):
    help = "Run a paradigm with a simulated participant and store the results."

    def add_arguments(self, parser):
        parser.add_argument("paradigm", choices=sorted(PARADIGM_REGISTRY))
        parser.add_argument("--participant", default="simulated", help="Participant id to record under.")
        parser.add_argument("--seed", default=None, help="Session seed. Defaults to a random UUID.")
        parser.add_argument("--accuracy", type=float, default=0.9)
        parser.add_argument("--mean-rt", type=float, default=550.0, help="Mean reaction time in ms.")
        parser.add_argument("--timeout-rate", type=float, default=0.02)
        parser.add_argument("--practice", type=int, default=None, help="Number of practice trials.")
        parser.add_argument("--trials", type=int, default=None, help="Number of main trials.")

    def handle(self, *args, **options):
        overrides = {}
        if options["practice"] is not None:
            overrides["practice_trials"] = options["practice"]
        if options["trials"] is not None:
            overrides["main_trials"] = options["trials"]
        for key in ("accuracy", "timeout_rate"):
            if not 0 <= options[key] <= 1:
                raise CommandError(f"--{key.replace('_', '-')} must be between 0 and 1")

        try:
            session = create_experiment_session(options["paradigm"], seed=options["seed"], **overrides)
        except InvalidConfig as exc:
            raise CommandError(str(exc)) from exc

        record = start_participant(session, options["participant"], name="Simulated participant")
        clock = ManualClock()
        engine, store = create_participant_engine(record, clock=clock)
        engine.subscribe(
            SimulatedParticipant(
                engine,
                clock,
                random.Random(f"{session.random_seed}:participant"),
                options["accuracy"],
                options["mean_rt"],
                options["timeout_rate"],
            )
        )

        self.stdout.write(f"Running {options['paradigm']} for {record.participant_id} (seed {session.random_seed})…")
        engine.start_practice()
        clock.run_until_idle()
        engine.start_main_task()
        clock.run_until_idle()

        record.refresh_from_db()
        if store.pending_retry:
            self.stdout.write(self.style.WARNING("Some results were queued for retry."))
        metrics = record.summary_metrics or {}
        self.stdout.write(self.style.SUCCESS(f"Done: {len(record.trials)} main trials recorded."))
        practice = metrics.get("practice") or {}
        if practice.get("accuracy") is not None:
            self.stdout.write(
                f"Practice accuracy {practice['accuracy']:.0%} over {practice['trials_responded']} answered trials"
            )
        if metrics.get("accuracy") is not None:
            self.stdout.write(f"Accuracy {metrics['accuracy']:.0%}")
        if metrics.get("median_rt") is not None:
            self.stdout.write(f"Median RT {metrics['median_rt']:.0f} ms")
        if record.quality_flags:
            self.stdout.write(self.style.WARNING(f"Quality flags: {', '.join(record.quality_flags)}"))
        logger.info("Simulated session %s finished for %s", session.id, record.participant_id)
