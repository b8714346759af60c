"""
Trial execution engine.

A single-threaded state machine that walks a practice block and a main block
of trials:

    setup -> fixation -> stimulus -> awaiting_response -> feedback -> inter_trial
          -> fixation (next trial) | practice_complete | complete

Every transition is driven either by the phase timer firing or by the
response capture accepting an input; the engine never blocks and never has
more than one timer outstanding. Timers and capture windows acquired for a
trial are registered on an ExitStack so reset() releases all of them on any
exit path.
"""
import logging
from collections.abc import Callable
from collections.abc import Mapping
from contextlib import ExitStack

from cogtrials.engine.capture import ResponseCapture
from cogtrials.engine.clock import AsyncioClock
from cogtrials.engine.clock import Clock
from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.errors import InvalidTransition
from cogtrials.engine.events import EventChannel
from cogtrials.engine.events import ExperimentCompleted
from cogtrials.engine.events import PhaseChanged
from cogtrials.engine.events import PhaseCompleted
from cogtrials.engine.events import ResponseCaptured
from cogtrials.engine.events import ResponseTimedOut
from cogtrials.engine.events import ResultSaved
from cogtrials.engine.events import TrialEnded
from cogtrials.engine.events import TrialStarted
from cogtrials.engine.events import config_listener
from cogtrials.engine.paradigms import PARADIGMS
from cogtrials.engine.paradigms import ParadigmAdapter
from cogtrials.engine.paradigms import StaticResponseAdapter
from cogtrials.engine.recorder import PersistenceStore
from cogtrials.engine.recorder import ResultRecorder
from cogtrials.engine.recorder import summarise_block
from cogtrials.engine.timer import PhaseTimer
from cogtrials.engine.types import TIMEOUT_RESPONSE
from cogtrials.engine.types import Block
from cogtrials.engine.types import EnginePhase
from cogtrials.engine.types import ExperimentConfig
from cogtrials.engine.types import TrialResult
from cogtrials.engine.types import TrialSpec
from cogtrials.engine.types import resolve_delay

logger = logging.getLogger(__name__)


def default_adapter(config: ExperimentConfig) -> ParadigmAdapter:
    """
    Pick an adapter for a config that did not come with one.

    Explicit ``valid_responses`` win; otherwise trials generated for a single
    registered paradigm use that paradigm; otherwise any trial's correct
    response is accepted.
    """
    if config.valid_responses:
        return StaticResponseAdapter(config.valid_responses)
    trials = config.practice_trials + config.main_trials
    names = {trial.paradigm for trial in trials}
    if len(names) == 1 and next(iter(names)) in PARADIGMS:
        return PARADIGMS[next(iter(names))]
    return StaticResponseAdapter({trial.correct_response for trial in trials})


class TrialEngine:
    def __init__(
        self,
        config: ExperimentConfig,
        *,
        clock: Clock | None = None,
        store: PersistenceStore | None = None,
        adapter: ParadigmAdapter | None = None,
    ):
        if not isinstance(config, ExperimentConfig):
            raise InvalidConfig(f"expected an ExperimentConfig, got {type(config).__name__}")
        self.config = config
        self.adapter = adapter or default_adapter(config)
        self._clock = clock or AsyncioClock()
        self._timer = PhaseTimer(self._clock)
        self._capture = ResponseCapture()
        self._events = EventChannel()
        self._events.subscribe(config_listener(config))
        self._store = store
        # Bumped on reset() so callbacks of a discarded run can tell they are stale.
        self._generation = 0
        self._new_state()

    def _new_state(self) -> None:
        self._phase = EnginePhase.SETUP
        self._block: Block | None = None
        self._index = 0
        self._started_at: float | None = None
        self._timeout_token = None
        self._scope = ExitStack()
        self._recorder = ResultRecorder(
            {Block.PRACTICE: len(self.config.practice_trials), Block.MAIN: len(self.config.main_trials)},
            self._store,
        )

    # ------------------------------------------------------------------
    # Host operations
    # ------------------------------------------------------------------

    def start_practice(self) -> None:
        if self._phase != EnginePhase.SETUP:
            raise InvalidTransition("start_practice", self._phase)
        logger.info("Starting practice block (%d trials)", len(self.config.practice_trials))
        self._begin_block(Block.PRACTICE)

    def start_main_task(self) -> None:
        if self._phase != EnginePhase.PRACTICE_COMPLETE:
            raise InvalidTransition("start_main_task", self._phase)
        logger.info("Starting main block (%d trials)", len(self.config.main_trials))
        if self._set_phase(EnginePhase.MAIN):
            self._begin_block(Block.MAIN)

    def submit_response(self, response: str, timestamp: float | None = None) -> bool:
        """
        Offer one participant input to the open response window.

        ``timestamp`` is in the engine clock's milliseconds and defaults to
        now. Returns True only if the input became the trial's response.
        """
        if self._phase != EnginePhase.AWAITING_RESPONSE:
            logger.debug("Ignored %r while %s", response, self._phase)
            return False
        if timestamp is None:
            timestamp = self._clock.now_ms()
        if timestamp < self._started_at:
            logger.debug("Ignored %r stamped %.1f before stimulus onset %.1f", response, timestamp, self._started_at)
            return False
        deadline = self._started_at + self.config.effective_response_window_ms
        if timestamp > deadline:
            logger.debug("Ignored %r stamped %.1f after the response deadline %.1f", response, timestamp, deadline)
            return False
        return self._capture.offer(response, timestamp)

    def reset(self) -> None:
        """Cancel anything outstanding and return to setup with empty logs."""
        self._generation += 1
        self._scope.close()
        self._timer.cancel()
        self._capture.close_window()
        previous = self._phase
        self._recorder.clear()
        self._new_state()
        logger.info("Engine reset from %s", previous)
        if previous != EnginePhase.SETUP:
            self._events.emit(PhaseChanged(previous, EnginePhase.SETUP))

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        return self._events.subscribe(listener)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    def current_phase(self) -> EnginePhase:
        return self._phase

    def current_block(self) -> Block | None:
        return self._block

    def current_trial_index(self) -> int:
        return self._index

    def current_trial(self) -> TrialSpec | None:
        if self._block is None:
            return None
        trials = self.config.trials_for(self._block)
        return trials[self._index] if self._index < len(trials) else None

    def total_trials(self, phase: Block | str | None = None) -> int:
        block = Block(phase) if phase is not None else (self._block or Block.PRACTICE)
        return len(self.config.trials_for(block))

    def practice_results(self) -> tuple:
        return self._recorder.flush(Block.PRACTICE)

    def main_results(self) -> tuple:
        return self._recorder.flush(Block.MAIN)

    @property
    def is_complete(self) -> bool:
        return self._phase == EnginePhase.COMPLETE

    @property
    def pending_timer(self):
        return self._timer.pending

    @property
    def open_window(self):
        return self._capture.current

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _emit(self, event) -> bool:
        """Emit an event; False when a listener reset the engine meanwhile."""
        generation = self._generation
        self._events.emit(event)
        return generation == self._generation

    def _set_phase(self, phase: EnginePhase) -> bool:
        previous, self._phase = self._phase, phase
        logger.debug("%s -> %s (block=%s, trial=%s)", previous, phase, self._block, self._index)
        return self._emit(PhaseChanged(previous, phase))

    def _delay(self, name: str, setting) -> int:
        try:
            return resolve_delay(name, setting, self._block)
        except InvalidConfig as exc:
            logger.error("Bad %s for %s trial %s, using 0 ms: %s", name, self._block, self._index, exc)
            return 0

    def _arm(self, delay_ms: int, callback: Callable[[], None], label: str):
        generation = self._generation

        def fire() -> None:
            if generation == self._generation:
                callback()

        token = self._timer.schedule(delay_ms, fire, label)
        self._scope.callback(self._timer.cancel, token)
        return token

    def _begin_block(self, block: Block) -> None:
        self._block = block
        self._index = 0
        if not self.config.trials_for(block):
            self._complete_block()
        else:
            self._enter_fixation()

    def _enter_fixation(self) -> None:
        if not self._set_phase(EnginePhase.FIXATION):
            return
        delay = self.adapter.fixation_delay_ms(self.current_trial(), self.config.fixation_delay_ms)
        self._arm(delay, self._present_stimulus, "fixation")

    def _present_stimulus(self) -> None:
        trial = self.current_trial()
        if not self._set_phase(EnginePhase.STIMULUS):
            return
        display = self.adapter.render_stimulus(trial, self._block)
        if not self._emit(TrialStarted(trial, self._index, self._block, display)):
            return
        self._started_at = self._clock.now_ms()

        handle = self._capture.open_window(self.adapter.valid_responses(trial), self._on_capture)
        self._scope.callback(self._capture.close_window, handle)
        self._timeout_token = self._arm(
            self.config.effective_response_window_ms, self._on_timeout, "response_timeout"
        )
        self._set_phase(EnginePhase.AWAITING_RESPONSE)

    def _on_capture(self, response: str, timestamp: float) -> None:
        self._timer.cancel(self._timeout_token)
        if self._emit(ResponseCaptured(self._index, self._block, response, timestamp)):
            self._finish_trial(response, timestamp)

    def _on_timeout(self) -> None:
        self._capture.close_window()
        logger.debug("Trial %s of %s timed out", self._index, self._block)
        if self._emit(ResponseTimedOut(self._index, self._block)):
            self._finish_trial(TIMEOUT_RESPONSE, None)

    def _finish_trial(self, response: str, responded_at: float | None) -> None:
        trial = self.current_trial()
        timed_out = responded_at is None
        result = TrialResult(
            trial_index=self._index,
            phase=self._block,
            response=response,
            reaction_time_ms=None if timed_out else responded_at - self._started_at,
            is_correct=not timed_out and response == trial.correct_response,
            timed_out=timed_out,
            started_at=self._started_at,
            responded_at=responded_at,
            correct_response=trial.correct_response,
            condition=trial.condition,
            set_size=trial.set_size,
        )
        outcome = self._recorder.record(result, self._block)
        if not self._emit(TrialEnded(result, trial, self._index, self._block)):
            return
        if not self._emit(ResultSaved(result, outcome)):
            return

        self._release_trial_scope()
        delay = self._delay("feedback_duration_ms", self.config.feedback_duration_ms)
        if self._set_phase(EnginePhase.FEEDBACK):
            self._arm(delay, self._end_feedback, "feedback")

    def _end_feedback(self) -> None:
        delay = self._delay("inter_trial_delay_ms", self.config.inter_trial_delay_ms)
        if self._set_phase(EnginePhase.INTER_TRIAL):
            self._arm(delay, self._advance, "inter_trial")

    def _advance(self) -> None:
        self._release_trial_scope()
        self._index += 1
        if self._index < len(self.config.trials_for(self._block)):
            self._enter_fixation()
        else:
            self._complete_block()

    def _release_trial_scope(self) -> None:
        self._scope.close()
        self._scope = ExitStack()
        self._timeout_token = None

    def _complete_block(self) -> None:
        block = self._block
        results = self._recorder.flush(block)
        logger.info("Completed %s block with %d results", block, len(results))
        if block == Block.PRACTICE:
            summary = summarise_block(r.to_dict() for r in results)
            if self._set_phase(EnginePhase.PRACTICE_COMPLETE):
                self._emit(PhaseCompleted(block, results, summary))
            return

        practice = self._recorder.flush(Block.PRACTICE)
        if not self._set_phase(EnginePhase.COMPLETE):
            return
        if self._emit(PhaseCompleted(block, results)):
            self._emit(ExperimentCompleted(results, practice))


def create_engine(config: ExperimentConfig | Mapping, **kwargs) -> TrialEngine:
    """
    Build an engine from an ExperimentConfig (or a mapping of its fields).

    Keyword arguments (``clock``, ``store``, ``adapter``) are passed to
    TrialEngine.
    """
    if isinstance(config, Mapping):
        try:
            config = ExperimentConfig(**config)
        except TypeError as exc:
            raise InvalidConfig(str(exc)) from exc
    return TrialEngine(config, **kwargs)
