"""
Events emitted by the engine on its single observer channel.

Every event is a frozen dataclass; listeners dispatch on the concrete type
(or on ``event.kind``) instead of wiring one callback per transition.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field

from cogtrials.engine.errors import InvariantViolation
from cogtrials.engine.types import Block
from cogtrials.engine.types import EnginePhase
from cogtrials.engine.types import SaveOutcome
from cogtrials.engine.types import TrialResult
from cogtrials.engine.types import TrialSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseChanged:
    previous: EnginePhase
    current: EnginePhase
    kind: str = field(default="phase_changed", init=False)


@dataclass(frozen=True)
class TrialStarted:
    trial: TrialSpec
    index: int
    phase: Block
    display: object = None
    kind: str = field(default="trial_started", init=False)


@dataclass(frozen=True)
class ResponseCaptured:
    index: int
    phase: Block
    response: str
    timestamp: float
    kind: str = field(default="response_captured", init=False)


@dataclass(frozen=True)
class ResponseTimedOut:
    index: int
    phase: Block
    kind: str = field(default="response_timed_out", init=False)


@dataclass(frozen=True)
class TrialEnded:
    result: TrialResult
    trial: TrialSpec
    index: int
    phase: Block
    kind: str = field(default="trial_ended", init=False)


@dataclass(frozen=True)
class ResultSaved:
    result: TrialResult
    outcome: SaveOutcome
    kind: str = field(default="result_saved", init=False)


@dataclass(frozen=True)
class PhaseCompleted:
    phase: Block
    results: tuple
    summary: dict | None = None
    kind: str = field(default="phase_completed", init=False)


@dataclass(frozen=True)
class ExperimentCompleted:
    main_results: tuple
    practice_results: tuple
    kind: str = field(default="experiment_completed", init=False)


EngineEvent = (
    PhaseChanged
    | TrialStarted
    | ResponseCaptured
    | ResponseTimedOut
    | TrialEnded
    | ResultSaved
    | PhaseCompleted
    | ExperimentCompleted
)


class EventChannel:
    """Synchronous fan-out of engine events to subscribed listeners."""

    def __init__(self):
        self._listeners: list[Callable] = []

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except InvariantViolation:
                raise
            except Exception:
                # A misbehaving host listener must never stall the trial loop
                logger.exception("Listener %r failed on %s", listener, event.kind)


def config_listener(config) -> Callable:
    """Adapt the ExperimentConfig on_* callbacks onto the event channel."""

    def listener(event) -> None:
        if isinstance(event, TrialStarted) and config.on_trial_start:
            config.on_trial_start(event.trial, event.index, event.phase)
        elif isinstance(event, TrialEnded) and config.on_trial_end:
            config.on_trial_end(event.result, event.trial, event.index, event.phase)
        elif isinstance(event, PhaseCompleted) and config.on_phase_complete:
            config.on_phase_complete(event.phase, event.results)
        elif isinstance(event, ExperimentCompleted) and config.on_experiment_complete:
            config.on_experiment_complete(event.main_results, event.practice_results)

    return listener
