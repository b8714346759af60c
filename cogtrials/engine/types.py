"""
Value types shared by every engine component.

TrialSpec and TrialResult are frozen; ExperimentConfig validates itself on
construction and raises InvalidConfig for anything the engine cannot run.
"""
import enum
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType

from cogtrials.engine.errors import InvalidConfig

TIMEOUT_RESPONSE = "timeout"

# Feedback is shown after every trial unless configured otherwise.
DEFAULT_FEEDBACK_MS = 500

# Response window length used when response_timeout_ms is 0.
RESPONSE_WINDOW_CAP_MS = 60_000


class EnginePhase(enum.StrEnum):
    SETUP = "setup"
    FIXATION = "fixation"
    STIMULUS = "stimulus"
    AWAITING_RESPONSE = "awaiting_response"
    FEEDBACK = "feedback"
    INTER_TRIAL = "inter_trial"
    PRACTICE_COMPLETE = "practice_complete"
    MAIN = "main"
    COMPLETE = "complete"


class Block(enum.StrEnum):
    PRACTICE = "practice"
    MAIN = "main"


def freeze(value):
    """Return a read-only deep copy of a JSON-like value."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value):
    """Inverse of freeze(): plain dicts and lists, suitable for JSON."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class TrialSpec:
    index: int
    correct_response: str
    stimulus: Mapping = field(default_factory=dict, hash=False)
    condition: str | None = None
    set_size: int | None = None
    paradigm: str = ""

    def __post_init__(self):
        object.__setattr__(self, "stimulus", freeze(self.stimulus))

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "paradigm": self.paradigm,
            "correct_response": self.correct_response,
            "condition": self.condition,
            "set_size": self.set_size,
            "stimulus": thaw(self.stimulus),
        }


@dataclass(frozen=True)
class TrialResult:
    trial_index: int
    phase: Block
    response: str
    reaction_time_ms: float | None
    is_correct: bool
    timed_out: bool
    started_at: float
    responded_at: float | None = None
    correct_response: str | None = None
    condition: str | None = None
    set_size: int | None = None

    def to_dict(self) -> dict:
        return {
            "trial_index": self.trial_index,
            "phase": str(self.phase),
            "response": self.response,
            "reaction_time_ms": self.reaction_time_ms,
            "is_correct": self.is_correct,
            "timed_out": self.timed_out,
            "started_at": self.started_at,
            "responded_at": self.responded_at,
            "correct_response": self.correct_response,
            "condition": self.condition,
            "set_size": self.set_size,
        }


@dataclass(frozen=True)
class SaveOutcome:
    """What a persistence store reports back for one saved TrialResult."""

    success: bool
    shared: bool = False
    fallback: bool = False


# int, {block: ms} (optionally with a "default" key) or callable(block) -> ms
DelaySetting = int | Mapping | Callable


def _check_ms(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfig(f"{name} must be an integer number of milliseconds, got {value!r}")
    if value < 0:
        raise InvalidConfig(f"{name} must be >= 0, got {value}")


def _check_delay_setting(name: str, value) -> None:
    if callable(value):
        return
    if isinstance(value, Mapping):
        for key, ms in value.items():
            _check_ms(f"{name}[{key!r}]", ms)
        return
    _check_ms(name, value)


def resolve_delay(name: str, setting, block: Block) -> int:
    """Turn a DelaySetting into milliseconds for the given block."""
    if callable(setting):
        ms = setting(block)
    elif isinstance(setting, Mapping):
        ms = setting.get(str(block), setting.get("default", 0))
    else:
        ms = setting
    if isinstance(ms, float) and not isinstance(ms, bool):
        ms = int(round(ms))
    _check_ms(name, ms)
    return ms


_CALLBACKS = ("on_trial_start", "on_trial_end", "on_phase_complete", "on_experiment_complete")


@dataclass(frozen=True)
class ExperimentConfig:
    """
    Everything the engine needs for one practice + main run.

    The four on_* callbacks are optional and are invoked synchronously;
    they receive the same arguments as the matching engine events.
    """

    practice_trials: tuple = ()
    main_trials: tuple = ()
    response_timeout_ms: int = 5000
    inter_trial_delay_ms: DelaySetting = 500
    fixation_delay_ms: int = 500
    feedback_duration_ms: DelaySetting = DEFAULT_FEEDBACK_MS
    valid_responses: frozenset | None = None
    on_trial_start: Callable | None = None
    on_trial_end: Callable | None = None
    on_phase_complete: Callable | None = None
    on_experiment_complete: Callable | None = None

    def __post_init__(self):
        for name in ("practice_trials", "main_trials"):
            trials = getattr(self, name)
            if trials is None or isinstance(trials, (str, bytes, Mapping)):
                raise InvalidConfig(f"{name} must be a sequence of TrialSpec")
            trials = tuple(trials)
            for position, trial in enumerate(trials):
                if not isinstance(trial, TrialSpec):
                    raise InvalidConfig(f"{name}[{position}] is not a TrialSpec: {trial!r}")
            object.__setattr__(self, name, trials)

        if not self.practice_trials and not self.main_trials:
            raise InvalidConfig("at least one of practice_trials and main_trials must be non-empty")

        _check_ms("response_timeout_ms", self.response_timeout_ms)
        _check_ms("fixation_delay_ms", self.fixation_delay_ms)
        _check_delay_setting("inter_trial_delay_ms", self.inter_trial_delay_ms)
        _check_delay_setting("feedback_duration_ms", self.feedback_duration_ms)

        if self.valid_responses is not None:
            responses = frozenset(self.valid_responses)
            if not responses:
                raise InvalidConfig("valid_responses must not be empty")
            object.__setattr__(self, "valid_responses", responses)

        for name in _CALLBACKS:
            callback = getattr(self, name)
            if callback is not None and not callable(callback):
                raise InvalidConfig(f"{name} must be callable")

    def trials_for(self, block: Block) -> tuple:
        return self.practice_trials if block == Block.PRACTICE else self.main_trials

    @property
    def effective_response_window_ms(self) -> int:
        return self.response_timeout_ms or RESPONSE_WINDOW_CAP_MS
