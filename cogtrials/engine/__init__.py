"""
Paradigm-agnostic trial execution engine.

Typical use::

    trials = generate({"paradigm": "flanker"}, 10, seed="p01")
    engine = create_engine(ExperimentConfig(practice_trials=trials[:4], main_trials=trials[4:]))
    engine.subscribe(print)
    engine.start_practice()
"""
from cogtrials.engine.clock import AsyncioClock
from cogtrials.engine.clock import ManualClock
from cogtrials.engine.engine import TrialEngine
from cogtrials.engine.engine import create_engine
from cogtrials.engine.errors import EngineError
from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.errors import InvalidTransition
from cogtrials.engine.errors import InvariantViolation
from cogtrials.engine.recorder import MemoryStore
from cogtrials.engine.sequences import generate
from cogtrials.engine.sequences import sequence_fingerprint
from cogtrials.engine.types import Block
from cogtrials.engine.types import EnginePhase
from cogtrials.engine.types import ExperimentConfig
from cogtrials.engine.types import SaveOutcome
from cogtrials.engine.types import TrialResult
from cogtrials.engine.types import TrialSpec

__all__ = [
    "AsyncioClock",
    "Block",
    "EngineError",
    "EnginePhase",
    "ExperimentConfig",
    "InvalidConfig",
    "InvalidTransition",
    "InvariantViolation",
    "ManualClock",
    "MemoryStore",
    "SaveOutcome",
    "TrialEngine",
    "TrialResult",
    "TrialSpec",
    "create_engine",
    "generate",
    "sequence_fingerprint",
]
