"""
Paradigm adapter interface.

An adapter knows three things about its task: how to generate balanced
trials, which responses a trial accepts, and what the renderer should draw.
The engine only ever talks to this interface.
"""
import random
from collections.abc import Mapping

from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.types import Block
from cogtrials.engine.types import TrialSpec
from cogtrials.engine.types import thaw


def balanced_split(count: int, ratio: float) -> int:
    """Number of trials out of ``count`` that get the first label (rounded half up)."""
    return int(count * ratio + 0.5)


def balanced_labels(count: int, ratio: float, first, second, rng: random.Random) -> list:
    n_first = balanced_split(count, ratio)
    labels = [first] * n_first + [second] * (count - n_first)
    rng.shuffle(labels)
    return labels


def check_ratio(params: dict, key: str) -> None:
    value = params[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 1:
        raise InvalidConfig(f"{key} must be a number between 0 and 1, got {value!r}")


def check_positive_int(params: dict, key: str) -> None:
    value = params[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfig(f"{key} must be a positive integer, got {value!r}")


def check_choices(params: dict, key: str, minimum: int = 1) -> None:
    value = params[key]
    if isinstance(value, (str, bytes)) or not hasattr(value, "__len__") or len(value) < minimum:
        raise InvalidConfig(f"{key} needs at least {minimum} entries, got {value!r}")


class ParadigmAdapter:
    name = ""
    label = ""
    responses: tuple = ()
    defaults: dict = {}

    def resolve_params(self, overrides: Mapping | None = None) -> dict:
        params = dict(self.defaults)
        for key, value in (overrides or {}).items():
            if key not in self.defaults:
                raise InvalidConfig(f"unknown parameter {key!r} for paradigm '{self.name}'")
            params[key] = value
        missing = [key for key, value in params.items() if value is None]
        if missing:
            raise InvalidConfig(f"paradigm '{self.name}' is missing parameters: {', '.join(sorted(missing))}")
        self.validate(params)
        return params

    def validate(self, params: dict) -> None:
        """Raise InvalidConfig if ``params`` cannot produce trials."""

    def build(self, count: int, rng: random.Random, params: dict) -> list[dict]:
        """
        Return ``count`` trial dicts, each with ``correct_response``,
        ``stimulus`` and optionally ``condition`` / ``set_size``.
        """
        raise NotImplementedError

    def valid_responses(self, trial: TrialSpec) -> frozenset:
        return frozenset(self.responses)

    def render_stimulus(self, trial: TrialSpec, phase: Block) -> dict:
        return {
            "paradigm": self.name,
            "stimulus": thaw(trial.stimulus),
            "show_feedback": phase == Block.PRACTICE,
        }

    def fixation_delay_ms(self, trial: TrialSpec, default_ms: int) -> int:
        return default_ms

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class StaticResponseAdapter(ParadigmAdapter):
    """Adapter for hand-built trial lists: a fixed response set, plain rendering."""

    name = "static"

    def __init__(self, responses):
        self.responses = tuple(sorted(responses))
