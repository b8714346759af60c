"""
Build engine configuration for a registered paradigm.

Timing defaults come from PARADIGM_REGISTRY, then settings.TRIAL_ENGINE
("defaults" for every paradigm, then a per-paradigm dict), then explicit
overrides. Trial lists are generated from the session seed, so the same
session always reproduces the same practice and main sequences.
"""
import random
from collections.abc import Callable

from django.conf import settings

from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.sequences import generate
from cogtrials.engine.types import ExperimentConfig
from cogtrials.tasks.registry import PARADIGM_REGISTRY

TIMING_KEYS = (
    "practice_trials",
    "main_trials",
    "response_timeout_ms",
    "fixation_delay_ms",
    "inter_trial_delay_ms",
    "feedback_duration_ms",
)
CALLBACK_KEYS = ("on_trial_start", "on_trial_end", "on_phase_complete", "on_experiment_complete")


def engine_settings(paradigm: str, **overrides) -> dict:
    """Merged timing settings and trial counts for ``paradigm``."""
    if paradigm not in PARADIGM_REGISTRY:
        raise InvalidConfig(f"unknown paradigm {paradigm!r}")
    site = getattr(settings, "TRIAL_ENGINE", {})
    merged = {key: PARADIGM_REGISTRY[paradigm][key] for key in TIMING_KEYS}
    merged.update(site.get("defaults", {}))
    merged.update(site.get(paradigm, {}))
    for key, value in overrides.items():
        if key not in TIMING_KEYS:
            raise InvalidConfig(f"unknown engine setting {key!r}")
        merged[key] = value
    return merged


def jittered_delay(low: int, high: int, seed) -> Callable:
    """A delay setting that draws a fresh ms value in [low, high] for every trial."""
    if low > high:
        raise InvalidConfig(f"delay range ({low}, {high}) is empty")
    rng = random.Random(f"{seed}:iti")
    return lambda block: rng.randint(low, high)


def build_trials(paradigm: str, seed, params=None, practice_count=0, main_count=0):
    """Return (practice_trials, main_trials); each block has its own derived seed."""
    paradigm_params = dict(params or {}, paradigm=paradigm)
    practice = generate(paradigm_params, practice_count, seed=f"{seed}:practice") if practice_count else ()
    main = generate(paradigm_params, main_count, seed=f"{seed}:main") if main_count else ()
    return practice, main


def build_experiment_config(paradigm: str, seed, *, params=None, **overrides) -> ExperimentConfig:
    """
    Generate both trial lists for ``paradigm`` and wrap them in an ExperimentConfig.

    ``params`` go to the trial generator (e.g. {"level": 3} for n-back);
    ``overrides`` may set any TIMING_KEYS entry or one of the on_* callbacks.
    """
    callbacks = {key: overrides.pop(key) for key in CALLBACK_KEYS if key in overrides}
    timing = engine_settings(paradigm, **overrides)
    practice, main = build_trials(
        paradigm, seed, params, timing.pop("practice_trials"), timing.pop("main_trials")
    )
    iti = timing["inter_trial_delay_ms"]
    if isinstance(iti, (list, tuple)):
        timing["inter_trial_delay_ms"] = jittered_delay(*iti, seed=seed)
    return ExperimentConfig(practice_trials=practice, main_trials=main, **timing, **callbacks)


def config_for_session(session, **callbacks) -> ExperimentConfig:
    """The ExperimentConfig every participant of ``session`` runs."""
    stored = dict(session.config or {})
    params = stored.pop("params", None)
    return build_experiment_config(session.paradigm, session.random_seed, params=params, **stored, **callbacks)
