"""
Trial sequence generation.

Sequences are pure functions of (paradigm parameters, count, seed): the same
inputs always give the same trials, and sequence_fingerprint() lets a replay
check that byte for byte.
"""
import hashlib
import json
import random
import uuid
from collections.abc import Mapping

from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.errors import InvariantViolation
from cogtrials.engine.paradigms import get_paradigm
from cogtrials.engine.types import TrialSpec


def new_seed() -> str:
    return str(uuid.uuid4())


def generate(paradigm_params: Mapping, count: int, seed: int | str | None = None) -> tuple:
    """
    Generate ``count`` TrialSpecs for the paradigm named in ``paradigm_params["paradigm"]``.

    The remaining keys of ``paradigm_params`` override the paradigm defaults.
    Raises InvalidConfig for a count below 1, an unknown paradigm, or
    parameters the paradigm rejects.
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidConfig(f"count must be a positive integer, got {count!r}")
    if not isinstance(paradigm_params, Mapping) or "paradigm" not in paradigm_params:
        raise InvalidConfig("paradigm_params must be a mapping with a 'paradigm' key")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, (int, str))):
        raise InvalidConfig(f"seed must be an int or str, got {seed!r}")

    paradigm = get_paradigm(paradigm_params["paradigm"])
    params = paradigm.resolve_params({k: v for k, v in paradigm_params.items() if k != "paradigm"})
    rng = random.Random(new_seed() if seed is None else seed)

    raw = paradigm.build(count, rng, params)
    if len(raw) != count:
        raise InvariantViolation(f"{paradigm.name} built {len(raw)} trials, expected {count}")
    return tuple(
        TrialSpec(
            index=index,
            paradigm=paradigm.name,
            correct_response=item["correct_response"],
            stimulus=item["stimulus"],
            condition=item.get("condition"),
            set_size=item.get("set_size"),
        )
        for index, item in enumerate(raw)
    )


def dump_sequence(trials) -> bytes:
    """Canonical JSON encoding of a trial sequence."""
    return json.dumps(
        [trial.to_dict() for trial in trials],
        sort_keys=True,
        separators=(",", ":"),
    ).encode("utf-8")


def sequence_fingerprint(trials) -> str:
    return hashlib.sha256(dump_sequence(trials)).hexdigest()
