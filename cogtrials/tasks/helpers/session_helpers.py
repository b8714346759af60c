from cogtrials.engine.engine import create_engine
from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.events import ExperimentCompleted
from cogtrials.engine.sequences import new_seed
from cogtrials.tasks.helpers.engine_config import build_trials
from cogtrials.tasks.helpers.engine_config import config_for_session
from cogtrials.tasks.helpers.engine_config import engine_settings
from cogtrials.tasks.registry import PARADIGM_REGISTRY


def create_experiment_session(paradigm, seed=None, params=None, **engine_overrides):
    """
    Create an ExperimentSession for ``paradigm``.

    The seed is stored on the session so every participant gets the same trial
    lists and the lists can be reproduced for auditing. ``params`` and
    ``engine_overrides`` are stored in session.config and validated up front
    by building the config once.
    """
    from cogtrials.tasks.models import ExperimentSession  # local import avoids circular

    if paradigm not in PARADIGM_REGISTRY:
        raise InvalidConfig(f"unknown paradigm {paradigm!r}")
    config = dict(engine_overrides)
    if params:
        config["params"] = dict(params)
    session = ExperimentSession(
        paradigm=paradigm,
        random_seed=new_seed() if seed is None else str(seed),
        config=config,
    )
    config_for_session(session)
    session.save()
    return session


def start_participant(session, participant_id, name="", share_data=False):
    """Return the participant's in-progress record, creating it on first use."""
    from cogtrials.tasks.models import ParticipantRecord  # local import avoids circular

    record, _ = ParticipantRecord.objects.get_or_create(
        session=session,
        participant_id=participant_id,
        defaults={
            "participant_name": name,
            "share_data": share_data,
            "paradigm": session.paradigm,
        },
    )
    return record


def main_trial_specs(session):
    """Regenerate the session's main-block TrialSpecs from its seed."""
    stored = dict(session.config or {})
    counts = engine_settings(
        session.paradigm,
        **{key: stored[key] for key in ("practice_trials", "main_trials") if key in stored},
    )
    _, main = build_trials(
        session.paradigm, session.random_seed, stored.get("params"), 0, counts["main_trials"]
    )
    return main


def create_participant_engine(record, *, clock=None, **callbacks):
    """
    Return (engine, store) for ``record``: every result is written to the
    record and the record is marked complete when the main block ends.
    """
    from cogtrials.tasks.persistence import ParticipantRecordStore

    config = config_for_session(record.session, **callbacks)
    store = ParticipantRecordStore(record)
    engine = create_engine(config, clock=clock, store=store)

    def _complete(event):
        if isinstance(event, ExperimentCompleted):
            store.record.mark_complete()

    engine.subscribe(_complete)
    return engine, store
