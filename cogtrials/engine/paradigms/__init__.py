from cogtrials.engine.errors import InvalidConfig
from cogtrials.engine.paradigms.base import ParadigmAdapter
from cogtrials.engine.paradigms.base import StaticResponseAdapter
from cogtrials.engine.paradigms.change_detection import ChangeDetectionParadigm
from cogtrials.engine.paradigms.flanker import FlankerParadigm
from cogtrials.engine.paradigms.mental_rotation import MentalRotationParadigm
from cogtrials.engine.paradigms.nback import NBackParadigm
from cogtrials.engine.paradigms.posner import PosnerParadigm
from cogtrials.engine.paradigms.stroop import StroopParadigm
from cogtrials.engine.paradigms.visual_search import VisualSearchParadigm

PARADIGMS: dict[str, ParadigmAdapter] = {
    adapter.name: adapter
    for adapter in (
        FlankerParadigm(),
        StroopParadigm(),
        VisualSearchParadigm(),
        NBackParadigm(),
        PosnerParadigm(),
        MentalRotationParadigm(),
        ChangeDetectionParadigm(),
    )
}


def get_paradigm(name: str) -> ParadigmAdapter:
    try:
        return PARADIGMS[name]
    except (KeyError, TypeError):
        raise InvalidConfig(f"unknown paradigm {name!r}; expected one of {', '.join(sorted(PARADIGMS))}") from None


__all__ = ["PARADIGMS", "ParadigmAdapter", "StaticResponseAdapter", "get_paradigm"]
