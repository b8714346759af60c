from cogtrials.tasks.helpers.metrics.change_detection import compute_change_detection_summary
from cogtrials.tasks.helpers.metrics.flanker import compute_flanker_summary
from cogtrials.tasks.helpers.metrics.mental_rotation import compute_mental_rotation_summary
from cogtrials.tasks.helpers.metrics.nback import compute_nback_summary
from cogtrials.tasks.helpers.metrics.posner import compute_posner_summary
from cogtrials.tasks.helpers.metrics.stroop import compute_stroop_summary
from cogtrials.tasks.helpers.metrics.visual_search import compute_visual_search_summary

METRIC_COMPUTERS = {
    "flanker": compute_flanker_summary,
    "stroop": compute_stroop_summary,
    "visual_search": compute_visual_search_summary,
    "nback": compute_nback_summary,
    "posner": compute_posner_summary,
    "mental_rotation": compute_mental_rotation_summary,
    "change_detection": compute_change_detection_summary,
}
