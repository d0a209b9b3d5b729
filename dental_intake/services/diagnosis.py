"""Rule-based program recommendation for the intake wizard.

Scores every program by keyword overlap with the tags of the selected
symptoms plus fixed reason/urgency bonuses, and picks the best one. The
point values and the confidence normalisation are business rules read from
the catalog; confidence is a bounded heuristic, not a probability.
"""
from typing import Iterable, List, Optional, Tuple

from dental_intake.schemas.catalog import ProgramOption, SymptomOption
from dental_intake.schemas.diagnosis import DiagnosticResult
from dental_intake.services.catalog import Catalog, load_catalog

OTHER_REASON = "otro"
URGENT = "inmediata"
PERIODONTAL_TAG = "periodontal"
BRUXISM_TAG = "bruxismo"


def _resolve_symptoms(catalog: Catalog, symptom_ids: Iterable[str]) -> List[SymptomOption]:
    wanted = set(symptom_ids or [])
    # unknown ids simply drop out; catalog order is kept
    return [s for s in catalog.symptoms if s.id in wanted]


def collect_tags(symptoms: Iterable[SymptomOption]) -> List[str]:
    return list(dict.fromkeys(tag for s in symptoms for tag in s.tags))


def score_program(catalog: Catalog, program: ProgramOption, tags: List[str], reason: str, urgency: str) -> int:
    rules = catalog.scoring
    keywords = set(program.keywords)
    score = sum(rules.tag_match_points for tag in tags if tag in keywords)
    if rules.reason_program.get(reason) == program.id:
        score += rules.reason_bonus_points
    if rules.urgency_program.get(urgency) == program.id:
        score += rules.urgency_bonus_points
    return score


def score_programs(catalog: Catalog, tags: List[str], reason: str, urgency: str) -> List[Tuple[ProgramOption, int]]:
    return [(p, score_program(catalog, p, tags, reason, urgency)) for p in catalog.programs]


def _confidence(catalog: Catalog, best_score: int, tag_count: int) -> float:
    rules = catalog.scoring
    total_possible = tag_count * rules.tag_match_points + rules.reason_bonus_points + rules.urgency_bonus_points
    return min(rules.confidence_cap, best_score / max(total_possible, 1) + rules.confidence_offset)


def _recommendations(catalog: Catalog, urgency: str, has_photo: bool, tags: List[str]) -> List[str]:
    texts = catalog.recommendations
    out: List[str] = []
    if urgency == URGENT:
        out.append(texts["urgent"])
    if has_photo:
        out.append(texts["photo"])
    if PERIODONTAL_TAG in tags:
        out.append(texts["periodontal"])
    if BRUXISM_TAG in tags:
        out.append(texts["bruxism"])
    return out


def generate_diagnosis(
    reason: str,
    symptom_ids: Iterable[str],
    urgency: str,
    has_photo: bool,
    catalog: Optional[Catalog] = None,
) -> DiagnosticResult:
    catalog = catalog or load_catalog()
    tags = collect_tags(_resolve_symptoms(catalog, symptom_ids))

    scores = score_programs(catalog, tags, reason, urgency)
    # max() keeps the first of equal scores, i.e. catalog order breaks ties
    best_program, best_score = max(scores, key=lambda item: item[1])

    return DiagnosticResult(
        route_key=best_program.id,
        program=best_program,
        confidence=_confidence(catalog, best_score, len(tags)),
        tags=tags,
        tags_count=len(tags),
        urgency=urgency,
        recommendations=_recommendations(catalog, urgency, has_photo, tags),
        price_estimate=catalog.price_for(best_program.id),
    )


def symptoms_for_reason(reason: str, catalog: Optional[Catalog] = None) -> List[SymptomOption]:
    """Symptoms listed under a reason; 'otro' shows the whole catalog."""
    catalog = catalog or load_catalog()
    return [s for s in catalog.symptoms if reason in s.reasons or reason == OTHER_REASON]


__all__ = ["generate_diagnosis", "symptoms_for_reason", "score_programs", "collect_tags"]
