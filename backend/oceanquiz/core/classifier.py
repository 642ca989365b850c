import logging
from typing import Iterable

from .models import (
    Answer, WeightTable, TraitTotals, TraitScores, ClassificationResult
)
from .traits import normalize, classifier_ocean, classifier_season, result_code

logger = logging.getLogger(__name__)


def accumulate_totals(answers: Iterable[Answer], weights: WeightTable) -> TraitTotals:
    """
    Sum the trait weights of every answered choice

    Answers without a matching (question_id, choice) entry are skipped.
    Repeated answers for the same question all contribute.
    """
    energy = positivity = curiosity = 0
    skipped = 0

    for answer in answers:
        entry = weights.lookup(answer.question_id, answer.choice)
        if entry is None:
            skipped += 1
            continue
        energy += entry.energy
        positivity += entry.positivity
        curiosity += entry.curiosity

    if skipped:
        logger.debug(f"Skipped {skipped} answers with no matching choice weight")

    return TraitTotals(energy=energy, positivity=positivity, curiosity=curiosity)


def classify_totals(totals: TraitTotals) -> ClassificationResult:
    """Turn raw trait totals into an Ocean/Season result"""
    scores = TraitScores(
        energy=normalize(totals.energy),
        positivity=normalize(totals.positivity),
        curiosity=normalize(totals.curiosity)
    )

    # Ocean reads the energy bucket; Season reads the raw P + C sum
    ocean = classifier_ocean(totals)
    season = classifier_season(totals)

    return ClassificationResult(
        ocean=ocean,
        season=season,
        code=result_code(ocean, season),
        scores=scores,
        totals=totals
    )


def classify(answers: Iterable[Answer], weights: WeightTable) -> ClassificationResult:
    """
    Classify one completed quiz

    Args:
        answers: Answer set in submission order; may be empty or incomplete
        weights: Weight table to score against

    Returns:
        ClassificationResult with labels, code, normalized scores and raw totals
    """
    return classify_totals(accumulate_totals(answers, weights))
