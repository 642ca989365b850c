import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from .models import (
    WeightTable, ChoiceWeight, TraitTotals, ScoringScheme, AnalysisMethod,
    CategoryShare, DistributionReport, ScoreRange, RangeReachability
)
from .traits import (
    OCEANS, SEASONS, OCEAN_BY_BUCKET, OCEAN_DISPLAY_NAMES, SEASON_DISPLAY_NAMES,
    SCHEME_FUNCTIONS, normalize, season_for_sum, result_code
)
from .validation import find_unscored_questions
from ..config import settings

logger = logging.getLogger(__name__)

TOTAL_COMBINATIONS = len(OCEANS) * len(SEASONS)


class StateSpaceTooLarge(ValueError):
    """Exact enumeration would track more distinct totals than allowed"""

    def __init__(self, states: int, limit: int):
        super().__init__(f"Exact analysis needs {states} distinct trait totals, limit is {limit}")
        self.states = states
        self.limit = limit


def _choice_matrix(choices: Sequence[ChoiceWeight]) -> np.ndarray:
    return np.array(
        [[c.energy, c.positivity, c.curiosity] for c in choices],
        dtype=np.int64
    )


def _label_rows(rows: np.ndarray, scheme: ScoringScheme) -> Tuple[np.ndarray, np.ndarray]:
    """Ocean and Season index (enum order) for each row of (E, P, C) totals"""
    ocean_of, season_of = SCHEME_FUNCTIONS[scheme]
    ocean_idx = np.empty(len(rows), dtype=np.int64)
    season_idx = np.empty(len(rows), dtype=np.int64)

    for i, (energy, positivity, curiosity) in enumerate(rows.tolist()):
        totals = TraitTotals(energy=energy, positivity=positivity, curiosity=curiosity)
        ocean_idx[i] = OCEANS.index(ocean_of(totals))
        season_idx[i] = SEASONS.index(season_of(totals))

    return ocean_idx, season_idx


def _label_trials(totals: np.ndarray, scheme: ScoringScheme) -> Tuple[np.ndarray, np.ndarray]:
    """Label every trial, classifying each distinct total only once"""
    unique_rows, inverse = np.unique(totals, axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)
    ocean_idx, season_idx = _label_rows(unique_rows, scheme)
    return ocean_idx[inverse], season_idx[inverse]


def _shares(labels, display_names, percentages, counts=None) -> List[CategoryShare]:
    return [
        CategoryShare(
            name=label.value,
            label=display_names[label],
            count=int(counts[i]) if counts is not None else None,
            percentage=float(percentages[i])
        )
        for i, label in enumerate(labels)
    ]


def _build_report(
    method: AnalysisMethod,
    scheme: ScoringScheme,
    question_count: int,
    trials: Optional[int],
    ocean_percentages: np.ndarray,
    season_percentages: np.ndarray,
    reached_pairs: Set[Tuple[int, int]],
    unscored_questions: List[int],
    ocean_counts: Optional[np.ndarray] = None,
    season_counts: Optional[np.ndarray] = None
) -> DistributionReport:
    unreachable = [
        result_code(ocean, season)
        for o, ocean in enumerate(OCEANS)
        for s, season in enumerate(SEASONS)
        if (o, s) not in reached_pairs
    ]

    return DistributionReport(
        method=method,
        scheme=scheme,
        question_count=question_count,
        trials=trials,
        ocean_distribution=_shares(OCEANS, OCEAN_DISPLAY_NAMES, ocean_percentages, ocean_counts),
        season_distribution=_shares(SEASONS, SEASON_DISPLAY_NAMES, season_percentages, season_counts),
        total_combinations=TOTAL_COMBINATIONS,
        reachable_combinations=len(reached_pairs),
        unreachable=unreachable,
        oceans_reached=len({o for o, _ in reached_pairs}),
        seasons_reached=len({s for _, s in reached_pairs}),
        unscored_questions=unscored_questions
    )


def estimate_distribution(
    weights: WeightTable,
    question_count: int,
    trials: int = 10000,
    scheme: ScoringScheme = ScoringScheme.ANALYSIS,
    seed: Optional[int] = None
) -> DistributionReport:
    """
    Estimate Ocean/Season frequencies under uniformly random answers

    Each trial picks one choice per question (1..question_count) uniformly
    at random. Questions without weights contribute nothing. A combination
    never seen in the sample is reported unreachable, which can be a false
    negative for rare outcomes but never a false positive.

    Args:
        weights: Weight table to analyse
        question_count: Number of live questions in the quiz
        trials: Number of simulated quiz runs
        scheme: Ocean/Season formula to apply to each trial
        seed: Optional seed for a reproducible run

    Returns:
        DistributionReport with percentages and sampled reachability
    """
    if trials < 1:
        raise ValueError(f"Trials must be positive, got {trials}")
    if question_count < 0:
        raise ValueError(f"Question count cannot be negative, got {question_count}")

    rng = np.random.default_rng(seed)
    grouped = weights.by_question()
    totals = np.zeros((trials, 3), dtype=np.int64)

    for question_id in range(1, question_count + 1):
        choices = grouped.get(question_id)
        if not choices:
            continue
        picks = rng.integers(0, len(choices), size=trials)
        totals += _choice_matrix(choices)[picks]

    ocean_idx, season_idx = _label_trials(totals, scheme)
    ocean_counts = np.bincount(ocean_idx, minlength=len(OCEANS))
    season_counts = np.bincount(season_idx, minlength=len(SEASONS))

    pair_ids = np.unique(ocean_idx * len(SEASONS) + season_idx)
    reached_pairs = {divmod(int(pair_id), len(SEASONS)) for pair_id in pair_ids}

    report = _build_report(
        AnalysisMethod.MONTE_CARLO, scheme, question_count, trials,
        ocean_counts / trials * 100.0,
        season_counts / trials * 100.0,
        reached_pairs,
        find_unscored_questions(weights, question_count),
        ocean_counts=ocean_counts,
        season_counts=season_counts
    )

    logger.info(
        f"Monte Carlo analysis ({scheme.value}): {trials} trials, {question_count} questions, "
        f"{report.reachable_combinations}/{TOTAL_COMBINATIONS} combinations observed"
    )
    return report


def exact_distribution(
    weights: WeightTable,
    question_count: int,
    scheme: ScoringScheme = ScoringScheme.ANALYSIS,
    max_states: Optional[int] = None
) -> DistributionReport:
    """
    Compute the exact Ocean/Season distribution by enumerating trait totals

    Per-question uniform choice distributions are convolved over (E, P, C)
    totals, so reachability and probabilities are exact. Raises
    StateSpaceTooLarge once the number of distinct totals passes max_states.
    """
    if question_count < 0:
        raise ValueError(f"Question count cannot be negative, got {question_count}")
    limit = settings.EXACT_MAX_STATES if max_states is None else max_states

    grouped = weights.by_question()
    states: Dict[Tuple[int, int, int], float] = {(0, 0, 0): 1.0}

    for question_id in range(1, question_count + 1):
        choices = grouped.get(question_id)
        if not choices:
            continue

        share = 1.0 / len(choices)
        merged: Dict[Tuple[int, int, int], float] = defaultdict(float)
        for (energy, positivity, curiosity), probability in states.items():
            for choice in choices:
                key = (
                    energy + choice.energy,
                    positivity + choice.positivity,
                    curiosity + choice.curiosity
                )
                merged[key] += probability * share

        if len(merged) > limit:
            raise StateSpaceTooLarge(len(merged), limit)
        states = merged

    rows = np.array(list(states.keys()), dtype=np.int64)
    probabilities = np.array(list(states.values()), dtype=np.float64)
    ocean_idx, season_idx = _label_rows(rows, scheme)

    ocean_probs = np.bincount(ocean_idx, weights=probabilities, minlength=len(OCEANS))
    season_probs = np.bincount(season_idx, weights=probabilities, minlength=len(SEASONS))
    reached_pairs = set(zip(ocean_idx.tolist(), season_idx.tolist()))

    report = _build_report(
        AnalysisMethod.EXACT, scheme, question_count, None,
        ocean_probs * 100.0,
        season_probs * 100.0,
        reached_pairs,
        find_unscored_questions(weights, question_count)
    )

    logger.info(
        f"Exact analysis ({scheme.value}): {len(states)} distinct totals, "
        f"{report.reachable_combinations}/{TOTAL_COMBINATIONS} combinations reachable"
    )
    return report


def analyze_configuration(
    weights: WeightTable,
    question_count: int,
    trials: Optional[int] = None,
    scheme: ScoringScheme = ScoringScheme.ANALYSIS,
    seed: Optional[int] = None,
    prefer_exact: bool = False,
    max_states: Optional[int] = None
) -> DistributionReport:
    """Exact analysis when requested and feasible, Monte Carlo otherwise"""
    if prefer_exact:
        try:
            return exact_distribution(weights, question_count, scheme, max_states)
        except StateSpaceTooLarge as e:
            logger.warning(f"{e}; falling back to Monte Carlo sampling")

    return estimate_distribution(
        weights,
        question_count,
        trials if trials is not None else settings.DEFAULT_TRIALS,
        scheme,
        seed
    )


def check_range_reachability(
    weights: WeightTable,
    question_count: Optional[int] = None
) -> RangeReachability:
    """
    Per-axis reachability of the submission classifier from min/max totals

    Each question contributes its smallest and largest energy and P + C.
    An Ocean or Season is flagged reachable when its bucket overlaps the
    [min, max] range, so it may be reachable: totals can skip over a bucket
    inside the range (energies of only -10 or 10 never land in 0). The
    combination count also assumes the axes are independent. Unreachable
    flags are definite; reachable ones are a necessary condition only.
    """
    grouped = weights.by_question()
    if question_count is not None:
        grouped = {q: c for q, c in grouped.items() if 1 <= q <= question_count}

    min_energy = max_energy = 0
    min_season = max_season = 0
    for choices in grouped.values():
        energies = [c.energy for c in choices]
        season_scores = [c.positivity + c.curiosity for c in choices]
        min_energy += min(energies)
        max_energy += max(energies)
        min_season += min(season_scores)
        max_season += max(season_scores)

    low_bucket, high_bucket = normalize(min_energy), normalize(max_energy)
    ocean_reachability = {
        OCEAN_BY_BUCKET[bucket].value: low_bucket <= bucket <= high_bucket
        for bucket in sorted(OCEAN_BY_BUCKET)
    }

    low_season = SEASONS.index(season_for_sum(min_season))
    high_season = SEASONS.index(season_for_sum(max_season))
    season_reachability = {
        season.value: low_season <= i <= high_season
        for i, season in enumerate(SEASONS)
    }

    unreachable = [f"Ocean: {name}" for name, ok in ocean_reachability.items() if not ok]
    unreachable += [f"Season: {name}" for name, ok in season_reachability.items() if not ok]

    ocean_count = sum(ocean_reachability.values())
    season_count = sum(season_reachability.values())

    return RangeReachability(
        energy=ScoreRange(min=min_energy, max=max_energy),
        season_score=ScoreRange(min=min_season, max=max_season),
        ocean_reachability=ocean_reachability,
        season_reachability=season_reachability,
        total_combinations=TOTAL_COMBINATIONS,
        reachable_combinations=ocean_count * season_count,
        unreachable=unreachable
    )
