from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple

from .models import Ocean, Season, ScoringScheme, TraitTotals

OCEANS: List[Ocean] = list(Ocean)
SEASONS: List[Season] = list(Season)

OCEAN_DISPLAY_NAMES = {
    Ocean.SOUTHERN: "남극해",
    Ocean.ARCTIC: "북극해",
    Ocean.ATLANTIC: "대서양",
    Ocean.INDIAN: "인도양",
    Ocean.PACIFIC: "태평양",
}

SEASON_DISPLAY_NAMES = {
    Season.WINTER: "겨울",
    Season.AUTUMN: "가을",
    Season.SPRING: "봄",
    Season.SUMMER: "여름",
}

OCEAN_DESCRIPTIONS = {
    Ocean.SOUTHERN: "Calm, reserved, deep",
    Ocean.ARCTIC: "Sensitive, restrained",
    Ocean.ATLANTIC: "Balanced, steady",
    Ocean.INDIAN: "Exploring, communicative",
    Ocean.PACIFIC: "Active, expansive",
}

OCEAN_BY_BUCKET: Dict[int, Ocean] = {
    -2: Ocean.SOUTHERN,
    -1: Ocean.ARCTIC,
    0: Ocean.ATLANTIC,
    1: Ocean.INDIAN,
    2: Ocean.PACIFIC,
}

CODE_SEPARATOR = "-"

# Analyzer composites as (energy, positivity, curiosity) multipliers
ANALYSIS_OCEAN_COMPOSITE = (1, 2, 3)
ANALYSIS_SEASON_COMPOSITE = (3, 2, 1)

# Upper bounds (inclusive) of each bin; values above the last bound take the last label
ANALYSIS_OCEAN_BINS: List[Tuple[int, Ocean]] = [
    (17, Ocean.SOUTHERN),
    (23, Ocean.ARCTIC),
    (28, Ocean.ATLANTIC),
    (34, Ocean.INDIAN),
]
ANALYSIS_SEASON_BINS: List[Tuple[int, Season]] = [
    (16, Season.WINTER),
    (25, Season.AUTUMN),
    (34, Season.SPRING),
]

def normalize(value: int) -> int:
    """
    Map a raw trait total onto a bucket in [-2, 2]

    Thresholds are checked in order and the first match wins:
    >= 8 -> 2, >= 3 -> 1, > -3 -> 0, > -8 -> -1, otherwise -2.
    """
    if value >= 8:
        return 2
    if value >= 3:
        return 1
    if value > -3:
        return 0
    if value > -8:
        return -1
    return -2

def season_for_sum(score: int) -> Season:
    """Season from the raw positivity + curiosity sum"""
    if score <= -5:
        return Season.WINTER
    if score <= -1:
        return Season.AUTUMN
    if score <= 4:
        return Season.SPRING
    return Season.SUMMER

def classifier_ocean(totals: TraitTotals) -> Ocean:
    """Ocean as assigned to real submissions: normalized energy bucket only"""
    return OCEAN_BY_BUCKET[normalize(totals.energy)]

def classifier_season(totals: TraitTotals) -> Season:
    """Season as assigned to real submissions: unnormalized P + C"""
    return season_for_sum(totals.positivity + totals.curiosity)

def _composite(totals: TraitTotals, multipliers: Sequence[int]) -> int:
    e, p, c = multipliers
    return totals.energy * e + totals.positivity * p + totals.curiosity * c

def _bin(value: int, bins: List[Tuple[int, Enum]], top):
    for upper, label in bins:
        if value <= upper:
            return label
    return top

def analysis_ocean(totals: TraitTotals) -> Ocean:
    """Ocean as estimated by the configuration dashboard (C*3 + P*2 + E)"""
    return _bin(_composite(totals, ANALYSIS_OCEAN_COMPOSITE), ANALYSIS_OCEAN_BINS, Ocean.PACIFIC)

def analysis_season(totals: TraitTotals) -> Season:
    """Season as estimated by the configuration dashboard (E*3 + P*2 + C)"""
    return _bin(_composite(totals, ANALYSIS_SEASON_COMPOSITE), ANALYSIS_SEASON_BINS, Season.SUMMER)

SCHEME_FUNCTIONS: Dict[ScoringScheme, Tuple[Callable[[TraitTotals], Ocean], Callable[[TraitTotals], Season]]] = {
    ScoringScheme.CLASSIFIER: (classifier_ocean, classifier_season),
    ScoringScheme.ANALYSIS: (analysis_ocean, analysis_season),
}

def result_code(ocean: Ocean, season: Season) -> str:
    return f"{ocean.value}{CODE_SEPARATOR}{season.value}"

def all_codes() -> List[str]:
    """Every Ocean x Season code in enum order"""
    return [result_code(ocean, season) for ocean in OCEANS for season in SEASONS]
