from typing import Dict, List, Optional, Tuple
from enum import Enum
from pydantic import BaseModel, Field, PrivateAttr

class Ocean(str, Enum):
    """Ocean labels in ascending energy order"""
    SOUTHERN = "southern"
    ARCTIC = "arctic"
    ATLANTIC = "atlantic"
    INDIAN = "indian"
    PACIFIC = "pacific"

class Season(str, Enum):
    """Season labels in ascending positivity/curiosity order"""
    WINTER = "winter"
    AUTUMN = "autumn"
    SPRING = "spring"
    SUMMER = "summer"

class ScoringScheme(str, Enum):
    """Which Ocean/Season formula pair to apply to trait totals"""
    ANALYSIS = "analysis"      # 3:2:1 weighted composites used by the admin dashboard
    CLASSIFIER = "classifier"  # per-axis bucket + raw sum used for real submissions

class AnalysisMethod(str, Enum):
    MONTE_CARLO = "monte_carlo"
    EXACT = "exact"

class CheckStatus(str, Enum):
    OK = "ok"
    INVALID = "invalid"

class ChoiceWeight(BaseModel):
    """Trait contribution of one answer choice"""
    question_id: int = Field(..., ge=1, description="Question this choice belongs to")
    choice: str = Field(..., min_length=1, description="Option key shown to the quiz-taker, e.g. 'A'")
    energy: int = 0
    positivity: int = 0
    curiosity: int = 0

class WeightTable(BaseModel):
    """All choice weights across the quiz"""
    entries: List[ChoiceWeight] = Field(default_factory=list)
    _index: Optional[Dict[Tuple[int, str], ChoiceWeight]] = PrivateAttr(default=None)

    def lookup(self, question_id: int, choice: str) -> Optional[ChoiceWeight]:
        """Find the entry for a question/choice pair; the first entry wins on duplicates"""
        if self._index is None:
            index = {}
            for entry in self.entries:
                index.setdefault((entry.question_id, entry.choice), entry)
            self._index = index
        return self._index.get((question_id, choice))

    def by_question(self) -> Dict[int, List[ChoiceWeight]]:
        """Group entries by question id, keeping table order within a question"""
        grouped: Dict[int, List[ChoiceWeight]] = {}
        for entry in self.entries:
            grouped.setdefault(entry.question_id, []).append(entry)
        return grouped

    def question_ids(self) -> List[int]:
        return sorted({entry.question_id for entry in self.entries})

    def __len__(self) -> int:
        return len(self.entries)

class Answer(BaseModel):
    """One quiz response"""
    question_id: int
    choice: str

class TraitTotals(BaseModel):
    """Raw trait sums across an answer set"""
    energy: int = 0
    positivity: int = 0
    curiosity: int = 0

    class Config:
        frozen = True

class TraitScores(BaseModel):
    """Normalized trait buckets, each in [-2, 2]"""
    energy: int = Field(..., ge=-2, le=2)
    positivity: int = Field(..., ge=-2, le=2)
    curiosity: int = Field(..., ge=-2, le=2)

    class Config:
        frozen = True

class ClassificationResult(BaseModel):
    """Outcome of classifying one completed quiz"""
    ocean: Ocean
    season: Season
    code: str
    scores: TraitScores
    totals: TraitTotals

    class Config:
        frozen = True

class CheckedClassification(BaseModel):
    """Classification wrapped with answer-set validation"""
    status: CheckStatus
    result: Optional[ClassificationResult] = None
    errors: List[str] = Field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        return self.status == CheckStatus.OK

class CategoryShare(BaseModel):
    """Share of one Ocean or Season value in a distribution"""
    name: str
    label: str
    count: Optional[int] = Field(None, description="Observed trials; None for exact analysis")
    percentage: float

class DistributionReport(BaseModel):
    """Ocean/Season distribution and reachability for a weight table"""
    method: AnalysisMethod
    scheme: ScoringScheme
    question_count: int
    trials: Optional[int] = None
    ocean_distribution: List[CategoryShare]
    season_distribution: List[CategoryShare]
    total_combinations: int
    reachable_combinations: int
    unreachable: List[str] = Field(default_factory=list)
    oceans_reached: int
    seasons_reached: int
    unscored_questions: List[int] = Field(default_factory=list)

    def percentage_of(self, value: Enum) -> float:
        """Look up the share of an Ocean or Season value"""
        for share in self.ocean_distribution + self.season_distribution:
            if share.name == value.value:
                return share.percentage
        raise KeyError(value)

class ScoreRange(BaseModel):
    min: int
    max: int

class RangeReachability(BaseModel):
    """Independent per-axis min/max reachability check"""
    energy: ScoreRange
    season_score: ScoreRange
    ocean_reachability: Dict[str, bool]
    season_reachability: Dict[str, bool]
    total_combinations: int
    reachable_combinations: int
    unreachable: List[str] = Field(default_factory=list)

# API Request/Response Models
class SubmitAnswersRequest(BaseModel):
    """Completed quiz submission"""
    answers: List[Answer]

class WeightUpdate(BaseModel):
    """New weights for an existing question/choice pair"""
    question_id: int = Field(..., ge=1)
    choice: str
    energy: int
    positivity: int
    curiosity: int

class UpdateWeightsRequest(BaseModel):
    updates: List[WeightUpdate] = Field(..., min_length=1)

class AnalysisRequest(BaseModel):
    """Live analysis of the stored or a draft weight table"""
    weights: Optional[List[ChoiceWeight]] = Field(None, description="Unsaved draft; stored table when omitted")
    question_count: Optional[int] = Field(None, ge=0)
    trials: Optional[int] = Field(None, ge=1)
    scheme: ScoringScheme = ScoringScheme.ANALYSIS
    seed: Optional[int] = None
    exact: bool = False
