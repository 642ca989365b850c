from fastapi import APIRouter, HTTPException, Depends, status
from typing import Optional
import logging
from datetime import datetime

from ..core.analyzer import analyze_configuration, check_range_reachability
from ..core.classifier import classify
from ..core.models import (
    SubmitAnswersRequest, UpdateWeightsRequest, AnalysisRequest, WeightTable
)
from ..core.traits import OCEAN_DISPLAY_NAMES, OCEAN_DESCRIPTIONS, SEASON_DISPLAY_NAMES
from ..core.validation import ValidationError, classify_checked
from ..core.weight_store import WeightStore
from ..config import settings

logger = logging.getLogger(__name__)

# Global instance
_weight_store_instance: Optional[WeightStore] = None

def get_weight_store() -> WeightStore:
    """Dependency to get the weight store instance"""
    global _weight_store_instance
    if _weight_store_instance is None:
        try:
            _weight_store_instance = WeightStore.from_file(settings.WEIGHTS_FILE)
        except Exception as e:
            logger.error(f"Failed to initialize weight store: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Weight store initialization failed"
            )
    return _weight_store_instance

router = APIRouter()

# HEALTH

@router.get("/health")
async def health_check(store: WeightStore = Depends(get_weight_store)):
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": "Ocean Season Quiz",
        "components": {
            "choice_weights_loaded": len(store.weights),
            "questions": store.question_count
        }
    }

# QUIZ ENDPOINTS

@router.post("/quiz/submit")
async def submit_quiz(
    request: SubmitAnswersRequest,
    store: WeightStore = Depends(get_weight_store)
):
    """Score a completed quiz and return its Ocean/Season result"""
    try:
        if settings.STRICT_ANSWER_VALIDATION:
            checked = classify_checked(request.answers, store.weights)
            if not checked.is_ok:
                raise ValidationError("Invalid answer set", checked.errors)
            result = checked.result
        else:
            result = classify(request.answers, store.weights)

        logger.info(f"Scored submission with {len(request.answers)} answers: {result.code}")

        return {
            "result_code": result.code,
            "ocean": result.ocean.value,
            "ocean_label": OCEAN_DISPLAY_NAMES[result.ocean],
            "ocean_description": OCEAN_DESCRIPTIONS[result.ocean],
            "season": result.season.value,
            "season_label": SEASON_DISPLAY_NAMES[result.season],
            "score": result.scores.model_dump(),
            "totals": result.totals.model_dump()
        }

    except ValidationError as e:
        logger.warning(f"Rejected submission: {e}")
        raise HTTPException(status_code=400, detail={"message": str(e), "errors": e.errors})
    except Exception as e:
        logger.error(f"Failed to score submission: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to submit test")

# ADMIN SCORING ENDPOINTS

@router.get("/admin/scoring")
async def get_scoring(store: WeightStore = Depends(get_weight_store)):
    """Current weight table grouped by question"""
    return {
        "questions": store.grouped(),
        "question_count": store.question_count
    }

@router.put("/admin/scoring")
def update_scoring(
    request: UpdateWeightsRequest,
    store: WeightStore = Depends(get_weight_store)
):
    """Update choice weights and return the refreshed analysis"""
    try:
        table = store.apply_updates(request.updates)
        report = analyze_configuration(table, store.question_count)

        return {
            "success": True,
            "updated": len(request.updates),
            "distribution": report.model_dump(mode="json"),
            "range_reachability": check_range_reachability(table, store.question_count).model_dump()
        }

    except ValidationError as e:
        logger.warning(f"Rejected weight update: {e}")
        raise HTTPException(status_code=400, detail={"message": str(e), "errors": e.errors})
    except Exception as e:
        logger.error(f"Failed to update scores: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update scores")

@router.post("/admin/scoring/analysis")
def analyze_scoring(
    request: AnalysisRequest,
    store: WeightStore = Depends(get_weight_store)
):
    """Live distribution/reachability preview for the stored or a draft table"""
    try:
        if request.weights is not None:
            weights = WeightTable(entries=request.weights)
            default_count = max(weights.question_ids(), default=0)
        else:
            weights = store.weights
            default_count = store.question_count
        question_count = request.question_count if request.question_count is not None else default_count
        trials = request.trials if request.trials is not None else settings.DEFAULT_TRIALS

        if trials > settings.MAX_TRIALS:
            raise ValueError(f"Trials must be at most {settings.MAX_TRIALS}, got {trials}")
        if question_count > settings.MAX_QUESTION_COUNT:
            raise ValueError(
                f"Question count must be at most {settings.MAX_QUESTION_COUNT}, got {question_count}"
            )

        report = analyze_configuration(
            weights,
            question_count,
            trials=trials,
            scheme=request.scheme,
            seed=request.seed,
            prefer_exact=request.exact
        )

        if report.unscored_questions:
            logger.warning(f"Analysis ran with unscored questions: {report.unscored_questions}")

        return {
            "distribution": report.model_dump(mode="json"),
            "range_reachability": check_range_reachability(weights, question_count).model_dump(),
            "generated_at": datetime.now().isoformat()
        }

    except ValueError as e:
        logger.warning(f"Invalid analysis request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to analyze scoring: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to analyze scoring configuration")
