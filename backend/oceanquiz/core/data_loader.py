import json
import os
import logging
from typing import Dict, List, Tuple

from pydantic import ValidationError as PydanticValidationError

from .models import ChoiceWeight, WeightTable
from .validation import ValidationError

logger = logging.getLogger(__name__)


def load_weight_config(file_path: str) -> Tuple[WeightTable, Dict[int, List[str]]]:
    """
    Load the weight table and the options each question exposes

    Expected layout::

        {"questions": [{"id": 1, "choices": [
            {"choice": "A", "energy": 2, "positivity": 1, "curiosity": 0}, ...]}]}

    Returns:
        Tuple of (weight table, question id -> option keys)
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Weights file not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Weights file is not valid JSON: {e}")
        raise ValidationError("Failed to parse weights file", [str(e)])

    questions = data.get("questions") if isinstance(data, dict) else None
    if not isinstance(questions, list):
        raise ValidationError("Failed to load weights", ["Top-level 'questions' list is missing"])

    entries: List[ChoiceWeight] = []
    question_options: Dict[int, List[str]] = {}
    errors: List[str] = []

    for position, question in enumerate(questions):
        if not isinstance(question, dict):
            errors.append(f"Question #{position} must be an object, got {type(question).__name__}")
            continue
        question_id = question.get("id")
        choices = question.get("choices", [])
        if not isinstance(question_id, int) or not isinstance(choices, list):
            errors.append(f"Question #{position} needs an integer 'id' and a 'choices' list")
            continue

        question_options[question_id] = []
        for choice_data in choices:
            try:
                entry = ChoiceWeight(question_id=question_id, **choice_data)
            except (PydanticValidationError, TypeError) as e:
                errors.append(f"Question {question_id}: invalid choice {choice_data!r} ({e})")
                continue
            entries.append(entry)
            question_options[question_id].append(entry.choice)

    if errors:
        logger.error(f"Weights file has {len(errors)} invalid entries")
        raise ValidationError("Failed to load weights", errors)

    logger.info(f"Loaded {len(entries)} choice weights for {len(question_options)} questions")
    return WeightTable(entries=entries), question_options
