import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .models import (
    Answer, WeightTable, CheckStatus, CheckedClassification
)
from .classifier import classify

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def __str__(self):
        if self.errors:
            return f"{super().__str__()}: {'; '.join(self.errors)}"
        return super().__str__()


def validate_weight_table(
    weights: WeightTable,
    question_options: Optional[Dict[int, List[str]]] = None
) -> Tuple[bool, List[str]]:
    """
    Check the weight table invariants

    Args:
        weights: Table to check
        question_options: Options each question exposes to the quiz-taker;
            when given, every question's choices must match them exactly

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if not weights.entries:
        errors.append("Weight table cannot be empty")
        return False, errors

    pair_counts = Counter((e.question_id, e.choice) for e in weights.entries)
    for (question_id, choice), count in sorted(pair_counts.items()):
        if count > 1:
            errors.append(f"Question {question_id} choice '{choice}' appears {count} times")

    if question_options is not None:
        grouped = weights.by_question()
        for question_id in sorted(set(grouped) | set(question_options)):
            weighted = {e.choice for e in grouped.get(question_id, [])}
            exposed = set(question_options.get(question_id, []))

            orphan = weighted - exposed
            if orphan:
                errors.append(f"Question {question_id} has weights for unknown choices: {sorted(orphan)}")

            missing = exposed - weighted
            if missing:
                errors.append(f"Question {question_id} has no weights for choices: {sorted(missing)}")

    return len(errors) == 0, errors


def find_unscored_questions(weights: WeightTable, question_count: int) -> List[int]:
    """Questions in 1..question_count that have no choice weights at all"""
    scored = set(weights.question_ids())
    return [q for q in range(1, question_count + 1) if q not in scored]


def validate_answer_set(answers: Iterable[Answer], weights: WeightTable) -> Tuple[bool, List[str]]:
    """
    Check that an answer set is complete and unambiguous

    Reports answers with no matching weight entry, questions answered more
    than once, and scored questions left unanswered.
    """
    errors = []
    answers = list(answers)

    for answer in answers:
        if weights.lookup(answer.question_id, answer.choice) is None:
            errors.append(f"No weights for question {answer.question_id} choice '{answer.choice}'")

    counts = Counter(a.question_id for a in answers)
    duplicates = sorted(q for q, n in counts.items() if n > 1)
    if duplicates:
        errors.append(f"Questions answered more than once: {duplicates}")

    unanswered = [q for q in weights.question_ids() if q not in counts]
    if unanswered:
        errors.append(f"Questions not answered: {unanswered}")

    return len(errors) == 0, errors


def classify_checked(answers: Iterable[Answer], weights: WeightTable) -> CheckedClassification:
    """Validate an answer set, then classify it with the permissive classifier"""
    answers = list(answers)
    is_valid, errors = validate_answer_set(answers, weights)
    if not is_valid:
        logger.info(f"Answer set rejected: {errors}")
        return CheckedClassification(status=CheckStatus.INVALID, errors=errors)

    return CheckedClassification(status=CheckStatus.OK, result=classify(answers, weights))


def validate_and_raise(validation_result: Tuple[bool, Union[str, List[str]]],
                      operation: str = "validation") -> None:

    is_valid, errors = validation_result

    if not is_valid:
        if isinstance(errors, str):
            errors = [errors]
        raise ValidationError(f"{operation} failed", errors)
