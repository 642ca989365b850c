import logging
from typing import Any, Dict, Iterable, List, Optional

from .models import ChoiceWeight, WeightTable, WeightUpdate
from .data_loader import load_weight_config
from .validation import ValidationError, validate_weight_table, validate_and_raise

logger = logging.getLogger(__name__)


class WeightStore:
    """
    Holds the live weight table used for scoring submissions

    Admin edits are validated against the question options before they
    replace the current table.
    """

    def __init__(self, weights: WeightTable, question_options: Optional[Dict[int, List[str]]] = None):
        if question_options is None:
            question_options = {}
            for entry in weights.entries:
                question_options.setdefault(entry.question_id, []).append(entry.choice)

        validate_and_raise(validate_weight_table(weights, question_options), "Weight table validation")

        self.weights = weights
        self.question_options = question_options

        logger.info(
            f"WeightStore initialized: {len(weights)} choice weights, "
            f"{len(question_options)} questions"
        )

    @classmethod
    def from_file(cls, file_path: str) -> "WeightStore":
        weights, question_options = load_weight_config(file_path)
        return cls(weights, question_options)

    @property
    def question_count(self) -> int:
        """Highest question id; analysis covers questions 1..question_count"""
        return max(self.question_options, default=0)

    def apply_updates(self, updates: Iterable[WeightUpdate]) -> WeightTable:
        """Apply weight edits to existing question/choice pairs"""
        entries = list(self.weights.entries)
        positions = {(e.question_id, e.choice): i for i, e in enumerate(entries)}

        unknown = []
        for update in updates:
            position = positions.get((update.question_id, update.choice))
            if position is None:
                unknown.append(f"Question {update.question_id} choice '{update.choice}' does not exist")
                continue
            entries[position] = ChoiceWeight(
                question_id=update.question_id,
                choice=update.choice,
                energy=update.energy,
                positivity=update.positivity,
                curiosity=update.curiosity
            )

        if unknown:
            raise ValidationError("Weight update failed", unknown)

        table = WeightTable(entries=entries)
        validate_and_raise(validate_weight_table(table, self.question_options), "Weight update")

        self.weights = table
        logger.info(f"Applied weight updates, table now has {len(table)} entries")
        return table

    def grouped(self) -> List[Dict[str, Any]]:
        """Weight table grouped by question for display"""
        grouped = self.weights.by_question()
        return [
            {
                "question_id": question_id,
                "choice_scores": [entry.model_dump() for entry in grouped.get(question_id, [])]
            }
            for question_id in sorted(self.question_options)
        ]
