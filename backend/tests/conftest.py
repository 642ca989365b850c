import pytest

from oceanquiz.config import settings
from oceanquiz.core.models import Answer, ChoiceWeight, WeightTable
from oceanquiz.core.weight_store import WeightStore


def make_table(*rows) -> WeightTable:
    """Rows are (question_id, choice, energy, positivity, curiosity)"""
    return WeightTable(entries=[
        ChoiceWeight(question_id=q, choice=ch, energy=e, positivity=p, curiosity=c)
        for q, ch, e, p, c in rows
    ])


def answers(*pairs) -> list:
    return [Answer(question_id=q, choice=ch) for q, ch in pairs]


@pytest.fixture
def example_table():
    # q1/A = (1, 1, 0), q2/B = (0, 1, 1) plus filler choices
    return make_table(
        (1, "A", 1, 1, 0),
        (1, "B", -1, 0, 0),
        (2, "A", 0, 0, 0),
        (2, "B", 0, 1, 1),
    )


@pytest.fixture
def small_quiz_table():
    """Four questions with three choices each, wide enough to hit several outcomes"""
    return make_table(
        (1, "A", 4, 2, 0), (1, "B", 0, -2, 1), (1, "C", -4, 0, -3),
        (2, "A", 3, 1, 1), (2, "B", -1, 3, 0), (2, "C", -3, -3, -1),
        (3, "A", 2, 0, 3), (3, "B", 0, 1, -2), (3, "C", -2, -1, 0),
        (4, "A", 1, 2, 2), (4, "B", -2, 0, 1), (4, "C", 0, -2, -2),
    )


@pytest.fixture
def default_store():
    return WeightStore.from_file(settings.WEIGHTS_FILE)
