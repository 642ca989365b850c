import json

import pytest

from oceanquiz.core.classifier import classify
from oceanquiz.core.data_loader import load_weight_config
from oceanquiz.core.models import CheckStatus, WeightTable, WeightUpdate
from oceanquiz.core.validation import (
    ValidationError, validate_weight_table, validate_answer_set,
    find_unscored_questions, classify_checked, validate_and_raise
)
from oceanquiz.core.weight_store import WeightStore

from conftest import make_table, answers


def test_weight_table_duplicates_are_reported():
    table = make_table((1, "A", 1, 0, 0), (1, "A", 2, 0, 0), (1, "B", 0, 0, 0))
    is_valid, errors = validate_weight_table(table)

    assert not is_valid
    assert errors == ["Question 1 choice 'A' appears 2 times"]


def test_weight_table_must_match_exposed_options(example_table):
    is_valid, errors = validate_weight_table(example_table, {1: ["A", "B"], 2: ["A", "C"], 3: ["A"]})

    assert not is_valid
    assert "Question 2 has weights for unknown choices: ['B']" in errors
    assert "Question 2 has no weights for choices: ['C']" in errors
    assert "Question 3 has no weights for choices: ['A']" in errors


def test_weight_table_valid_and_empty(example_table):
    assert validate_weight_table(example_table, {1: ["A", "B"], 2: ["A", "B"]}) == (True, [])
    assert validate_weight_table(WeightTable()) == (False, ["Weight table cannot be empty"])


def test_find_unscored_questions(example_table):
    assert find_unscored_questions(example_table, 2) == []
    assert find_unscored_questions(example_table, 4) == [3, 4]


def test_answer_set_problems_are_listed(example_table):
    is_valid, errors = validate_answer_set(answers((1, "A"), (1, "B"), (5, "A")), example_table)

    assert not is_valid
    assert "No weights for question 5 choice 'A'" in errors
    assert "Questions answered more than once: [1]" in errors
    assert "Questions not answered: [2]" in errors


def test_classify_checked_wraps_permissive_classifier(example_table):
    complete = answers((1, "A"), (2, "B"))
    checked = classify_checked(complete, example_table)

    assert checked.status == CheckStatus.OK
    assert checked.is_ok
    assert checked.result == classify(complete, example_table)

    rejected = classify_checked(answers((1, "A")), example_table)
    assert rejected.status == CheckStatus.INVALID
    assert rejected.result is None
    assert rejected.errors == ["Questions not answered: [2]"]


def test_validate_and_raise():
    validate_and_raise((True, []))

    with pytest.raises(ValidationError) as exc_info:
        validate_and_raise((False, "broken"), "Weight update")

    assert exc_info.value.errors == ["broken"]
    assert str(exc_info.value) == "Weight update failed: broken"


def write_config(tmp_path, payload) -> str:
    path = tmp_path / "weights.json"
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
    return str(path)


def test_load_weight_config(tmp_path):
    path = write_config(tmp_path, {"questions": [
        {"id": 1, "choices": [
            {"choice": "A", "energy": 1, "positivity": 2, "curiosity": 3},
            {"choice": "B", "energy": -1, "positivity": 0, "curiosity": 0},
        ]},
        {"id": 2, "choices": [{"choice": "A", "energy": 0, "positivity": 0, "curiosity": 1}]},
    ]})

    table, options = load_weight_config(path)

    assert len(table) == 3
    assert options == {1: ["A", "B"], 2: ["A"]}
    assert table.lookup(1, "A").curiosity == 3


def test_load_weight_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_weight_config(str(tmp_path / "missing.json"))

    with pytest.raises(ValidationError):
        load_weight_config(write_config(tmp_path, "{not json"))

    with pytest.raises(ValidationError):
        load_weight_config(write_config(tmp_path, {"choices": []}))

    with pytest.raises(ValidationError) as exc_info:
        load_weight_config(write_config(tmp_path, {"questions": [[1, 2]]}))
    assert exc_info.value.errors == ["Question #0 must be an object, got list"]

    with pytest.raises(ValidationError) as exc_info:
        load_weight_config(write_config(tmp_path, {"questions": [
            {"id": 1, "choices": [{"choice": "A", "energy": "lots"}]}
        ]}))
    assert len(exc_info.value.errors) == 1


def test_default_weights_file_is_complete(default_store):
    assert default_store.question_count == 18
    assert len(default_store.weights) == 54
    assert all(options == ["A", "B", "C"] for options in default_store.question_options.values())


def test_store_applies_updates(example_table):
    store = WeightStore(example_table)
    store.apply_updates([WeightUpdate(question_id=2, choice="B", energy=5, positivity=0, curiosity=0)])

    assert store.weights.lookup(2, "B").energy == 5
    assert classify(answers((1, "A"), (2, "B")), store.weights).totals.energy == 6


def test_store_rejects_unknown_choice(example_table):
    store = WeightStore(example_table)

    with pytest.raises(ValidationError) as exc_info:
        store.apply_updates([WeightUpdate(question_id=2, choice="C", energy=5, positivity=0, curiosity=0)])

    assert exc_info.value.errors == ["Question 2 choice 'C' does not exist"]
    assert store.weights is example_table


def test_store_rejects_invalid_initial_table():
    with pytest.raises(ValidationError):
        WeightStore(make_table((1, "A", 0, 0, 0), (1, "A", 1, 1, 1)))


def test_store_groups_by_question(example_table):
    grouped = WeightStore(example_table).grouped()

    assert [q["question_id"] for q in grouped] == [1, 2]
    assert [c["choice"] for c in grouped[0]["choice_scores"]] == ["A", "B"]
