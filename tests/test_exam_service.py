import pytest

from config import DEFAULT_PASS_SCORE
from exam_simulator.models.session_state import AttemptState
from exam_simulator.services.exam_service import (
    analyze_answers, calculate_score, check_fill_in, check_order, is_passed, select_single,
)
from exam_simulator.services.question_set import build_attempt_containers

from conftest import make_exam, mc


def _fresh_state(exam, **overrides):
    answers, fill_ins, orders, intervals = build_attempt_containers(exam)
    data = dict(answers=answers, fill_ins=fill_ins, orders=orders, intervals=intervals,
                time=exam.time * 60)
    data.update(overrides)
    return AttemptState(**data)


def _assert_partition(report):
    correct = {i for i, ok in enumerate(report.correct) if ok}
    incorrect, incomplete = set(report.incorrect), set(report.incomplete)
    assert not (correct & incorrect or correct & incomplete or incorrect & incomplete)
    assert correct | incorrect | incomplete == set(range(report.test_length))
    assert report.incorrect == sorted(report.incorrect)
    assert report.incomplete == sorted(report.incomplete)


def test_select_single_replaces_previous_selection(mc_exam):
    q = mc_exam.test[0]
    assert select_single(q, 2) == [False, False, True]
    assert select_single(q, 3) is None
    assert select_single(q, -1) is None


def test_fill_in_is_case_insensitive(mixed_exam):
    q = mixed_exam.test[2]
    assert check_fill_in(q, "Paris")
    assert check_fill_in(q, "  PARIS ")
    assert check_fill_in(q, "lutetia")
    assert not check_fill_in(q, "London")


def test_identity_order_is_correct(mixed_exam):
    q = mixed_exam.test[3]
    assert check_order(q, [0, 1, 2]) is True


@pytest.mark.parametrize("order", [[1, 0, 2], [0, 2, 1], [2, 1, 0]])
def test_any_transposition_is_incorrect(mixed_exam, order):
    assert check_order(mixed_exam.test[3], order) is False


@pytest.mark.parametrize("order", [[], [0, 1], [0, 0, 1], [0, 1, 5]])
def test_non_permutation_is_rejected(mixed_exam, order):
    assert check_order(mixed_exam.test[3], order) is None


def test_empty_attempt_is_all_incomplete(mixed_exam):
    report = analyze_answers(mixed_exam, _fresh_state(mixed_exam))
    assert report.incomplete == [0, 1, 2, 3]
    assert report.incorrect == []
    assert report.score == 0.0
    assert not report.passed
    _assert_partition(report)


def test_missing_slots_never_raise(mixed_exam):
    empty = AttemptState()
    report = analyze_answers(mixed_exam, empty)
    assert report.incomplete == [0, 1, 2, 3]
    assert report.test_length == 4


def test_mixed_attempt_partition(mixed_exam):
    state = _fresh_state(mixed_exam)
    state.answers[0] = [False, True, False, False]      # 정답
    state.answers[1] = [True, False, False]             # 일부만 고름 → 오답
    state.answers[2] = [False]
    state.fill_ins[2] = "Rome"                          # 오답
    state.answers[3] = [True]
    state.orders[3] = [0, 1, 2]                         # 정답
    report = analyze_answers(mixed_exam, state)

    assert report.correct == [True, False, False, True]
    assert report.incorrect == [1, 2]
    assert report.incomplete == []
    assert report.score == 50.0
    _assert_partition(report)


def test_multiple_answer_exact_selection_is_correct(mixed_exam):
    state = _fresh_state(mixed_exam)
    state.answers[1] = [True, False, True]
    report = analyze_answers(mixed_exam, state)
    assert report.correct[1] is True


def test_elapsed_is_capped_by_duration():
    exam = make_exam("short", [mc("a", 0), mc("b", 0)], time=1)
    state = _fresh_state(exam, intervals=[50, 40])
    assert analyze_answers(exam, state).elapsed == 60

    state = _fresh_state(exam, intervals=[10, 5])
    assert analyze_answers(exam, state).elapsed == 15


def test_report_links_exam_by_filename(mc_exam):
    report = analyze_answers(mc_exam, _fresh_state(mc_exam))
    assert report.filename == "three-mc"
    assert "test" not in report.model_dump()


def test_pass_score_from_exam():
    exam = make_exam("p", [mc("a", 0), mc("b", 0)], pass_score=50)
    state = _fresh_state(exam)
    state.answers[0] = [True, False, False]
    report = analyze_answers(exam, state)
    assert report.score == 50.0
    assert report.passed


def test_calculate_score_and_pass():
    assert calculate_score(0, 0) == 0.0
    assert calculate_score(1, 3) == 33.33
    assert is_passed(DEFAULT_PASS_SCORE)
    assert not is_passed(DEFAULT_PASS_SCORE - 0.01)
    assert is_passed(50.0, pass_score=50.0)


def test_default_pass_score_comes_from_config():
    exam = make_exam("no-pass-score", [mc("a", 0)])
    assert exam.pass_score == DEFAULT_PASS_SCORE
    report = analyze_answers(exam, _fresh_state(exam))
    assert report.pass_score == DEFAULT_PASS_SCORE
    assert not report.passed
