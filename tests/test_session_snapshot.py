import pytest

from exam_simulator.models.session_state import AttemptState, ExamMode
from exam_simulator.services.errors import SessionExamMismatchError, SourceExamMissingError
from exam_simulator.services.question_set import build_attempt_containers
from exam_simulator.services.session_snapshot import capture, restore

from conftest import make_exam, mc


@pytest.fixture
def attempt(mixed_exam):
    answers, fill_ins, orders, intervals = build_attempt_containers(mixed_exam)
    state = AttemptState(answers=answers, fill_ins=fill_ins, orders=orders,
                         intervals=intervals, time=420, question=2,
                         marked=[3, 1], exam_mode=ExamMode.BOOKMARKED)
    state.answers[0] = [False, True, False, False]
    state.fill_ins[2] = "paris"
    state.orders[3] = [2, 1, 0]
    state.intervals[0] = 17
    return state


def test_marked_is_normalized(attempt):
    assert attempt.marked == [1, 3]


def test_capture_then_restore_round_trip(attempt, mixed_exam, mc_exam):
    record = capture(attempt, mixed_exam)
    restored, exam = restore(record, [mc_exam, mixed_exam])

    assert exam is mixed_exam
    assert restored == attempt
    assert restored.time == 420
    assert restored.question == 2
    assert restored.marked == [1, 3]


def test_capture_is_isolated_from_later_mutation(attempt, mixed_exam):
    record = capture(attempt, mixed_exam)
    attempt.answers[0][0] = True
    attempt.fill_ins[2] = "changed"
    attempt.orders[3].append(9)
    attempt.marked.append(0)
    attempt.intervals[0] = 99

    assert record.answers[0] == [False, True, False, False]
    assert record.fill_ins[2] == "paris"
    assert record.orders[3] == [2, 1, 0]
    assert record.marked == [1, 3]
    assert record.intervals[0] == 17


def test_restored_state_shares_nothing_with_record(attempt, mixed_exam):
    record = capture(attempt, mixed_exam)
    restored, _ = restore(record, [mixed_exam])
    restored.answers[1][0] = True
    restored.marked.append(0)
    assert record.answers[1] == [False, False, False]
    assert record.marked == [1, 3]


def test_restore_missing_exam(attempt, mixed_exam, mc_exam):
    record = capture(attempt, mixed_exam)
    with pytest.raises(SourceExamMissingError) as exc_info:
        restore(record, [mc_exam])
    assert exc_info.value.filename == "mixed"


def test_restore_refuses_record_shorter_than_exam(mc_exam):
    answers, fill_ins, orders, intervals = build_attempt_containers(mc_exam)
    state = AttemptState(answers=answers, fill_ins=fill_ins, orders=orders,
                         intervals=intervals, time=120, question=2, marked=[2])
    record = capture(state, mc_exam)

    grown = make_exam("three-mc", [mc(f"q{i}", 0) for i in range(4)])
    with pytest.raises(SessionExamMismatchError) as exc_info:
        restore(record, [grown])
    assert exc_info.value.filename == "three-mc"


def test_restore_refuses_changed_choice_count(mc_exam):
    answers, fill_ins, orders, intervals = build_attempt_containers(mc_exam)
    state = AttemptState(answers=answers, fill_ins=fill_ins, orders=orders,
                         intervals=intervals, time=120)
    record = capture(state, mc_exam)

    reshaped = make_exam("three-mc", [mc("q0", 0, n=4), mc("q1", 1), mc("q2", 2)])
    with pytest.raises(SessionExamMismatchError):
        restore(record, [reshaped])


def test_restore_drops_empty_bookmark_mode(mc_exam):
    answers, fill_ins, orders, intervals = build_attempt_containers(mc_exam)
    state = AttemptState(answers=answers, fill_ins=fill_ins, orders=orders,
                         intervals=intervals, time=120, exam_mode=ExamMode.BOOKMARKED)
    restored, _ = restore(capture(state, mc_exam), [mc_exam])
    assert restored.exam_mode == ExamMode.ALL
