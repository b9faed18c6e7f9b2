from exam_simulator.services.question_set import build_attempt_containers

from conftest import make_exam


def test_lengths_match_test_length(mixed_exam):
    answers, fill_ins, orders, intervals = build_attempt_containers(mixed_exam)
    n = len(mixed_exam.test)
    assert len(answers) == len(fill_ins) == len(orders) == len(intervals) == n


def test_slot_shapes_per_question_type(mixed_exam):
    answers, fill_ins, orders, intervals = build_attempt_containers(mixed_exam)
    assert answers[0] == [False] * 4
    assert answers[1] == [False] * 3
    assert answers[2] == [False]
    assert answers[3] == [False]
    assert fill_ins == ["", "", "", ""]
    assert orders == [[], [], [], []]
    assert intervals == [0, 0, 0, 0]


def test_slots_are_independent(mc_exam):
    answers, _, orders, _ = build_attempt_containers(mc_exam)
    answers[0][1] = True
    orders[0].append(2)
    assert answers[1] == [False, False, False]
    assert answers[2] == [False, False, False]
    assert orders[1] == [] and orders[2] == []


def test_zero_question_exam():
    assert build_attempt_containers(make_exam("empty")) == ([], [], [], [])
