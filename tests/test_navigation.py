import pytest

from exam_simulator.services.navigation import NO_MOVE, Direction, navigate, target_index


@pytest.mark.parametrize("current, direction, expected", [
    (5, Direction.NEXT, 7),
    (7, Direction.NEXT, NO_MOVE),
    (2, Direction.PREV, NO_MOVE),
    (5, Direction.PREV, 2),
    (5, Direction.FIRST, 2),
    (2, Direction.LAST, 7),
])
def test_navigate_within_subset(current, direction, expected):
    assert navigate([2, 5, 7], current, direction) == expected


def test_current_outside_subset():
    # 현재 문제가 부분집합에 없어도 앞뒤 원소를 찾는다
    assert navigate([2, 5, 7], 4, Direction.NEXT) == 5
    assert navigate([2, 5, 7], 4, Direction.PREV) == 2
    assert navigate([2, 5, 7], 9, Direction.NEXT) is NO_MOVE


def test_index_zero_is_a_real_move():
    assert navigate([0, 3], 3, Direction.PREV) == 0
    assert navigate([0, 3], 3, Direction.PREV) is not NO_MOVE


@pytest.mark.parametrize("direction", list(Direction))
def test_single_element_subset_never_moves(direction):
    assert navigate([4], 4, direction) is NO_MOVE


def test_target_index():
    assert target_index(Direction.FIRST, 3, 10) == 0
    assert target_index(Direction.PREV, 3, 10) == 2
    assert target_index(Direction.NEXT, 3, 10) == 4
    assert target_index(Direction.LAST, 3, 10) == 9
