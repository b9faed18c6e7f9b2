"""
services/navigation.py

필터링된 문제 부분집합(북마크/오답/미응답) 안에서의 이동 계산.
세 가지 필터 모두 같은 알고리즘을 쓴다.
"""

from bisect import bisect_left, bisect_right
from enum import IntEnum
from typing import Optional, Sequence


class Direction(IntEnum):
    FIRST = 0
    PREV = 1
    NEXT = 2
    LAST = 3


# 이동 없음. 인덱스 0 과 구분하기 위해 None 을 쓴다.
NO_MOVE = None


def navigate(subset: Sequence[int], current: int, direction: Direction) -> Optional[int]:
    """
    오름차순 인덱스 부분집합 안에서 다음 위치를 반환한다.

    Args:
        subset:    오름차순 문제 인덱스 (비어 있으면 안 됨).
        current:   현재 문제 인덱스.
        direction: FIRST / PREV / NEXT / LAST.

    Returns:
        이동할 인덱스. 움직일 수 없으면 NO_MOVE.
        부분집합 원소가 하나뿐이면 어느 방향이든 NO_MOVE.
    """
    if len(subset) <= 1:
        return NO_MOVE

    if direction == Direction.FIRST:
        return subset[0]
    if direction == Direction.LAST:
        return subset[-1]
    if direction == Direction.PREV:
        pos = bisect_left(subset, current)
        return subset[pos - 1] if pos > 0 else NO_MOVE
    if direction == Direction.NEXT:
        pos = bisect_right(subset, current)
        return subset[pos] if pos < len(subset) else NO_MOVE
    return NO_MOVE


def target_index(direction: Direction, current: int, total: int) -> int:
    """방향 버튼 → 전체 문제 기준 목표 인덱스 (처음/이전/다음/끝)."""
    if direction == Direction.FIRST:
        return 0
    if direction == Direction.PREV:
        return current - 1
    if direction == Direction.NEXT:
        return current + 1
    return total - 1
