"""
services/question_set.py

시험 시작 시 문제별 답안 컨테이너를 만든다.
순수 함수 — 상태 없음.
"""

from typing import List, Tuple

from exam_simulator.models.question_model import CHOICE_TYPES, ExamDefinition


def build_attempt_containers(
    exam: ExamDefinition,
) -> Tuple[List[List[bool]], List[str], List[List[int]], List[int]]:
    """
    시험 정의 → (answers, fill_ins, orders, intervals).

    - answers[i]:   객관식은 보기 수만큼의 False, 주관식/순서 배열은 [False]
    - fill_ins[i]:  빈 문자열
    - orders[i]:    빈 리스트
    - intervals[i]: 0

    슬롯마다 별도의 리스트 객체를 만든다 (한 슬롯 수정이 다른 슬롯에 번지지 않음).
    문제가 없는 시험이면 빈 리스트 4개를 반환한다.
    """
    answers: List[List[bool]] = []
    for q in exam.test:
        if q.type in CHOICE_TYPES:
            answers.append([False] * len(q.choices))
        else:
            answers.append([False])

    n = len(exam.test)
    fill_ins = ["" for _ in range(n)]
    orders: List[List[int]] = [[] for _ in range(n)]
    intervals = [0 for _ in range(n)]
    return answers, fill_ins, orders, intervals
