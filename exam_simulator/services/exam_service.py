"""
services/exam_service.py

문제별 정답 판정 및 시험 채점(리포트 생성) 비즈니스 로직.
순수 Python 함수로 구성 — UI 코드, 전역 상태 변경 없음.
"""

from datetime import datetime
from typing import List, Optional, Sequence

from config import DEFAULT_PASS_SCORE
from exam_simulator.models.question_model import (
    CHOICE_TYPES, ExamDefinition, Question, QuestionType,
)
from exam_simulator.models.report_model import Report
from exam_simulator.models.session_state import AttemptState


# ── 문제별 판정 ──────────────────────────────────────────────────────────────

def select_single(question: Question, choice: int) -> Optional[List[bool]]:
    """
    단일 선택: 고른 보기 하나만 True 인 새 슬롯을 반환한다.
    보기 범위를 벗어나면 None.
    """
    if not 0 <= choice < len(question.choices):
        return None
    return [i == choice for i in range(len(question.choices))]


def check_fill_in(question: Question, text: str) -> bool:
    """주관식: 앞뒤 공백 제거 후 대소문자 구분 없이 허용 정답과 비교."""
    return text.strip().lower() in question.accepted_answers()


def check_order(question: Question, order: Sequence[int]) -> Optional[bool]:
    """
    순서 배열: 제출한 순서가 [0, 1, 2, ...] 와 같으면 정답.
    보기 인덱스의 순열이 아니면 None (잘못된 제출).
    """
    n = len(question.choices)
    if len(order) != n or sorted(order) != list(range(n)):
        return None
    return list(order) == list(range(n))


def is_incomplete(question: Question, answer: Sequence[bool], fill_in: str, order: Sequence[int]) -> bool:
    """
    미응답 판정 — 슬롯이 초기 상태 그대로인지.
    객관식: 전부 False / 주관식: 빈 문자열 / 순서 배열: 빈 순서
    """
    if question.type in CHOICE_TYPES:
        return not any(answer)
    if question.type == QuestionType.FILL_IN:
        return not fill_in.strip()
    return not order


def is_correct(question: Question, answer: Sequence[bool]) -> bool:
    """
    정답 판정 (부분 점수 없음).
    객관식(단일/복수)은 선택 배열이 정답 플래그 배열과 정확히 같아야 한다.
    주관식/순서 배열은 답안 입력 시 판정해 둔 [bool] 을 그대로 쓴다.
    """
    if question.type in CHOICE_TYPES:
        return list(answer) == [c.correct for c in question.choices]
    return bool(answer) and bool(answer[0])


# ── 집계 ────────────────────────────────────────────────────────────────────

def calculate_score(correct_count: int, total: int) -> float:
    """
    100점 만점 환산 점수 (소수점 둘째 자리 반올림).
    문제가 없으면 0.0.
    """
    if not total:
        return 0.0
    return round(correct_count / total * 100, 2)


def is_passed(score: float, pass_score: float = DEFAULT_PASS_SCORE) -> bool:
    """score >= pass_score 이면 합격."""
    return score >= pass_score


def _at(seq: Sequence, i: int, default):
    return seq[i] if 0 <= i < len(seq) else default


def analyze_answers(
    exam: ExamDefinition,
    state: AttemptState,
    date: Optional[datetime] = None,
) -> Report:
    """
    시험 종료 시 전체 답안을 채점하여 Report 를 만든다.

    - 미응답: 슬롯이 초기 상태 그대로인 문제
    - 오답:   응답했지만 정답 판정이 False 인 문제
    - 나머지는 정답
    - 소요 시간: intervals 합계 (제한 시간으로 상한)

    예외를 던지지 않는다. 슬롯이 부족하거나 비어 있으면 해당 문제는 미응답.
    """
    correct: List[bool] = []
    incorrect: List[int] = []
    incomplete: List[int] = []

    for i, q in enumerate(exam.test):
        answer = _at(state.answers, i, [])
        fill_in = _at(state.fill_ins, i, "")
        order = _at(state.orders, i, [])
        if is_incomplete(q, answer, fill_in, order):
            incomplete.append(i)
            correct.append(False)
        elif is_correct(q, answer):
            correct.append(True)
        else:
            incorrect.append(i)
            correct.append(False)

    test_length = len(exam.test)
    correct_count = sum(1 for ok in correct if ok)
    score = calculate_score(correct_count, test_length)
    elapsed = min(sum(state.intervals), exam.time * 60)

    return Report(
        filename=exam.filename,
        title=exam.title,
        code=exam.code,
        date=date or datetime.now(),
        test_length=test_length,
        correct=correct,
        incorrect=incorrect,
        incomplete=incomplete,
        score=score,
        pass_score=exam.pass_score,
        passed=is_passed(score, exam.pass_score),
        elapsed=elapsed,
        time=state.time,
        intervals=list(state.intervals),
        answers=[list(a) for a in state.answers],
        fill_ins=list(state.fill_ins),
        orders=[list(o) for o in state.orders],
    )
