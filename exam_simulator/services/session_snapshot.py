"""
services/session_snapshot.py

진행 중인 시험을 세션 레코드로 저장(capture)하고 다시 불러오기(restore).
"""

from typing import List, Optional, Tuple

from exam_simulator.models.question_model import CHOICE_TYPES, ExamDefinition
from exam_simulator.models.session_state import AttemptState, ExamMode, SessionRecord
from exam_simulator.services.errors import SessionExamMismatchError, SourceExamMissingError


def capture(state: AttemptState, exam: ExamDefinition) -> SessionRecord:
    """
    AttemptState → SessionRecord.
    모든 가변 시퀀스를 깊은 복사하므로 이후 메모리 상태 변경이 레코드에 반영되지 않는다.
    """
    return SessionRecord(
        filename=exam.filename,
        title=exam.title,
        **state.model_copy(deep=True).model_dump(),
    )


def find_exam(exams: List[ExamDefinition], filename: str) -> ExamDefinition:
    """filename 으로 시험 검색. 없으면 SourceExamMissingError."""
    for exam in exams:
        if exam.filename == filename:
            return exam
    raise SourceExamMissingError(filename)


def _shape_mismatch(state: AttemptState, exam: ExamDefinition) -> Optional[str]:
    """답안 슬롯이 시험 구성과 어긋나면 그 이유, 맞으면 None."""
    n = len(exam.test)
    if state.test_length != n:
        return f"문제 수가 다릅니다 (세션 {state.test_length}, 시험 {n})"
    for i, q in enumerate(exam.test):
        expected = len(q.choices) if q.type in CHOICE_TYPES else 1
        if len(state.answers[i]) != expected:
            return f"{i}번 문제의 답안 슬롯 크기가 다릅니다"
    if n and state.question >= n:
        return f"현재 문제 인덱스({state.question})가 범위를 벗어났습니다"
    if any(not 0 <= m < n for m in state.marked):
        return "북마크 인덱스가 범위를 벗어났습니다"
    return None


def restore(record: SessionRecord, exams: List[ExamDefinition]) -> Tuple[AttemptState, ExamDefinition]:
    """
    SessionRecord → (AttemptState, 원본 시험).

    Raises:
        SourceExamMissingError:   원본 시험이 카탈로그에 없음 (삭제된 경우 등).
        SessionExamMismatchError: 세션의 답안 슬롯이 시험 구성과 다름.
    """
    exam = find_exam(exams, record.filename)
    data = record.model_copy(deep=True).model_dump(include=set(AttemptState.model_fields))
    state = AttemptState.model_validate(data)

    reason = _shape_mismatch(state, exam)
    if reason is not None:
        raise SessionExamMismatchError(exam.filename, reason)
    if state.exam_mode == ExamMode.BOOKMARKED and not state.marked:
        state.exam_mode = ExamMode.ALL
    return state, exam
