"""
models/session_state.py

시험 진행 상태를 담는 OMR 카드 모델과, 중단된 시험을 저장하는 세션 레코드.
Pydantic BaseModel 기반 — 직렬화/역직렬화 및 타입 안전성 확보.
UI 코드 없음.
"""

from datetime import datetime
from enum import IntEnum
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator


class ExamMode(IntEnum):
    ALL = 0          # 전체 문제
    BOOKMARKED = 1   # 북마크한 문제만


class AttemptState(BaseModel):
    """
    진행 중인 시험 한 건의 상태.

    Attributes:
        answers:   문제별 답안 슬롯. 객관식은 보기 수만큼의 bool,
                   주관식/순서 배열은 정답 여부 [bool] 한 칸.
        fill_ins:  주관식 입력 문자열 (문제 인덱스 정렬).
        orders:    순서 배열 문제에 제출한 순서 (문제 인덱스 정렬).
        marked:    북마크한 문제 인덱스 (오름차순, 중복 없음).
        intervals: 문제별 소요 시간 (초).
        time:      남은 시간 (초).
        question:  현재 문제 인덱스 (0-based).
        exam_mode: 전체 / 북마크 모드.
    """

    answers: List[List[bool]] = Field(default_factory=list)
    fill_ins: List[str] = Field(default_factory=list)
    orders: List[List[int]] = Field(default_factory=list)
    marked: List[int] = Field(default_factory=list)
    intervals: List[int] = Field(default_factory=list)
    time: int = Field(default=0, ge=0, description="남은 시간 (초)")
    question: int = Field(default=0, ge=0, description="현재 문제 인덱스")
    exam_mode: ExamMode = Field(default=ExamMode.ALL)

    @field_validator('marked')
    @classmethod
    def normalize_marked(cls, v: List[int]) -> List[int]:
        """북마크는 항상 오름차순, 중복 없음."""
        return sorted(set(v))

    @model_validator(mode='after')
    def validate_parallel_lengths(self) -> 'AttemptState':
        n = len(self.answers)
        if not (len(self.fill_ins) == len(self.orders) == len(self.intervals) == n):
            raise ValueError(
                "answers/fill_ins/orders/intervals 길이가 서로 다릅니다 "
                f"({n}/{len(self.fill_ins)}/{len(self.orders)}/{len(self.intervals)})."
            )
        return self

    @property
    def test_length(self) -> int:
        return len(self.answers)


class SessionRecord(AttemptState):
    """
    중단(저장)된 시험 세션.
    filename 으로 원본 시험과 연결되며, 이어 풀기 시 자동 삭제되지 않는다.
    """

    filename: str = Field(..., min_length=1, description="원본 시험 파일명")
    title: str = Field(default="", description="시험 제목 (목록 표시용)")
    date: datetime = Field(default_factory=datetime.now, description="저장 시각")
