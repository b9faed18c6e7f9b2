"""
models/question_model.py

시험 정의(ExamDefinition) 모델.
Pydantic v2 적용 — 불러온 뒤에는 읽기 전용이며, 문제별 해설(explanation)만
사용자가 복습 중에 수정할 수 있다.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from config import DEFAULT_PASS_SCORE


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    MULTIPLE_ANSWER = "multiple-answer"
    FILL_IN = "fill-in"
    LIST_ORDER = "list-order"


# 보기 배열 하나에 답을 담는 유형 (보기 수만큼의 bool 슬롯)
CHOICE_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.MULTIPLE_ANSWER)


class Choice(BaseModel):
    """보기 하나. 순서 배열 문제에서는 보기의 인덱스가 곧 정답 위치다."""

    model_config = {"frozen": True}

    text: str = Field(
        ...,
        min_length=1,
        description="보기 텍스트 (주관식 문제에서는 허용 정답 텍스트)"
    )
    correct: bool = Field(
        default=False,
        description="정답 여부"
    )


class Question(BaseModel):
    """
    문제 모델.
    explanation 을 제외한 모든 필드는 동결(frozen)되어 있다.
    """

    type: QuestionType = Field(
        ...,
        frozen=True,
        description="문제 유형"
    )
    question_text: str = Field(
        ...,
        min_length=1,
        frozen=True,
        description="발문/문제 내용"
    )
    choices: List[Choice] = Field(
        ...,
        frozen=True,
        description="보기 리스트"
    )
    explanation: Optional[str] = Field(
        None,
        description="해설 (복습 화면에서 사용자가 다시 쓸 수 있음)"
    )

    @model_validator(mode='after')
    def validate_choices(self) -> 'Question':
        """
        유형별 보기 검증.
        - 객관식(단일): 보기 2개 이상, 정답 정확히 1개
        - 객관식(복수): 보기 2개 이상, 정답 1개 이상
        - 주관식: 허용 정답 1개 이상
        - 순서 배열: 보기 2개 이상
        """
        n_correct = sum(1 for c in self.choices if c.correct)
        if self.type == QuestionType.FILL_IN:
            if not self.choices:
                raise ValueError("주관식 문제에는 허용 정답이 최소 1개 필요합니다.")
            return self
        if len(self.choices) < 2:
            raise ValueError("보기(choices)는 최소 2개 이상의 항목이 필요합니다.")
        if self.type == QuestionType.MULTIPLE_CHOICE and n_correct != 1:
            raise ValueError(f"단일 선택 문제의 정답은 정확히 1개여야 합니다 (현재 {n_correct}개).")
        if self.type == QuestionType.MULTIPLE_ANSWER and n_correct < 1:
            raise ValueError("복수 선택 문제에는 정답이 최소 1개 필요합니다.")
        return self

    def accepted_answers(self) -> List[str]:
        """주관식 허용 정답 (소문자 정규화)."""
        return [c.text.strip().lower() for c in self.choices]


class ExamDefinition(BaseModel):
    """
    시험 정의 모델.
    filename 이 고유 식별자이며 이력/세션 레코드는 filename 으로만 연결된다.
    """

    model_config = {"frozen": True}

    filename: str = Field(
        ...,
        min_length=1,
        description="시험 파일명 (확장자 제외, 고유 식별자)"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="시험 제목"
    )
    description: str = Field(
        default="",
        description="표지 화면 설명"
    )
    author: str = Field(
        default="",
        description="출제자"
    )
    code: str = Field(
        default="",
        description="시험 코드"
    )
    time: int = Field(
        ...,
        gt=0,
        description="제한 시간 (분)"
    )
    pass_score: float = Field(
        default=DEFAULT_PASS_SCORE,
        ge=0,
        le=100,
        description="합격 기준 점수 (100점 만점)"
    )
    test: List[Question] = Field(
        default_factory=list,
        description="문제 리스트 (순서 유지)"
    )

    @field_validator('filename')
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """파일명에 경로 구분자가 들어가면 안 된다."""
        if "/" in v or "\\" in v:
            raise ValueError(f"파일명('{v}')에 경로 구분자를 사용할 수 없습니다.")
        return v
