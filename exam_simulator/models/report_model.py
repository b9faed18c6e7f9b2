"""
models/report_model.py

채점 결과(Report) 모델. 완료된 시험 한 건당 하나 생성되며, 이력(history)에
그대로 저장된다. 원본 시험은 포함하지 않고 filename 으로만 연결한다.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, model_validator

from config import DEFAULT_PASS_SCORE


class Report(BaseModel):
    model_config = {"frozen": True}

    filename: str = Field(..., min_length=1, description="원본 시험 파일명")
    title: str = Field(default="", description="시험 제목")
    code: str = Field(default="", description="시험 코드")
    date: datetime = Field(default_factory=datetime.now, description="응시 완료 시각")
    test_length: int = Field(..., ge=0, description="문제 수")
    correct: List[bool] = Field(default_factory=list, description="문제별 정답 여부")
    incorrect: List[int] = Field(default_factory=list, description="오답 인덱스 (오름차순)")
    incomplete: List[int] = Field(default_factory=list, description="미응답 인덱스 (오름차순)")
    score: float = Field(default=0.0, ge=0, le=100, description="100점 만점 환산 점수")
    pass_score: float = Field(default=DEFAULT_PASS_SCORE, description="합격 기준 점수")
    passed: bool = Field(default=False, description="합격 여부")
    elapsed: int = Field(default=0, ge=0, description="총 소요 시간 (초)")
    time: int = Field(default=0, ge=0, description="종료 시점 남은 시간 (초)")
    intervals: List[int] = Field(default_factory=list, description="문제별 소요 시간 (초)")
    answers: List[List[bool]] = Field(default_factory=list)
    fill_ins: List[str] = Field(default_factory=list)
    orders: List[List[int]] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_partition(self) -> 'Report':
        """
        정답/오답/미응답은 [0, test_length) 를 정확히 나눈다.
        """
        incorrect = set(self.incorrect)
        incomplete = set(self.incomplete)
        if incorrect & incomplete:
            raise ValueError("오답과 미응답 인덱스가 겹칩니다.")
        if any(not 0 <= i < self.test_length for i in incorrect | incomplete):
            raise ValueError("오답/미응답 인덱스가 문제 범위를 벗어났습니다.")
        if len(self.correct) != self.test_length:
            raise ValueError("correct 길이가 문제 수와 다릅니다.")
        for i, ok in enumerate(self.correct):
            if ok and (i in incorrect or i in incomplete):
                raise ValueError(f"{i}번 문제가 정답과 오답/미응답에 동시에 포함되어 있습니다.")
            if not ok and i not in incorrect and i not in incomplete:
                raise ValueError(f"{i}번 문제가 어느 분류에도 속하지 않습니다.")
        return self

