"""
api/routes.py — FastAPI 엔드포인트

거부된 조작(현재 모드에서 불가, 범위 밖 이동 등)은 409,
원본 시험이 없는 세션/이력은 404, 시험과 맞지 않는 세션은 409, 가져오기 검증 실패는 422 (메시지 리스트).
"""

from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from exam_simulator.models.session_state import ExamMode
from exam_simulator.services.errors import SessionExamMismatchError, SourceExamMissingError
from exam_simulator.services.exam_controller import GRID, ExamSessionController, ReviewType
from exam_simulator.services.navigation import Direction

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class NavigateBody(BaseModel):
    index: int = 0
    source: Union[Literal["grid"], Direction] = GRID

class StepBody(BaseModel):
    direction: Direction

class ExamModeBody(BaseModel):
    exam_mode: ExamMode

class BookmarkBody(BaseModel):
    index: int
    add: bool = True

class MultipleChoiceBody(BaseModel):
    choice: int

class MultipleAnswerBody(BaseModel):
    selection: List[bool]

class FillInBody(BaseModel):
    text: str

class ListOrderBody(BaseModel):
    order: List[int]

class IntervalsBody(BaseModel):
    intervals: List[int]

class ReviewTypeBody(BaseModel):
    review_type: ReviewType

class ExplanationBody(BaseModel):
    explanation: Optional[str] = None

class ImportExamBody(BaseModel):
    filename: str
    exam: Dict[str, Any]


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _controller(request: Request) -> ExamSessionController:
    return request.app.state.controller


def _accepted(ok: bool, detail: str) -> dict:
    if not ok:
        raise HTTPException(status_code=409, detail=detail)
    return {"ok": True}


# ── 카탈로그 ─────────────────────────────────────────────────────────────────

@router.get("/api/state")
def get_state(request: Request):
    return _controller(request).snapshot()


@router.get("/api/exams")
def list_exams(request: Request):
    return [
        {
            "index": i,
            "filename": e.filename,
            "title": e.title,
            "code": e.code,
            "time": e.time,
            "question_count": len(e.test),
        }
        for i, e in enumerate(_controller(request).exams)
    ]


@router.post("/api/exams/import")
def import_exam(body: ImportExamBody, request: Request):
    result = _controller(request).import_remote_exam(body.filename, body.exam)
    if result is not True:
        raise HTTPException(status_code=422, detail=result)
    return {"ok": True}


@router.delete("/api/exams/{index}")
def delete_exam(index: int, request: Request):
    return _accepted(_controller(request).delete_exam(index), "삭제할 수 없는 시험입니다.")


@router.get("/api/history")
def list_history(request: Request):
    return [h.model_dump(mode="json") for h in _controller(request).history]


@router.delete("/api/history/{index}")
def delete_history(index: int, request: Request):
    return _accepted(_controller(request).delete_history(index), "이력을 삭제할 수 없습니다.")


@router.get("/api/sessions")
def list_sessions(request: Request):
    return [s.model_dump(mode="json") for s in _controller(request).sessions]


@router.delete("/api/sessions/{index}")
def delete_session(index: int, request: Request):
    return _accepted(_controller(request).delete_session(index), "세션을 삭제할 수 없습니다.")


# ── 시험 진행 ────────────────────────────────────────────────────────────────

@router.post("/api/exams/{index}/select")
def select_exam(index: int, request: Request):
    return _accepted(_controller(request).init_exam(index), "시험을 선택할 수 없습니다.")


@router.post("/api/exam/start")
def start_exam(request: Request):
    return _accepted(_controller(request).start_exam(), "시작할 시험이 없습니다.")


@router.post("/api/exam/cancel")
def cancel_exam(request: Request):
    return _accepted(_controller(request).cancel_exam(), "진행 중인 시험이 없습니다.")


@router.post("/api/exam/pause")
def pause_exam(request: Request):
    return _accepted(_controller(request).pause(), "타이머가 동작 중이 아닙니다.")


@router.post("/api/exam/resume")
def resume_exam(request: Request):
    return _accepted(_controller(request).resume(), "타이머를 다시 시작할 수 없습니다.")


@router.post("/api/exam/end")
def end_exam(request: Request):
    report = _controller(request).end_exam()
    if report is None:
        raise HTTPException(status_code=409, detail="진행 중인 시험이 없습니다.")
    return report.model_dump(mode="json")


@router.post("/api/exam/save-session")
def save_session(request: Request):
    record = _controller(request).save_session()
    if record is None:
        raise HTTPException(status_code=409, detail="진행 중인 시험이 없습니다.")
    return record.model_dump(mode="json")


@router.post("/api/exam/navigate")
def navigate(body: NavigateBody, request: Request):
    return _accepted(_controller(request).set_question(body.index, body.source), "이동할 수 없습니다.")


@router.post("/api/exam/step")
def step(body: StepBody, request: Request):
    return _accepted(_controller(request).step(body.direction), "이동할 수 없습니다.")


@router.post("/api/exam/mode")
def set_exam_mode(body: ExamModeBody, request: Request):
    return _accepted(_controller(request).set_exam_mode(body.exam_mode), "북마크한 문제가 없습니다.")


@router.post("/api/exam/bookmark")
def bookmark(body: BookmarkBody, request: Request):
    return _accepted(
        _controller(request).on_bookmark_question(body.index, body.add), "북마크할 수 없습니다."
    )


@router.post("/api/exam/explanation/toggle")
def toggle_explanation(request: Request):
    controller = _controller(request)
    _accepted(controller.toggle_explanation(), "시험 중이나 복습 중에만 해설을 볼 수 있습니다.")
    return {"ok": True, "explanation_visible": controller.explanation_visible}


@router.post("/api/exam/intervals")
def set_intervals(body: IntervalsBody, request: Request):
    return _accepted(_controller(request).set_intervals(body.intervals), "소요 시간을 갱신할 수 없습니다.")


@router.post("/api/exam/answer/multiple-choice")
def answer_multiple_choice(body: MultipleChoiceBody, request: Request):
    return _accepted(_controller(request).on_multiple_choice(body.choice), "답안을 저장할 수 없습니다.")


@router.post("/api/exam/answer/multiple-answer")
def answer_multiple_answer(body: MultipleAnswerBody, request: Request):
    return _accepted(_controller(request).on_multiple_answer(body.selection), "답안을 저장할 수 없습니다.")


@router.post("/api/exam/answer/fill-in")
def answer_fill_in(body: FillInBody, request: Request):
    return _accepted(_controller(request).on_fill_in(body.text), "답안을 저장할 수 없습니다.")


@router.post("/api/exam/answer/list-order")
def answer_list_order(body: ListOrderBody, request: Request):
    return _accepted(_controller(request).on_list_order(body.order), "답안을 저장할 수 없습니다.")


# ── 세션 / 복습 ──────────────────────────────────────────────────────────────

@router.post("/api/sessions/{index}/load")
def load_session(index: int, request: Request):
    try:
        ok = _controller(request).load_session(index)
    except SourceExamMissingError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SessionExamMismatchError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _accepted(ok, "세션을 불러올 수 없습니다.")


@router.post("/api/history/{index}/review")
def review_history(index: int, request: Request):
    try:
        ok = _controller(request).init_review(index)
    except SourceExamMissingError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _accepted(ok, "이력을 열 수 없습니다.")


@router.post("/api/review/type")
def set_review_type(body: ReviewTypeBody, request: Request):
    return _accepted(_controller(request).set_review_type(body.review_type), "해당하는 문제가 없습니다.")


@router.post("/api/review/navigate")
def review_navigate(body: NavigateBody, request: Request):
    return _accepted(
        _controller(request).set_review_question(body.index, body.source), "이동할 수 없습니다."
    )


@router.post("/api/review/step")
def review_step(body: StepBody, request: Request):
    return _accepted(_controller(request).step_review(body.direction), "이동할 수 없습니다.")


@router.put("/api/review/explanation")
def update_explanation(body: ExplanationBody, request: Request):
    return _accepted(
        _controller(request).update_explanation(body.explanation), "해설을 수정할 수 없습니다."
    )


@router.post("/api/review/close")
def close_review(request: Request):
    return _accepted(_controller(request).return_to_browsing(), "복습 중이 아닙니다.")
