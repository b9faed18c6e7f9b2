"""
services/exam_controller.py

시험 세션/복습 상태 머신.

모드 전이:
  BROWSING ──init_exam──▶ COVER ──start_exam──▶ IN_PROGRESS ──end_exam──▶ REVIEWING
  BROWSING ◀──save_session── IN_PROGRESS        BROWSING ──load_session──▶ IN_PROGRESS
  BROWSING ──init_review──▶ REVIEWING ──return_to_browsing──▶ BROWSING

상태 관리:
  - 모든 공개 메서드는 하나의 RLock 으로 직렬화된다 (타이머 스레드 포함).
  - 현재 모드에서 허용되지 않는 조작, 범위를 벗어난 이동은 False 를 반환하고 상태를 바꾸지 않는다.
  - 세션/이력이 가리키는 시험이 없으면 SourceExamMissingError,
    세션 답안 슬롯이 시험과 맞지 않으면 SessionExamMismatchError.
  - 저장 실패는 로그만 남기고 메모리 상태는 되돌리지 않는다.
"""

import logging
import threading
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from exam_simulator.models.question_model import ExamDefinition, QuestionType
from exam_simulator.models.report_model import Report
from exam_simulator.models.session_state import AttemptState, ExamMode, SessionRecord
from exam_simulator.services import session_snapshot
from exam_simulator.services.exam_service import (
    analyze_answers, check_fill_in, check_order, select_single,
)
from exam_simulator.services.navigation import NO_MOVE, Direction, navigate, target_index
from exam_simulator.services.question_set import build_attempt_containers
from exam_simulator.services.state_machine import Mode, ModeMachine
from exam_simulator.services.storage import KIND_EXAM, KIND_HISTORY, KIND_SESSION, ExamStore
from exam_simulator.services.timer import CountdownTimer

logger = logging.getLogger(__name__)

# 문제 번호 그리드에서 직접 선택 (필터 무시)
GRID = "grid"


class ReviewType(IntEnum):
    ALL = 0
    INCORRECT = 1
    INCOMPLETE = 2


def _as_direction(source) -> Optional[Direction]:
    try:
        return Direction(source)
    except ValueError:
        return None


class ExamSessionController:
    def __init__(
        self,
        store: ExamStore,
        timer_factory: Callable[[Callable[[], bool]], Any] = CountdownTimer,
    ):
        self.store = store
        self._timer_factory = timer_factory
        self._timer = None
        self._timer_generation = 0
        self._lock = threading.RLock()
        self._machine = ModeMachine()

        self.exams: List[ExamDefinition] = []
        self.history: List[Report] = []
        self.sessions: List[SessionRecord] = []

        self.exam: Optional[ExamDefinition] = None
        self.attempt: Optional[AttemptState] = None
        self.explanation_visible = False

        self.report: Optional[Report] = None
        self.review_type = ReviewType.ALL
        self.review_question = 0

    @property
    def mode(self) -> Mode:
        return self._machine.mode

    @property
    def timer_running(self) -> bool:
        return self._timer is not None

    # ══════════════════════════════════════════════════════════════════════════
    # 카탈로그
    # ══════════════════════════════════════════════════════════════════════════

    def load(self) -> None:
        """시험/이력/세션을 저장소에서 다시 읽는다."""
        with self._lock:
            self.exams = self.store.list_exams()
            self.history = self.store.list_history()
            self.sessions = self.store.list_sessions()
            logger.info(
                f"카탈로그 로드: 시험 {len(self.exams)}개, 이력 {len(self.history)}개, "
                f"세션 {len(self.sessions)}개"
            )

    def import_local_exam(self, path: str) -> Union[bool, List[str]]:
        return self._import(lambda: self.store.import_local_exam(path))

    def import_remote_exam(self, filename: str, document: Any) -> Union[bool, List[str]]:
        return self._import(lambda: self.store.import_remote_exam(filename, document))

    def _import(self, do_import: Callable[[], Union[bool, List[str]]]) -> Union[bool, List[str]]:
        with self._lock:
            if self.mode != Mode.BROWSING:
                return ["시험 목록 화면에서만 시험을 가져올 수 있습니다."]
            result = do_import()
            if result is True:
                self.exams = self.store.list_exams()
            else:
                logger.warning(f"시험 가져오기 실패: {result}")
            return result

    def delete_exam(self, index: int) -> bool:
        """시험 삭제 (데모 시험 제외). 성공하면 세 카탈로그를 모두 다시 읽는다."""
        with self._lock:
            if self.mode != Mode.BROWSING:
                return False
            try:
                success = self.store.delete_exam_file(self.exams, index, self.sessions, self.history)
            except OSError as e:
                logger.error(f"시험 삭제 실패: {e}")
                return False
            if success:
                self.load()
            return success

    def delete_history(self, index: int) -> bool:
        with self._lock:
            if self.mode != Mode.BROWSING or not 0 <= index < len(self.history):
                return False
            self.history = [h for i, h in enumerate(self.history) if i != index]
            self._persist(KIND_HISTORY, self.history)
            return True

    def delete_session(self, index: int) -> bool:
        with self._lock:
            if self.mode != Mode.BROWSING or not 0 <= index < len(self.sessions):
                return False
            self.sessions = [s for i, s in enumerate(self.sessions) if i != index]
            self._persist(KIND_SESSION, self.sessions)
            return True

    # ══════════════════════════════════════════════════════════════════════════
    # 시험 시작 / 종료 / 중단
    # ══════════════════════════════════════════════════════════════════════════

    def init_exam(self, index: int) -> bool:
        """시험 선택 → 표지 화면. 답안 컨테이너를 새로 만든다."""
        with self._lock:
            if not 0 <= index < len(self.exams) or not self._machine.can_transition(Mode.COVER):
                return False
            exam = self.exams[index]
            answers, fill_ins, orders, intervals = build_attempt_containers(exam)
            self.exam = exam
            self.attempt = AttemptState(
                answers=answers,
                fill_ins=fill_ins,
                orders=orders,
                intervals=intervals,
                marked=[],
                time=exam.time * 60,
                question=0,
            )
            self.explanation_visible = False
            self._enter(Mode.COVER)
            return True

    def start_exam(self) -> bool:
        """표지 → 시험 진행. 타이머 시작."""
        with self._lock:
            if self.mode != Mode.COVER:
                return False
            self._enter(Mode.IN_PROGRESS)
            self._start_timer()
            logger.info(f"시험 시작: {self.exam.filename}")
            return True

    def cancel_exam(self) -> bool:
        """표지/진행 중 시험을 리포트 없이 버리고 목록으로."""
        with self._lock:
            if self.mode not in (Mode.COVER, Mode.IN_PROGRESS):
                return False
            self._stop_timer()
            self._clear_exam_context()
            self._enter(Mode.BROWSING)
            return True

    def end_exam(self) -> Optional[Report]:
        """시험 종료: 타이머 정지, 채점, 이력 추가·저장, 복습 모드 진입."""
        with self._lock:
            if self.mode != Mode.IN_PROGRESS:
                return None
            self._stop_timer()
            report = analyze_answers(self.exam, self.attempt)
            self.history.append(report)
            self._persist(KIND_HISTORY, self.history)

            self.attempt = None
            self.explanation_visible = False
            self.report = report
            self.review_type = ReviewType.ALL
            self.review_question = 0
            self._enter(Mode.REVIEWING)
            logger.info(
                f"시험 종료: {report.filename} — {report.score}점 "
                f"(오답 {len(report.incorrect)}, 미응답 {len(report.incomplete)})"
            )
            return report

    def save_session(self) -> Optional[SessionRecord]:
        """시험 중단: 진행 상태를 세션으로 저장하고 목록으로."""
        with self._lock:
            if self.mode != Mode.IN_PROGRESS:
                return None
            self._stop_timer()
            record = session_snapshot.capture(self.attempt, self.exam)
            self.sessions.append(record)
            self._persist(KIND_SESSION, self.sessions)
            self._clear_exam_context()
            self._enter(Mode.BROWSING)
            logger.info(f"세션 저장: {record.filename} (문제 {record.question}, 남은 시간 {record.time}초)")
            return record

    def load_session(self, index: int) -> bool:
        """
        저장된 세션 이어 풀기. 세션 레코드는 삭제하지 않는다.

        Raises:
            SourceExamMissingError: 원본 시험이 없음.
            SessionExamMismatchError: 세션 답안 슬롯이 시험 구성과 다름.
        """
        with self._lock:
            if self.mode != Mode.BROWSING or not 0 <= index < len(self.sessions):
                return False
            attempt, exam = session_snapshot.restore(self.sessions[index], self.exams)
            self.exam = exam
            self.attempt = attempt
            self.explanation_visible = False
            self._enter(Mode.IN_PROGRESS)
            self._start_timer()
            return True

    def close(self) -> None:
        """종료 시 타이머 정리."""
        with self._lock:
            self._stop_timer()

    def _clear_exam_context(self) -> None:
        self.exam = None
        self.attempt = None
        self.explanation_visible = False

    def _enter(self, target: Mode) -> None:
        previous = self._machine.transition(target)
        logger.debug(f"모드 전이: {previous.name} → {target.name}")

    # ══════════════════════════════════════════════════════════════════════════
    # 타이머
    # ══════════════════════════════════════════════════════════════════════════

    def pause(self) -> bool:
        with self._lock:
            if self.mode != Mode.IN_PROGRESS or self._timer is None:
                return False
            self._stop_timer()
            return True

    def resume(self) -> bool:
        with self._lock:
            if self.mode != Mode.IN_PROGRESS or self._timer is not None or self.attempt.time <= 0:
                return False
            self._start_timer()
            return True

    def tick(self, generation: Optional[int] = None) -> bool:
        """
        1초 경과 처리. 남은 시간을 줄이고 현재 문제 소요 시간을 늘린다.
        0초가 되면 타이머만 멈추고 자동 제출하지 않는다.

        Returns:
            타이머가 계속 돌아야 하면 True.
        """
        with self._lock:
            if generation is not None and generation != self._timer_generation:
                return False
            if self.mode != Mode.IN_PROGRESS or self.attempt is None:
                return False
            attempt = self.attempt
            if attempt.time <= 0:
                self._stop_timer()
                return False
            attempt.time -= 1
            if 0 <= attempt.question < len(attempt.intervals):
                attempt.intervals[attempt.question] += 1
            if attempt.time == 0:
                logger.info("시험 시간이 종료되었습니다.")
                self._stop_timer()
                return False
            return True

    def set_intervals(self, intervals: Sequence[int]) -> bool:
        """프론트엔드가 측정한 문제별 소요 시간으로 교체."""
        with self._lock:
            if self.mode != Mode.IN_PROGRESS or len(intervals) != self.attempt.test_length:
                return False
            if any(v < 0 for v in intervals):
                return False
            self.attempt.intervals = list(intervals)
            return True

    def _start_timer(self) -> None:
        self._stop_timer()
        generation = self._timer_generation
        self._timer = self._timer_factory(lambda: self.tick(generation))
        self._timer.start()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        # 이전 타이머에서 늦게 도착한 틱은 무시된다
        self._timer_generation += 1

    # ══════════════════════════════════════════════════════════════════════════
    # 시험 중 이동 / 북마크
    # ══════════════════════════════════════════════════════════════════════════

    def set_question(self, index: int, source: Union[str, Direction]) -> bool:
        """
        문제 이동.

        Args:
            index:  목표 인덱스 (방향 버튼이면 현재 기준으로 계산된 값).
            source: GRID (직접 선택, 필터 무시) 또는 Direction.
        """
        with self._lock:
            if self.mode != Mode.IN_PROGRESS:
                return False
            attempt = self.attempt
            total = len(self.exam.test)
            if not 0 <= index < total:
                return False
            if source == GRID or attempt.exam_mode == ExamMode.ALL:
                attempt.question = index
                self.explanation_visible = False
                return True

            direction = _as_direction(source)
            if direction is None:
                return False
            new_question = navigate(attempt.marked, attempt.question, direction)
            if new_question is NO_MOVE:
                return False
            attempt.question = new_question
            self.explanation_visible = False
            return True

    def step(self, direction: Direction) -> bool:
        """처음/이전/다음/끝 버튼."""
        with self._lock:
            if self.mode != Mode.IN_PROGRESS:
                return False
            index = target_index(direction, self.attempt.question, len(self.exam.test))
            return self.set_question(index, direction)

    def set_exam_mode(self, exam_mode: ExamMode) -> bool:
        """전체/북마크 모드 전환. 북마크가 없으면 북마크 모드로 갈 수 없다."""
        with self._lock:
            if self.mode != Mode.IN_PROGRESS:
                return False
            attempt = self.attempt
            if exam_mode == ExamMode.BOOKMARKED:
                if not attempt.marked:
                    return False
                attempt.question = attempt.marked[0]
                self.explanation_visible = False
            attempt.exam_mode = ExamMode(exam_mode)
            return True

    def on_bookmark_question(self, index: int, add: bool) -> bool:
        with self._lock:
            if self.mode != Mode.IN_PROGRESS or not 0 <= index < len(self.exam.test):
                return False
            attempt = self.attempt
            if add:
                attempt.marked = sorted(set(attempt.marked) | {index})
                return True

            attempt.marked = [m for m in attempt.marked if m != index]
            if attempt.exam_mode == ExamMode.BOOKMARKED:
                if not attempt.marked:
                    attempt.exam_mode = ExamMode.ALL
                elif attempt.question == index:
                    attempt.question = attempt.marked[0]
            return True

    def toggle_explanation(self) -> bool:
        """해설 보이기/숨기기. 시험 중이나 복습 중이 아니면 거부."""
        with self._lock:
            if self.mode not in (Mode.IN_PROGRESS, Mode.REVIEWING):
                return False
            self.explanation_visible = not self.explanation_visible
            return True

    # ══════════════════════════════════════════════════════════════════════════
    # 답안 입력 (현재 문제 슬롯만 변경)
    # ══════════════════════════════════════════════════════════════════════════

    def _current_question(self, expected: QuestionType):
        if self.mode != Mode.IN_PROGRESS:
            return None
        q_idx = self.attempt.question
        if not 0 <= q_idx < len(self.exam.test):
            return None
        question = self.exam.test[q_idx]
        return question if question.type == expected else None

    def on_multiple_choice(self, choice: int) -> bool:
        with self._lock:
            question = self._current_question(QuestionType.MULTIPLE_CHOICE)
            if question is None:
                return False
            slot = select_single(question, choice)
            if slot is None:
                return False
            self.attempt.answers[self.attempt.question] = slot
            return True

    def on_multiple_answer(self, selection: Sequence[bool]) -> bool:
        with self._lock:
            question = self._current_question(QuestionType.MULTIPLE_ANSWER)
            if question is None or len(selection) != len(question.choices):
                return False
            self.attempt.answers[self.attempt.question] = [bool(s) for s in selection]
            return True

    def on_fill_in(self, text: str) -> bool:
        with self._lock:
            question = self._current_question(QuestionType.FILL_IN)
            if question is None:
                return False
            q_idx = self.attempt.question
            self.attempt.answers[q_idx] = [check_fill_in(question, text)]
            self.attempt.fill_ins[q_idx] = text
            return True

    def on_list_order(self, order: Sequence[int]) -> bool:
        with self._lock:
            question = self._current_question(QuestionType.LIST_ORDER)
            if question is None:
                return False
            result = check_order(question, order)
            if result is None:
                return False
            q_idx = self.attempt.question
            self.attempt.answers[q_idx] = [result]
            self.attempt.orders[q_idx] = list(order)
            return True

    # ══════════════════════════════════════════════════════════════════════════
    # 복습
    # ══════════════════════════════════════════════════════════════════════════

    def init_review(self, index: int) -> bool:
        """
        이력 복습 시작.

        Raises:
            SourceExamMissingError: 원본 시험이 없음.
        """
        with self._lock:
            if self.mode != Mode.BROWSING or not 0 <= index < len(self.history):
                return False
            report = self.history[index]
            self.exam = session_snapshot.find_exam(self.exams, report.filename)
            self.report = report
            self.review_type = ReviewType.ALL
            self.review_question = 0
            self.explanation_visible = False
            self._enter(Mode.REVIEWING)
            return True

    def return_to_browsing(self) -> bool:
        with self._lock:
            if self.mode != Mode.REVIEWING:
                return False
            self.report = None
            self.review_type = ReviewType.ALL
            self.review_question = 0
            self._clear_exam_context()
            self._enter(Mode.BROWSING)
            return True

    def _review_subset(self, review_type: ReviewType) -> List[int]:
        if review_type == ReviewType.INCORRECT:
            return self.report.incorrect
        if review_type == ReviewType.INCOMPLETE:
            return self.report.incomplete
        return list(range(self.report.test_length))

    def set_review_type(self, review_type: ReviewType) -> bool:
        """전체/오답/미응답 복습 전환. 해당 목록이 비어 있으면 거부."""
        with self._lock:
            if self.mode != Mode.REVIEWING:
                return False
            review_type = ReviewType(review_type)
            subset = self._review_subset(review_type)
            if review_type != ReviewType.ALL and not subset:
                return False
            self.review_type = review_type
            self.review_question = subset[0] if review_type != ReviewType.ALL else 0
            self.explanation_visible = False
            return True

    def set_review_question(self, index: int, source: Union[str, Direction]) -> bool:
        with self._lock:
            if self.mode != Mode.REVIEWING or not 0 <= index < self.report.test_length:
                return False
            if source == GRID or self.review_type == ReviewType.ALL:
                self.review_question = index
                self.explanation_visible = False
                return True

            subset = self._review_subset(self.review_type)
            direction = _as_direction(source)
            if direction is None:
                return False
            new_question = navigate(subset, self.review_question, direction)
            if new_question is NO_MOVE:
                return False
            self.review_question = new_question
            self.explanation_visible = False
            return True

    def step_review(self, direction: Direction) -> bool:
        with self._lock:
            if self.mode != Mode.REVIEWING:
                return False
            index = target_index(direction, self.review_question, self.report.test_length)
            return self.set_review_question(index, direction)

    def update_explanation(self, explanation: Optional[str]) -> bool:
        """
        복습 중인 문제의 해설을 다시 쓴다.
        시험 정의에서 유일하게 허용되는 수정이며, 카탈로그와 저장소에 함께 반영된다.
        """
        with self._lock:
            if self.mode != Mode.REVIEWING or self.exam is None:
                return False
            if not 0 <= self.review_question < len(self.exam.test):
                return False
            self.exam.test[self.review_question].explanation = explanation
            for i, exam in enumerate(self.exams):
                if exam.filename == self.exam.filename:
                    self.exams[i] = self.exam
            self._persist(KIND_EXAM, self.exam, self.exam.filename)
            return True

    # ══════════════════════════════════════════════════════════════════════════
    # 저장 / 조회
    # ══════════════════════════════════════════════════════════════════════════

    def _persist(self, kind: str, data: Any, key: Optional[str] = None) -> None:
        try:
            self.store.persist(kind, data, key)
        except (OSError, ValueError) as e:
            logger.error(f"저장 실패 ({kind}): {e}")

    def snapshot(self) -> Dict[str, Any]:
        """현재 상태를 JSON 직렬화 가능한 dict 로."""
        with self._lock:
            return {
                "mode": self.mode.name.lower(),
                "exam": self.exam.model_dump(mode="json") if self.exam else None,
                "attempt": self.attempt.model_dump(mode="json") if self.attempt else None,
                "timer_running": self.timer_running,
                "explanation_visible": self.explanation_visible,
                "report": self.report.model_dump(mode="json") if self.report else None,
                "review_type": self.review_type.name.lower(),
                "review_question": self.review_question,
            }
