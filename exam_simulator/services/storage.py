"""
services/storage.py

시험/이력/세션 JSON 파일 저장소.
Public API:
  - list_exams() / list_history() / list_sessions()      : 일괄 로드
  - persist(kind, data, key)                              : 이력·세션 목록 또는 시험 한 건 저장
  - delete_exam_file(exams, index, sessions, history)    : 시험 삭제 (데모 보호, 연관 레코드 정리)
  - import_local_exam(path) / import_remote_exam(name, doc) : 검증 후 가져오기 (True | 오류 메시지 리스트)

디렉토리 구조:
  DATA_DIR/
    exams/<filename>.json
    history.json
    sessions.json
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from config import (
    DATA_DIR, DEMO_EXAM_FILENAME, EXAMS_DIR_NAME, HISTORY_FILE_NAME, SESSIONS_FILE_NAME,
)
from exam_simulator.models.question_model import ExamDefinition
from exam_simulator.models.report_model import Report
from exam_simulator.models.session_state import SessionRecord
from exam_simulator.services.demo_exam import DEMO_EXAM

logger = logging.getLogger(__name__)

_HISTORY_ADAPTER = TypeAdapter(List[Report])
_SESSIONS_ADAPTER = TypeAdapter(List[SessionRecord])

KIND_HISTORY = "history"
KIND_SESSION = "session"
KIND_EXAM = "exam"


def format_validation_errors(exc: ValidationError) -> List[str]:
    """pydantic ValidationError → 사람이 읽을 수 있는 메시지 리스트."""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return messages


class ExamStore:
    def __init__(self, data_dir: str = DATA_DIR):
        self.data_dir = data_dir
        self.exams_dir = os.path.join(data_dir, EXAMS_DIR_NAME)
        self.history_path = os.path.join(data_dir, HISTORY_FILE_NAME)
        self.sessions_path = os.path.join(data_dir, SESSIONS_FILE_NAME)
        # 로드 시 검증에 실패한 원본 레코드 (경로별). 저장할 때 뒤에 그대로 붙인다.
        self._rejected: Dict[str, List[Any]] = {}

    # ── 초기화 ───────────────────────────────────────────────────────────────

    def ensure_data_dir(self) -> None:
        """최초 실행 시 디렉토리, 빈 이력/세션 파일, 데모 시험을 만든다."""
        os.makedirs(self.exams_dir, exist_ok=True)
        for path in (self.history_path, self.sessions_path):
            if not os.path.exists(path):
                self._write_json(path, [])
        demo_path = self._exam_path(DEMO_EXAM_FILENAME)
        if not os.path.exists(demo_path):
            self._write_json(demo_path, DEMO_EXAM)
            logger.info(f"데모 시험 생성: {demo_path}")

    # ── 로드 ─────────────────────────────────────────────────────────────────

    def list_exams(self) -> List[ExamDefinition]:
        """시험 디렉토리의 JSON 을 모두 읽는다. 깨진 파일은 로그만 남기고 건너뛴다."""
        if not os.path.isdir(self.exams_dir):
            return []
        exams: List[ExamDefinition] = []
        for name in sorted(os.listdir(self.exams_dir)):
            if not name.endswith(".json"):
                continue
            filename = name[: -len(".json")]
            try:
                doc = self._read_json(os.path.join(self.exams_dir, name))
                exams.append(ExamDefinition.model_validate({**doc, "filename": filename}))
            except (OSError, ValueError) as e:
                logger.error(f"시험 파일 로드 실패 ({name}): {e}")
        return exams

    def list_history(self) -> List[Report]:
        return self._load_list(self.history_path, Report)

    def list_sessions(self) -> List[SessionRecord]:
        return self._load_list(self.sessions_path, SessionRecord)

    # ── 저장 ─────────────────────────────────────────────────────────────────

    def persist(self, kind: str, data: Any, key: Optional[str] = None) -> None:
        """
        kind 별 저장.
          - "history": List[Report] 전체 덮어쓰기 (로드 때 거부된 레코드는 뒤에 보존)
          - "session": List[SessionRecord] 전체 덮어쓰기 (동일)
          - "exam":    ExamDefinition 한 건 (key = filename)
        실패 시 OSError 를 그대로 올린다 (호출자가 로그 처리).
        """
        if kind == KIND_HISTORY:
            self._write_list(self.history_path, _HISTORY_ADAPTER.dump_python(data, mode="json"))
        elif kind == KIND_SESSION:
            self._write_list(self.sessions_path, _SESSIONS_ADAPTER.dump_python(data, mode="json"))
        elif kind == KIND_EXAM:
            filename = key or data.filename
            self._write_json(self._exam_path(filename), data.model_dump(mode="json"))
        else:
            raise ValueError(f"알 수 없는 저장 종류: {kind}")

    def delete_exam_file(
        self,
        exams: List[ExamDefinition],
        index: int,
        sessions: List[SessionRecord],
        history: List[Report],
    ) -> bool:
        """
        시험 파일을 삭제하고, 해당 시험을 가리키는 세션/이력도 정리한다.
        데모 시험이거나 인덱스가 잘못되면 아무것도 하지 않고 False.
        """
        if not 0 <= index < len(exams):
            return False
        filename = exams[index].filename
        if filename == DEMO_EXAM_FILENAME:
            logger.info("데모 시험은 삭제할 수 없습니다.")
            return False

        os.remove(self._exam_path(filename))
        self.persist(KIND_SESSION, [s for s in sessions if s.filename != filename])
        self.persist(KIND_HISTORY, [h for h in history if h.filename != filename])
        logger.info(f"시험 삭제: {filename}")
        return True

    # ── 가져오기 ─────────────────────────────────────────────────────────────

    def validate_exam(self, filename: str, document: Any) -> Union[ExamDefinition, List[str]]:
        """문서를 시험 스키마로 검증. 실패하면 모든 오류 메시지를 모아 반환."""
        if not isinstance(document, dict):
            return ["시험 문서는 JSON 객체여야 합니다."]
        try:
            return ExamDefinition.model_validate({**document, "filename": filename})
        except ValidationError as e:
            return format_validation_errors(e)

    def import_local_exam(self, path: str) -> Union[bool, List[str]]:
        """로컬 JSON 파일 가져오기. 파일명(확장자 제외)이 시험 식별자가 된다."""
        filename = os.path.splitext(os.path.basename(path))[0]
        try:
            document = self._read_json(path)
        except OSError as e:
            return [f"파일을 읽을 수 없습니다: {e}"]
        except ValueError as e:
            return [f"JSON 형식이 올바르지 않습니다: {e}"]
        return self._import(filename, document)

    def import_remote_exam(self, filename: str, document: Any) -> Union[bool, List[str]]:
        """원격에서 받아 온 시험 문서 가져오기."""
        return self._import(filename, document)

    def _import(self, filename: str, document: Any) -> Union[bool, List[str]]:
        result = self.validate_exam(filename, document)
        if isinstance(result, list):
            return result
        if os.path.exists(self._exam_path(result.filename)):
            return [f"이미 존재하는 시험 파일명입니다: {result.filename}"]
        os.makedirs(self.exams_dir, exist_ok=True)
        self.persist(KIND_EXAM, result)
        logger.info(f"시험 가져오기 완료: {result.filename}")
        return True

    # ── 파일 유틸 ────────────────────────────────────────────────────────────

    def _exam_path(self, filename: str) -> str:
        return os.path.join(self.exams_dir, f"{filename}.json")

    def _load_list(self, path: str, model: Type[BaseModel]) -> list:
        """
        레코드 단위로 검증한다. 검증에 실패한 레코드는 로그를 남기고 목록에서
        제외하되, 원본 dict 는 보관했다가 다음 저장 때 파일에 다시 기록한다.
        파일 전체가 JSON 으로 읽히지 않으면 .corrupt 로 백업해 두고 빈 목록으로 시작한다.
        """
        self._rejected[path] = []
        if not os.path.exists(path):
            return []
        try:
            raw = self._read_json(path)
        except OSError as e:
            logger.error(f"파일 로드 실패 ({path}): {e}")
            return []
        except ValueError as e:
            self._backup_corrupt(path, e)
            return []
        if not isinstance(raw, list):
            self._backup_corrupt(path, "최상위가 리스트가 아닙니다")
            return []

        records = []
        for i, item in enumerate(raw):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.error(f"레코드 로드 실패 ({path} #{i}): {'; '.join(format_validation_errors(e))}")
                self._rejected[path].append(item)
        return records

    def _write_list(self, path: str, records: List[Any]) -> None:
        self._write_json(path, records + self._rejected.get(path, []))

    def _backup_corrupt(self, path: str, reason: Any) -> None:
        backup = f"{path}.corrupt"
        os.replace(path, backup)
        logger.error(f"파일을 읽을 수 없어 백업했습니다 ({path} → {backup}): {reason}")

    @staticmethod
    def _read_json(path: str) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    @staticmethod
    def _write_json(path: str, data: Any) -> None:
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
