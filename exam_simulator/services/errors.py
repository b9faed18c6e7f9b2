"""
services/errors.py

서비스 계층 예외.
잘못된 이동/조작은 예외가 아니라 무시(no-op)로 처리하므로 여기에는
호출자가 반드시 알아야 하는 상황만 정의한다.
"""


class LinkedExamError(LookupError):
    """세션/이력 레코드를 연결된 원본 시험과 맞출 수 없음."""

    def __init__(self, filename: str, message: str):
        super().__init__(message)
        self.filename = filename


class SourceExamMissingError(LinkedExamError):
    """세션/이력 레코드가 가리키는 원본 시험이 카탈로그에 없음."""

    def __init__(self, filename: str):
        super().__init__(filename, f"원본 시험('{filename}')을 찾을 수 없습니다. 삭제되었을 수 있습니다.")


class SessionExamMismatchError(LinkedExamError):
    """세션 레코드의 답안 슬롯이 현재 시험 구성과 맞지 않음."""

    def __init__(self, filename: str, reason: str):
        super().__init__(filename, f"세션이 시험('{filename}')과 맞지 않습니다: {reason}")
        self.reason = reason
