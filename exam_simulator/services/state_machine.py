"""
services/state_machine.py

최상위 화면 모드와 허용 전이 표.
컨트롤러는 각 조작의 전제 조건을 먼저 확인한 뒤 전이한다.
표에 없는 전이는 컨트롤러 버그이므로 예외로 드러낸다.
"""

from enum import IntEnum
from typing import Dict, FrozenSet


class Mode(IntEnum):
    BROWSING = 0      # 시험/이력/세션 목록
    COVER = 1         # 시험 표지 (시작 전)
    IN_PROGRESS = 2   # 시험 진행 (타이머 동작)
    REVIEWING = 3     # 리포트/이력 복습


_ALLOWED: Dict[Mode, FrozenSet[Mode]] = {
    Mode.BROWSING: frozenset({Mode.COVER, Mode.IN_PROGRESS, Mode.REVIEWING}),
    Mode.COVER: frozenset({Mode.IN_PROGRESS, Mode.BROWSING}),
    Mode.IN_PROGRESS: frozenset({Mode.REVIEWING, Mode.BROWSING}),
    Mode.REVIEWING: frozenset({Mode.BROWSING}),
}


class InvalidModeTransition(RuntimeError):
    def __init__(self, source: Mode, target: Mode):
        super().__init__(f"허용되지 않는 모드 전이: {source.name} → {target.name}")
        self.source = source
        self.target = target


class ModeMachine:
    """현재 모드를 들고, 표에 있는 전이만 수행한다."""

    def __init__(self, initial: Mode = Mode.BROWSING):
        self._mode = initial

    @property
    def mode(self) -> Mode:
        return self._mode

    def can_transition(self, target: Mode) -> bool:
        return target in _ALLOWED[self._mode]

    def transition(self, target: Mode) -> Mode:
        """
        target 으로 전이하고 이전 모드를 반환한다.

        Raises:
            InvalidModeTransition: 표에 없는 전이.
        """
        if not self.can_transition(target):
            raise InvalidModeTransition(self._mode, target)
        previous, self._mode = self._mode, target
        return previous
