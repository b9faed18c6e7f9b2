"""
services/timer.py

시험 카운트다운 타이머.
데몬 스레드가 interval 마다 콜백을 호출하며, cancel() 이후에는 다시 호출하지 않는다.
"""

import logging
import threading
from typing import Callable, Optional

from config import TIMER_INTERVAL

logger = logging.getLogger(__name__)


class CountdownTimer:
    """
    cancel 가능한 주기 타이머.

    Args:
        callback: 틱마다 호출할 함수. False 를 반환하면 타이머가 스스로 멈춘다.
        interval: 틱 간격 (초).
    """

    def __init__(self, callback: Callable[[], bool], interval: float = TIMER_INTERVAL):
        self._callback = callback
        self._interval = interval
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._stopped.is_set()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            try:
                keep_going = self._callback()
            except Exception:
                logger.exception("타이머 콜백 오류 — 타이머를 중지합니다.")
                keep_going = False
            if not keep_going:
                self._stopped.set()
