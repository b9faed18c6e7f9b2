import threading
import time

from exam_simulator.services.timer import CountdownTimer


def test_ticks_until_cancelled():
    ticks = []
    reached = threading.Event()

    def on_tick():
        ticks.append(1)
        if len(ticks) >= 3:
            reached.set()
        return True

    timer = CountdownTimer(on_tick, interval=0.01)
    timer.start()
    assert reached.wait(2.0)
    timer.cancel()
    assert not timer.running
    time.sleep(0.05)
    count = len(ticks)
    time.sleep(0.05)
    assert len(ticks) == count


def test_callback_returning_false_stops_timer():
    calls = []
    stopped = threading.Event()

    def on_tick():
        calls.append(1)
        stopped.set()
        return False

    timer = CountdownTimer(on_tick, interval=0.01)
    timer.start()
    assert stopped.wait(2.0)
    time.sleep(0.05)
    assert calls == [1]
    assert not timer.running


def test_callback_error_stops_timer():
    def on_tick():
        raise RuntimeError("boom")

    timer = CountdownTimer(on_tick, interval=0.01)
    timer.start()
    deadline = time.time() + 2.0
    while timer.running and time.time() < deadline:
        time.sleep(0.01)
    assert not timer.running
