import pytest

from exam_simulator.models.question_model import ExamDefinition
from exam_simulator.services.exam_controller import ExamSessionController
from exam_simulator.services.storage import ExamStore


class ManualTimer:
    """틱을 직접 발생시키는 테스트용 타이머."""

    instances = []

    def __init__(self, callback):
        self.callback = callback
        self.started = False
        self.cancelled = False
        ManualTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self, times=1):
        result = True
        for _ in range(times):
            result = self.callback()
        return result


def mc(text, correct_index, n=3):
    return {
        "type": "multiple-choice",
        "question_text": text,
        "choices": [{"text": f"{text}-{i}", "correct": i == correct_index} for i in range(n)],
    }


def make_exam(filename="sample", questions=None, time=5, **extra):
    return ExamDefinition.model_validate({
        "filename": filename,
        "title": f"{filename} title",
        "time": time,
        "test": questions if questions is not None else [],
        **extra,
    })


@pytest.fixture(autouse=True)
def _reset_timers():
    ManualTimer.instances.clear()
    yield
    ManualTimer.instances.clear()


@pytest.fixture
def mc_exam():
    return make_exam("three-mc", [mc("q0", 0), mc("q1", 1), mc("q2", 2)])


@pytest.fixture
def mixed_exam():
    return make_exam("mixed", [
        mc("capital", 1, n=4),
        {
            "type": "multiple-answer",
            "question_text": "primes",
            "choices": [
                {"text": "2", "correct": True},
                {"text": "4", "correct": False},
                {"text": "7", "correct": True},
            ],
        },
        {
            "type": "fill-in",
            "question_text": "capital of France",
            "choices": [{"text": "paris", "correct": True}, {"text": "Lutetia", "correct": True}],
        },
        {
            "type": "list-order",
            "question_text": "ascending",
            "choices": [{"text": "1"}, {"text": "10"}, {"text": "100"}],
        },
    ], time=10)


@pytest.fixture
def store(tmp_path, mc_exam, mixed_exam):
    s = ExamStore(str(tmp_path / "data"))
    s.ensure_data_dir()
    s.persist("exam", mc_exam)
    s.persist("exam", mixed_exam)
    return s


@pytest.fixture
def controller(store):
    c = ExamSessionController(store, timer_factory=ManualTimer)
    c.load()
    yield c
    c.close()


def exam_index(controller, filename):
    return [e.filename for e in controller.exams].index(filename)
