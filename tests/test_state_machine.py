import pytest

from exam_simulator.services.state_machine import InvalidModeTransition, Mode, ModeMachine


@pytest.mark.parametrize("path", [
    [Mode.COVER, Mode.IN_PROGRESS, Mode.REVIEWING, Mode.BROWSING],
    [Mode.COVER, Mode.BROWSING],
    [Mode.IN_PROGRESS, Mode.BROWSING],
    [Mode.REVIEWING, Mode.BROWSING],
])
def test_allowed_paths(path):
    machine = ModeMachine()
    previous = Mode.BROWSING
    for target in path:
        assert machine.transition(target) == previous
        assert machine.mode == target
        previous = target


@pytest.mark.parametrize("source, target", [
    (Mode.BROWSING, Mode.BROWSING),
    (Mode.COVER, Mode.REVIEWING),
    (Mode.IN_PROGRESS, Mode.COVER),
    (Mode.REVIEWING, Mode.IN_PROGRESS),
    (Mode.REVIEWING, Mode.COVER),
])
def test_illegal_transition_raises(source, target):
    machine = ModeMachine(source)
    assert not machine.can_transition(target)
    with pytest.raises(InvalidModeTransition) as exc_info:
        machine.transition(target)
    assert exc_info.value.source == source
    assert exc_info.value.target == target
    # 실패한 전이는 모드를 바꾸지 않는다
    assert machine.mode == source
