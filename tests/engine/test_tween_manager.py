import pytest

from engine.tween_manager import TweenManager
from models.easing import Easing


@pytest.fixture
def manager(clock):
    return TweenManager(clock=clock)


def test_linear_tween_progress(manager, clock):
    seen = []
    tweener = manager.new_tweener(seen.append, 0.0)
    tweener.tween(1.0, 1000)

    clock.advance(500)
    manager.update()

    assert tweener.value == pytest.approx(0.5)
    assert seen == [pytest.approx(0.5)]
    assert tweener.active


def test_completion_fires_exact_target_once(manager, clock):
    seen = []
    tweener = manager.new_tweener(seen.append, 0.0)
    tweener.tween(1.0, 1000, Easing.Out)

    clock.advance(1500)
    manager.update()
    manager.update()

    assert seen == [1.0]
    assert tweener.value == 1.0
    assert not tweener.active
    assert manager.active_count == 0


def test_retrigger_starts_from_interpolated_value(manager, clock):
    tweener = manager.new_tweener(lambda v: None, 0.0)
    tweener.tween(1.0, 1000)

    # no update() in between: the start point still comes from the clock
    clock.advance(500)
    tweener.tween(0.0, 1000)
    assert tweener.start_value == pytest.approx(0.5)

    clock.advance(500)
    manager.update()
    assert tweener.value == pytest.approx(0.25)


def test_zero_duration_jumps_on_next_update(manager, clock):
    seen = []
    tweener = manager.new_tweener(seen.append, 1.0)
    tweener.tween(0.0, 0)
    manager.update()
    assert seen == [0.0]
    assert not tweener.active


def test_idle_tweener_does_not_fire(manager, clock):
    seen = []
    manager.new_tweener(seen.append, 0.3)
    clock.advance(100)
    manager.update()
    assert seen == []


def test_eased_value(manager, clock):
    tweener = manager.new_tweener(lambda v: None, 0.0)
    tweener.tween(1.0, 2000, Easing.Out)
    clock.advance(1000)
    manager.update()
    assert tweener.value == pytest.approx(0.875)
