# tests/test_limit_control.py
import pytest

from conftest import run_now
from errors import ValidationError
from limit_control import LimitControl, parse_limit
from poll_controller import PollController
from store import ReadingStore


@pytest.fixture
def controller(qtbot, fake_client):
    ctrl = PollController(
        fake_client, ReadingStore(), "esp32-dht22-1", limit=20, interval_ms=60_000, dispatcher=run_now
    )
    yield ctrl
    ctrl.stop()


@pytest.mark.parametrize("raw", ["0", "-3", "abc", "", "  ", "1.5"])
def test_invalid_input_is_rejected(controller, fake_client, raw):
    control = LimitControl(controller)

    with pytest.raises(ValidationError):
        control.commit(raw)

    assert controller.error
    assert controller.limit == 20
    assert fake_client.calls == []


def test_valid_input_polls_immediately(controller, fake_client):
    control = LimitControl(controller)

    assert control.commit("15") == 15

    assert fake_client.calls == [("esp32-dht22-1", 15)]
    assert control.limit == 15
    assert len(controller.store) == 15


def test_valid_resubmission_clears_validation_error(controller):
    control = LimitControl(controller)
    with pytest.raises(ValidationError):
        control.commit("abc")

    control.commit(" 7 ")
    assert controller.error is None


def test_commit_keeps_timer_schedule(qtbot, controller, fake_client):
    controller.start()
    remaining = controller.timer.remainingTime()

    LimitControl(controller).commit("5")

    assert controller.is_running
    # el temporizador no se reinicia: el plazo restante no vuelve al intervalo completo
    assert controller.timer.remainingTime() <= remaining
    assert fake_client.calls[-1] == ("esp32-dht22-1", 5)


def test_parse_limit():
    assert parse_limit("42") == 42
    with pytest.raises(ValidationError):
        parse_limit("-1")
