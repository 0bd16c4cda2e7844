# tests/test_ui_main_window.py
import pytest

from conftest import run_now
from errors import FetchError
from poll_controller import PollController
from store import ReadingStore
from ui_main_window import MainWindow


@pytest.fixture
def window(qtbot, fake_client):
    controller = PollController(
        fake_client, ReadingStore(), "esp32-dht22-1", limit=4, interval_ms=60_000, dispatcher=run_now
    )
    win = MainWindow(controller=controller)
    qtbot.addWidget(win)
    yield win
    controller.stop()


def test_empty_state(window):
    assert window.temp_gauge.text() == "--"
    assert window.table_model.rowCount() == 0
    assert not window.empty_label.isHidden()


def test_start_renders_window(window):
    window.start()

    assert window.table_model.rowCount() == 4
    assert window.temp_gauge.text() == "20.00 °C"
    assert window.hum_gauge.position.percent == pytest.approx(0.5)
    assert "4 lecturas" in window.temp_card.lbl_title.text()
    assert window.empty_label.isHidden()
    assert window.updated_label.text().startswith("Actualizado")


def test_invalid_limit_shows_error_banner(window, fake_client):
    window.limit_input.setText("abc")
    window.submit_limit()

    assert window.error_label.text()
    assert not window.error_label.isHidden()
    assert fake_client.calls == []


def test_valid_limit_refreshes(window, fake_client):
    window.limit_input.setText("2")
    window.submit_limit()

    assert fake_client.calls == [("esp32-dht22-1", 2)]
    assert window.table_model.rowCount() == 2
    assert "2" in window.table_title.text()


def test_fetch_error_keeps_table(window, fake_client):
    window.start()
    fake_client.fail_with = FetchError("No se pudieron obtener las lecturas (502).")
    window.controller.poll_once()

    assert window.table_model.rowCount() == 4
    assert "502" in window.error_label.text()


def test_close_stops_polling(qtbot, window):
    window.show()
    qtbot.waitExposed(window)
    window.start()
    window.close()
    assert not window.controller.is_running


def test_pressure_card_shows_window_stats(window):
    window.start()
    assert "4 lecturas" in window.pressure_card.lbl_title.text()
    assert "1,013.25 hPa" in window.pressure_card.lbl_values.text()


def test_missing_humidity_shows_placeholder(window, fake_client, make_reading):
    fake_client.window_factory = lambda limit: [make_reading(0, humidity=None), make_reading(1)]
    window.start()

    assert window.hum_gauge.text() == "--"
    assert window.hum_gauge.position.empty
    assert "1 lecturas" in window.hum_card.lbl_title.text()
