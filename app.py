# app.py
import logging
import sys

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import QApplication

from data_acquisition import ReadingsClient
from poll_controller import PollController
from settings import DashboardSettings
from store import ReadingStore
from ui_main_window import MainWindow


def shutdown(controller: PollController, client: ReadingsClient) -> None:
    """Detiene el sondeo y espera a las peticiones en curso antes de cerrar el cliente."""
    controller.stop()
    QThreadPool.globalInstance().waitForDone()
    client.close()


def main() -> None:
    settings = DashboardSettings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)
    logger.info("Servicio de lecturas: %s", settings.api_base_url)

    app = QApplication(sys.argv)

    client = ReadingsClient(settings)
    controller = PollController(
        client=client,
        store=ReadingStore(),
        sensor_id=settings.sensor_id,
        limit=settings.default_limit,
        interval_ms=settings.poll_interval_ms,
    )

    window = MainWindow(controller=controller)
    window.resize(1000, 800)
    window.show()
    window.start()

    exit_code = app.exec()

    shutdown(controller, client)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
