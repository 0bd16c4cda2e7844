# poll_controller.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Protocol

from PySide6.QtCore import QObject, QRunnable, QThreadPool, QTimer, Signal, Slot

from errors import FetchError
from models import Reading
from store import ReadingStore

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 10_000
DEFAULT_LIMIT = 20
UNEXPECTED_ERROR_MESSAGE = "No se pudieron obtener las lecturas."

Job = Callable[[], None]
Dispatcher = Callable[[Job], None]


class ReadingsSource(Protocol):
    def fetch_latest(self, sensor_id: str, limit: int) -> List[Reading]: ...


class _FetchJob(QRunnable):
    def __init__(self, job: Job) -> None:
        super().__init__()
        self._job = job

    def run(self) -> None:
        self._job()


def thread_pool_dispatcher(job: Job) -> None:
    """Ejecuta la petición HTTP en el pool global de Qt."""
    QThreadPool.globalInstance().start(_FetchJob(job))


class PollController(QObject):
    """
    Sondeo periódico y bajo demanda del servicio de lecturas.

    Estados: inactivo -> pidiendo -> (éxito | fallo) -> inactivo.

    La petición se hace fuera del hilo de la interfaz; el resultado vuelve
    al hilo del controlador mediante una señal encolada. Cada petición
    lleva un id creciente y solo se aplica la respuesta de la última
    petición emitida, así una respuesta lenta nunca pisa datos más nuevos.
    """

    readings_changed = Signal()
    fetching_changed = Signal(bool)
    error_changed = Signal(str)  # "" = sin error

    # (request_id, lecturas | None, mensaje de error | None)
    _fetch_finished = Signal(int, object, object)

    def __init__(
        self,
        client: ReadingsSource,
        store: ReadingStore,
        sensor_id: str = "",
        limit: int = DEFAULT_LIMIT,
        interval_ms: int = POLL_INTERVAL_MS,
        dispatcher: Optional[Dispatcher] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.client = client
        self.store = store
        self.sensor_id = sensor_id
        self.limit = limit
        self._dispatch = dispatcher or thread_pool_dispatcher

        self._request_id = 0
        self._is_fetching = False
        self._error: Optional[str] = None

        self.timer = QTimer(self)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._on_tick)

        self._fetch_finished.connect(self._on_fetch_finished)

    # ===================== ESTADO OBSERVABLE =====================
    @property
    def is_fetching(self) -> bool:
        return self._is_fetching

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def last_updated(self) -> Optional[datetime]:
        return self.store.last_updated

    @property
    def is_running(self) -> bool:
        return self.timer.isActive()

    def _set_fetching(self, value: bool) -> None:
        if value != self._is_fetching:
            self._is_fetching = value
            self.fetching_changed.emit(value)

    def _set_error(self, message: Optional[str]) -> None:
        if message != self._error:
            self._error = message
            self.error_changed.emit(message or "")

    def report_error(self, message: str) -> None:
        """Muestra un error ajeno a la red (p. ej. validación) por el mismo canal."""
        self._set_error(message)

    # ===================== CICLO DE SONDEO =====================
    def start(self, sensor_id: Optional[str] = None, limit: Optional[int] = None) -> None:
        if sensor_id is not None:
            self.sensor_id = sensor_id
        if limit is not None:
            self.limit = limit

        # start() reinicia el temporizador y descarta el plazo anterior
        self.timer.start()
        logger.info(
            "Sondeo iniciado: sensor=%s limit=%d cada %d ms",
            self.sensor_id, self.limit, self.timer.interval(),
        )
        self.poll_once()

    def stop(self) -> None:
        self.timer.stop()
        # las respuestas en vuelo ya no se aplican
        self._request_id += 1
        self._set_fetching(False)
        logger.info("Sondeo detenido.")

    @Slot()
    def _on_tick(self) -> None:
        self.poll_once()

    def poll_once(self, limit: Optional[int] = None) -> int:
        """Lanza una petición y devuelve su id."""
        limit_to_use = self.limit if limit is None else limit
        self._request_id += 1
        request_id = self._request_id
        sensor_id = self.sensor_id

        self._set_fetching(True)
        self._set_error(None)

        def job() -> None:
            try:
                readings = self.client.fetch_latest(sensor_id, limit_to_use)
            except FetchError as e:
                self._fetch_finished.emit(request_id, None, str(e))
                return
            except Exception:
                logger.exception("Error inesperado al pedir lecturas")
                self._fetch_finished.emit(request_id, None, UNEXPECTED_ERROR_MESSAGE)
                return
            self._fetch_finished.emit(request_id, readings, None)

        self._dispatch(job)
        return request_id

    @Slot(int, object, object)
    def _on_fetch_finished(
        self,
        request_id: int,
        readings: Optional[List[Reading]],
        message: Optional[str],
    ) -> None:
        if request_id != self._request_id:
            logger.debug(
                "Respuesta obsoleta descartada (id=%d, última=%d)",
                request_id, self._request_id,
            )
            return

        if message is None:
            self.store.replace(readings)
            logger.info("Ventana actualizada: %d lecturas", len(self.store))
            self.readings_changed.emit()
        else:
            logger.warning("Sondeo fallido: %s", message)
            self._set_error(message)

        self._set_fetching(False)
