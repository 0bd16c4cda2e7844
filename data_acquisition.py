# data_acquisition.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PayloadValidationError

from errors import FetchError
from models import Reading
from settings import DashboardSettings

logger = logging.getLogger(__name__)

_WINDOW_ADAPTER = TypeAdapter(List[Reading])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
}


def parse_readings(payload: Any) -> List[Reading]:
    """
    Valida el JSON de /api/readings/latest como una lista de lecturas.

    Un array vacío es una ventana vacía. Cualquier otra cosa que no sea un
    array de lecturas válidas es un FetchError.
    """
    if not isinstance(payload, list):
        raise FetchError(
            f"Respuesta inesperada del servidor: se esperaba una lista y llegó {type(payload).__name__}."
        )
    try:
        return _WINDOW_ADAPTER.validate_python(payload)
    except PayloadValidationError as e:
        raise FetchError(
            f"Lecturas con formato inválido ({e.error_count()} errores)."
        ) from e


class ReadingsClient:
    """
    Cliente HTTP del servicio de almacenamiento de lecturas:

        GET {base_url}/api/readings/latest?sensorId=...&limit=...

    Sin autenticación ni caché. Se llama desde un hilo de trabajo, por eso
    usa httpx síncrono.
    """

    def __init__(
        self,
        settings: DashboardSettings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._http = httpx.Client(
            timeout=settings.request_timeout,
            headers=NO_CACHE_HEADERS,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def fetch_latest(self, sensor_id: str, limit: int) -> List[Reading]:
        params = {"sensorId": sensor_id, "limit": limit}
        try:
            response = self._http.get(self.settings.readings_url, params=params)
        except httpx.HTTPError as e:
            logger.warning("Error de red al pedir lecturas: %s", e)
            raise FetchError(f"No se pudo conectar con el servidor de lecturas: {e}") from e

        if not response.is_success:
            logger.warning("El servidor respondió %s", response.status_code)
            raise FetchError(
                f"No se pudieron obtener las lecturas ({response.status_code}).",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError("La respuesta del servidor no es JSON válido.") from e

        readings = parse_readings(payload)
        logger.debug("Recibidas %d lecturas de %s", len(readings), sensor_id)
        return readings
