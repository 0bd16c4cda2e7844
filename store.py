# store.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterator, Optional, Sequence, Tuple

from models import Reading, Stats
from stats import field_stats

logger = logging.getLogger(__name__)


def is_newest_first(readings: Sequence[Reading]) -> bool:
    """
    True si las lecturas vienen de más reciente a más antigua.

    Las lecturas sin fecha efectiva no se pueden comparar y se ignoran,
    salvo que aparezca una con fecha después de una sin fecha.
    """
    previous: Optional[datetime] = None
    seen_unknown = False
    for reading in readings:
        ts = reading.effective_time
        if ts is None:
            seen_unknown = True
            continue
        if seen_unknown:
            return False
        if previous is not None and ts > previous:
            return False
        previous = ts
    return True


def sort_newest_first(readings: Sequence[Reading]) -> list[Reading]:
    """Orden determinista: fecha descendente, sin fecha al final, empate por id."""
    dated = [r for r in readings if r.effective_time is not None]
    undated = [r for r in readings if r.effective_time is None]

    dated.sort(key=lambda r: r.id)
    dated.sort(key=lambda r: r.effective_time, reverse=True)  # type: ignore[arg-type,return-value]
    undated.sort(key=lambda r: r.id)
    return dated + undated


class ReadingStore:
    """
    Ventana actual de lecturas (índice 0 = la más reciente).

    Cada sondeo correcto sustituye la ventana completa; no hay fusión
    ni acumulación de datos anteriores.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._readings: Tuple[Reading, ...] = ()
        self.last_updated: Optional[datetime] = None

    def replace(self, new_readings: object) -> None:
        if not isinstance(new_readings, (list, tuple)):
            window: Tuple[Reading, ...] = ()
        elif is_newest_first(new_readings):
            window = tuple(new_readings)
        else:
            logger.warning(
                "El servidor devolvió %d lecturas fuera de orden; se reordenan por fecha",
                len(new_readings),
            )
            window = tuple(sort_newest_first(new_readings))

        # una sola asignación: nunca se ve una ventana a medias
        self._readings = window
        self.last_updated = self._clock()

    @property
    def readings(self) -> Tuple[Reading, ...]:
        return self._readings

    def latest(self) -> Optional[Reading]:
        return self._readings[0] if self._readings else None

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[Reading]:
        return iter(self._readings)

    # ==================== ESTADÍSTICAS DERIVADAS ====================

    def temperature_stats(self) -> Optional[Stats]:
        return field_stats(self._readings, "temperature")

    def humidity_stats(self) -> Optional[Stats]:
        return field_stats(self._readings, "humidity")

    def pressure_stats(self) -> Optional[Stats]:
        return field_stats(self._readings, "pressure")
