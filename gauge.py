# gauge.py
from __future__ import annotations

import math
from typing import Optional

from models import GaugePosition

# Rangos fijos de los medidores
TEMP_RANGE = (0.0, 50.0)   # ºC
HUM_RANGE = (0.0, 100.0)   # %

PLACEHOLDER = "--"

# Zonas de color del arco (azul -> verde -> ámbar -> naranja)
COLOR_ZONES = (
    (0.45, "#0ea5e9"),
    (0.75, "#22c55e"),
    (1.00, "#facc15"),
)
COLOR_MAX = "#f97316"


def _finite(value: Optional[float]) -> bool:
    return (
        value is not None
        and not isinstance(value, bool)
        and isinstance(value, (int, float))
        and math.isfinite(value)
    )


def map_gauge(value: Optional[float], minimum: float, maximum: float) -> GaugePosition:
    """
    Posición normalizada [0, 1] de un valor dentro del rango del medidor.

    Nunca falla: un valor ausente o no finito devuelve un medidor vacío.
    Si el rango es degenerado se usa un ancho mínimo de 1.
    """
    if not (_finite(value) and _finite(minimum) and _finite(maximum)):
        return GaugePosition(percent=0.0, empty=True)

    span = max(maximum - minimum, 1)
    percent = min(max((value - minimum) / span, 0.0), 1.0)
    return GaugePosition(percent=percent, empty=False)


def gauge_color(percent: float) -> str:
    for limit, color in COLOR_ZONES:
        if percent < limit:
            return color
    return COLOR_MAX


def format_number(value: float) -> str:
    return f"{value:,.2f}"


def format_measure(value: Optional[float], unit: str = "") -> str:
    """Valor con dos decimales y unidad, o el marcador "--" si no hay dato."""
    if not _finite(value):
        return PLACEHOLDER
    text = format_number(value)  # type: ignore[arg-type]
    return f"{text} {unit}" if unit else text
