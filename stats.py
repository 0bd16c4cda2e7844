# stats.py
from __future__ import annotations

import math
import statistics
from typing import Iterable, Optional, Sequence

from models import Reading, Stats


def _is_finite(value: object) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)  # type: ignore[arg-type]
    except TypeError:
        return False


def collect_stats(values: Iterable[Optional[float]]) -> Optional[Stats]:
    """
    Resumen min/max/media de una serie numérica.

    Los valores no finitos (NaN, inf, None) se descartan antes de calcular.
    Devuelve None si no queda ningún valor.
    """
    finite = [float(v) for v in values if _is_finite(v)]
    if not finite:
        return None

    return Stats(
        min=min(finite),
        max=max(finite),
        average=statistics.fmean(finite),
        count=len(finite),
    )


def field_stats(readings: Sequence[Reading], field: str) -> Optional[Stats]:
    return collect_stats(getattr(r, field, None) for r in readings)
