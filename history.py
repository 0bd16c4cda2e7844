# history.py
from __future__ import annotations

import math
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import pandas as pd
from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from gauge import format_measure
from models import Reading

COLUMNS = [
    "ID",
    "Sensor",
    "Ubicación",
    "Temp (°C)",
    "Humedad (%)",
    "Presión",
    "Fecha",
]

UNKNOWN_TIME = "—"


def _format_time(ts: Optional[datetime]) -> str:
    if ts is None:
        return UNKNOWN_TIME
    return ts.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _or_nan(value: Optional[float]) -> float:
    return math.nan if value is None else value


def readings_frame(readings: Sequence[Reading]) -> pd.DataFrame:
    """Tabla del histórico, en el mismo orden que la ventana (más reciente arriba)."""
    rows = [
        (
            r.id[-6:],
            r.sensor_id,
            r.location,
            format_measure(r.temperature),
            format_measure(r.humidity),
            format_measure(r.pressure),
            _format_time(r.effective_time),
        )
        for r in readings
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def trend_series(readings: Sequence[Reading]) -> List[Tuple[datetime, float, float]]:
    """
    Puntos (fecha, temperatura, humedad) en orden cronológico para la gráfica.

    Un valor ausente se convierte en NaN para que la línea quede cortada.
    """
    points = [
        (r.effective_time, _or_nan(r.temperature), _or_nan(r.humidity))
        for r in readings
        if r.effective_time is not None
    ]
    points.sort(key=lambda p: p[0])
    return points  # type: ignore[return-value]


class ReadingsTableModel(QAbstractTableModel):
    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._frame = readings_frame([])

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    def set_readings(self, readings: Sequence[Reading]) -> None:
        self.beginResetModel()
        self._frame = readings_frame(readings)
        self.endResetModel()

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._frame)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._frame.columns)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid():
            return None
        if role == Qt.DisplayRole:
            return str(self._frame.iat[index.row(), index.column()])
        if role == Qt.TextAlignmentRole and index.column() >= 3:
            return Qt.AlignRight | Qt.AlignVCenter
        return None

    def headerData(self, section: int, orientation, role: int = Qt.DisplayRole):
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            return self._frame.columns[section]
        return str(section + 1)
