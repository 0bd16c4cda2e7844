# models.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Convierte una fecha ISO-8601 en datetime; None si falta o no es válida."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    # sin zona horaria => hora local, para poder comparar fechas entre sí
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


class Reading(BaseModel):
    """
    Una lectura del sensor tal como la devuelve el servicio de almacenamiento.

    Los nombres en el JSON son camelCase (sensorId, createdAt...) y el
    identificador llega como `_id`.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    sensor_id: str = Field(validation_alias=AliasChoices("sensorId", "sensor_id"))
    location: str
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    timestamp: Optional[str] = None
    created_at: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("createdAt", "created_at")
    )
    updated_at: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("updatedAt", "updated_at")
    )

    @property
    def effective_time(self) -> Optional[datetime]:
        # prioridad: timestamp > createdAt > updatedAt
        for raw in (self.timestamp, self.created_at, self.updated_at):
            parsed = parse_date(raw)
            if parsed is not None:
                return parsed
        return None


@dataclass(frozen=True)
class Stats:
    min: float
    max: float
    average: float
    count: int


@dataclass(frozen=True)
class GaugePosition:
    percent: float
    empty: bool = False

    def arc_length(self, radius: float = 100.0) -> float:
        """Longitud del arco relleno en un medidor semicircular de radio dado."""
        return math.pi * radius * self.percent
