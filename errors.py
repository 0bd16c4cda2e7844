# errors.py
from __future__ import annotations


class DashboardError(Exception):
    """Error recuperable que se muestra al usuario como un único mensaje."""


class ValidationError(DashboardError):
    """Entrada de usuario inválida (por ejemplo, el número de lecturas)."""


class FetchError(DashboardError):
    """Fallo al obtener lecturas: estado HTTP, transporte o payload inválido."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
