# limit_control.py
from __future__ import annotations

import logging

from errors import ValidationError
from poll_controller import PollController

logger = logging.getLogger(__name__)

INVALID_LIMIT_MESSAGE = "Introduce un número de lecturas válido (entero mayor que 0)."


def parse_limit(raw: str) -> int:
    try:
        value = int(str(raw).strip(), 10)
    except (TypeError, ValueError):
        raise ValidationError(INVALID_LIMIT_MESSAGE) from None
    if value <= 0:
        raise ValidationError(INVALID_LIMIT_MESSAGE)
    return value


class LimitControl:
    """
    Aplica el tamaño de ventana pedido por el usuario.

    Un valor válido cambia el límite activo y fuerza un sondeo inmediato;
    el temporizador sigue con su plazo y usa el nuevo límite en adelante.
    """

    def __init__(self, controller: PollController) -> None:
        self.controller = controller

    @property
    def limit(self) -> int:
        return self.controller.limit

    def commit(self, raw_input: str) -> int:
        try:
            new_limit = parse_limit(raw_input)
        except ValidationError as e:
            logger.info("Límite rechazado: %r", raw_input)
            self.controller.report_error(str(e))
            raise

        self.controller.limit = new_limit
        self.controller.poll_once(new_limit)
        return new_limit
