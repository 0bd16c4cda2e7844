# tests/conftest.py
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Callable, List  # noqa: E402

import pytest  # noqa: E402

from errors import FetchError  # noqa: E402
from models import Reading  # noqa: E402


def reading_payload(index: int = 0, **overrides) -> dict:
    """Lectura en el formato JSON del servidor."""
    data = {
        "_id": f"65a1b2c3d4e5f6a7b8c9d{index:03d}",
        "sensorId": "esp32-dht22-1",
        "location": "Terraza",
        "temperature": 20.0 + index,
        "humidity": 50.0 + index,
        "pressure": 1013.25,
        "timestamp": f"2024-01-01T12:{59 - index:02d}:00Z",
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_reading() -> Callable[..., Reading]:
    def factory(index: int = 0, **overrides) -> Reading:
        return Reading.model_validate(reading_payload(index, **overrides))

    return factory


@pytest.fixture
def make_window(make_reading) -> Callable[[int], List[Reading]]:
    def factory(size: int) -> List[Reading]:
        return [make_reading(i) for i in range(size)]

    return factory


class FakeClient:
    """Sustituto de ReadingsClient: registra las llamadas y devuelve lo configurado."""

    def __init__(self, window_factory) -> None:
        self.window_factory = window_factory
        self.calls: List[tuple] = []
        self.fail_with: FetchError | None = None

    def fetch_latest(self, sensor_id: str, limit: int) -> List[Reading]:
        self.calls.append((sensor_id, limit))
        if self.fail_with is not None:
            raise self.fail_with
        return self.window_factory(limit)


class DeferredDispatcher:
    """Guarda los trabajos para ejecutarlos a mano en el orden que se quiera."""

    def __init__(self) -> None:
        self.jobs: list = []

    def __call__(self, job) -> None:
        self.jobs.append(job)

    def run(self, index: int) -> None:
        self.jobs[index]()


def run_now(job) -> None:
    job()


@pytest.fixture
def fake_client(make_window) -> FakeClient:
    return FakeClient(make_window)
