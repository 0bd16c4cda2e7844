# settings.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DashboardSettings(BaseSettings):
    """
    Configuración del dashboard, leída una sola vez al arrancar desde
    variables de entorno DASHBOARD_* (sin fichero, sin recarga en caliente).
    """

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_", frozen=True)

    # Servicio de lecturas
    api_base_url: str = "http://localhost:3000"
    sensor_id: str = "esp32-dht22-1"
    request_timeout: float = Field(default=10.0, gt=0)

    # Sondeo
    default_limit: int = Field(default=20, gt=0)
    poll_interval_ms: int = Field(default=10_000, gt=0)

    log_level: str = "INFO"

    @property
    def readings_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/api/readings/latest"
