from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ServiceType = Literal["open-meteo", "weather-api"]


class ServerSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    read_timeout: float = Field(default=30, gt=0)
    write_timeout: float = Field(default=30, gt=0)
    idle_timeout: float = Field(default=60, gt=0)


class WeatherServiceSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: ServiceType
    enabled: bool = True
    base_url: str
    api_key: Optional[str] = None
    params: Dict[str, str] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        text = value.strip().rstrip("/")
        if not text.startswith(("http://", "https://")):
            raise ValueError("weather.services.<name>.base_url must be an absolute http(s) URL")
        return text

    @field_validator("params", mode="before")
    @classmethod
    def stringify_params(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value


def default_services() -> Dict[str, WeatherServiceSettings]:
    return {
        "open-meteo": WeatherServiceSettings(
            type="open-meteo",
            enabled=True,
            base_url="https://api.open-meteo.com/v1",
            params={"daily": "temperature_2m_max,temperature_2m_min,precipitation_sum,weathercode"},
        ),
        "weather-api": WeatherServiceSettings(
            type="weather-api",
            enabled=False,
            base_url="https://api.weatherapi.com/v1",
            params={"format": "json"},
        ),
    }


class WeatherSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cache_ttl: float = Field(default=300, ge=0)
    workers: int = Field(default=5, ge=1)
    queue_size: int = Field(default=100, ge=1)
    handler_timeout: float = Field(default=10, gt=0)
    timeout: float = Field(default=10, gt=0)
    services: Dict[str, WeatherServiceSettings] = Field(default_factory=default_services)

    def get_enabled_services(self) -> Dict[str, WeatherServiceSettings]:
        return {name: service for name, service in self.services.items() if service.enabled}

    def get_service(self, name: str) -> WeatherServiceSettings:
        if name not in self.services:
            raise KeyError(f"service {name} not found")
        return self.services[name]


class TelemetrySettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = False
    endpoint: str = "tempo:4317"


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    level: Literal["debug", "info", "warning", "error"] = "info"
    format: Literal["json", "console"] = "json"
    output_path: str = ""

    @field_validator("level", "format", mode="before")
    @classmethod
    def lowercase(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: str = "1.0.0"
    environment: str = "development"
    server: ServerSettings = Field(default_factory=ServerSettings)
    weather: WeatherSettings = Field(default_factory=WeatherSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
