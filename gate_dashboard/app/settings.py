from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DashboardSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GATE_DASHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    base_url: str = "http://localhost:5678/webhook"
    gate_ids: List[int] = Field(default_factory=lambda: [1, 2, 3, 4])
    tracked_vehicle_types: List[str] = Field(default_factory=lambda: ["car", "motorcycle", "bus"])
    vehicle_type_labels: Dict[str, str] = Field(
        default_factory=lambda: {
            "car": "Car",
            "motorcycle": "Motorcycle",
            "bus": "Bus",
            "in": "In",
            "out": "Out",
        }
    )
    page_size: int = Field(default=10, ge=1)
    request_timeout: Optional[float] = Field(default=None, gt=0.0)
    report_url_template: Optional[str] = "/report?cameraId={camera_id}&start={start}&stop={stop}"
    initial_query_on_startup: bool = True
    log_format: str = Field(default="text", pattern="^(text|json)$")
    log_level: str = "INFO"

    @field_validator("gate_ids")
    @classmethod
    def _normalize_gates(cls, value: List[int]) -> List[int]:
        gates = sorted(set(value))
        if not gates:
            raise ValueError("at least one gate id is required")
        return gates

    @field_validator("tracked_vehicle_types")
    @classmethod
    def _normalize_vehicle_types(cls, value: List[str]) -> List[str]:
        vehicle_types: List[str] = []
        for item in value:
            name = str(item).strip().lower()
            if name and name not in vehicle_types:
                vehicle_types.append(name)
        return vehicle_types or ["car", "motorcycle", "bus"]


def get_settings() -> DashboardSettings:
    return DashboardSettings()


def load_settings(**overrides: object) -> DashboardSettings:
    """Return settings with explicit overrides applied on top of the environment."""

    return DashboardSettings(**overrides)
