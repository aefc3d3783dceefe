from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class VehicleDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    vehicle_type_id: int
    vehicle_type_name: str
    direction_type_id: int
    direction_type_name: str
    count: int = Field(ge=0)


class CameraSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    gate_id: int
    camera_id: int
    start: str
    stop: str
    details: Tuple[VehicleDetail, ...] = ()


class GateResponse(BaseModel):
    """First element of the per-gate response array."""

    data: List[CameraSnapshot] = Field(default_factory=list)


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Optional[str] = None
    stop: Optional[str] = None

    @field_validator("start", "stop", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def is_complete(self) -> bool:
        return self.start is not None and self.stop is not None


class LiveSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    generation: int = 0
    date_range: Optional[DateRange] = None
    cameras: Tuple[CameraSnapshot, ...] = ()


class FlatRow(BaseModel):
    camera_id: int
    gate_id: int
    vehicle_type_id: int
    vehicle_type_name: str
    direction_type_id: int
    direction_type_name: str
    count: int


class DirectionTotals(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inbound: int = Field(default=0, alias="in")
    outbound: int = Field(default=0, alias="out")

    @computed_field
    @property
    def total(self) -> int:
        return self.inbound + self.outbound


Totals = Dict[str, DirectionTotals]


class Page(BaseModel):
    rows: List[FlatRow]
    page_number: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    total_rows: int = Field(ge=0)
    page_size: int = Field(ge=1)


class ChartSeries(BaseModel):
    name: str
    label: str
    color: str
    data: List[int]


class ChartDataset(BaseModel):
    categories: List[str]
    labels: List[str]
    series: List[ChartSeries]


class CameraBreakdown(BaseModel):
    camera_id: int
    gate_id: int
    counts: Dict[str, DirectionTotals]
    report_url: Optional[str] = None


class GateGroup(BaseModel):
    gate_id: int
    cameras: List[CameraBreakdown] = Field(default_factory=list)


class DashboardView(BaseModel):
    generation: int
    date_range: Optional[DateRange] = None
    camera_count: int
    page: Page
    totals: Dict[str, DirectionTotals]
    chart: ChartDataset
    gates: List[GateGroup]
