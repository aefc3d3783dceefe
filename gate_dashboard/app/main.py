import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from gate_dashboard.app.factory import build_service
from gate_dashboard.app.logging_setup import setup_logging
from gate_dashboard.app.settings import get_settings
from gate_dashboard.core.errors import DashboardError, FetchError, MissingDateRange
from gate_dashboard.services.dashboard_service import DashboardService


logger = logging.getLogger(__name__)
settings = get_settings()
setup_logging(settings)

dashboard_service = build_service(settings)


class QueryRequest(BaseModel):
    start: Optional[str] = None
    stop: Optional[str] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.initial_query_on_startup:
        today = date.today().isoformat()
        try:
            await dashboard_service.query(today, today)
        except DashboardError as exc:
            logger.warning("Initial dashboard query failed: %s", exc)
    try:
        yield
    finally:
        dashboard_service.close()


app = FastAPI(title="Gate Vehicle Count Dashboard", version="0.1.0", lifespan=lifespan)

# Allow the browser dashboard to call the API during local development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service() -> DashboardService:
    return dashboard_service


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/dashboard/query")
async def dashboard_query(
    request: QueryRequest,
    service: DashboardService = Depends(get_service),
) -> dict:
    try:
        await service.query(request.start, request.stop)
    except MissingDateRange as exc:
        raise HTTPException(status_code=400, detail=exc.user_message) from exc
    except FetchError as exc:
        raise HTTPException(status_code=502, detail=exc.user_message) from exc
    return jsonable_encoder(service.view(1).model_dump(by_alias=True))


@app.get("/dashboard")
async def dashboard_view(
    page: int = Query(default=1, ge=1),
    service: DashboardService = Depends(get_service),
) -> dict:
    return jsonable_encoder(service.view(page).model_dump(by_alias=True))


@app.get("/dashboard/rows")
async def dashboard_rows(
    page: int = Query(default=1, ge=1),
    service: DashboardService = Depends(get_service),
) -> dict:
    return jsonable_encoder(service.page(page).model_dump())


@app.get("/dashboard/totals")
async def dashboard_totals(service: DashboardService = Depends(get_service)) -> dict:
    totals = service.totals()
    return jsonable_encoder(
        {vehicle_type: item.model_dump(by_alias=True) for vehicle_type, item in totals.items()}
    )


@app.get("/dashboard/chart")
async def dashboard_chart(service: DashboardService = Depends(get_service)) -> dict:
    return jsonable_encoder(service.chart().model_dump())


@app.get("/dashboard/gates")
async def dashboard_gates(service: DashboardService = Depends(get_service)) -> list[dict]:
    return jsonable_encoder([group.model_dump(by_alias=True) for group in service.gates()])


@app.get("/dashboard/cameras/{camera_id}/count")
async def camera_count(
    camera_id: int,
    vehicle_type: str = Query(...),
    direction: str = Query(..., pattern="^(in|out)$"),
    service: DashboardService = Depends(get_service),
) -> dict:
    count = service.camera_count(camera_id, vehicle_type, direction)
    return {
        "camera_id": camera_id,
        "vehicle_type": vehicle_type,
        "direction": direction,
        "count": count,
    }
