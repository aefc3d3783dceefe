import asyncio
import json
from typing import Dict, List
from unittest.mock import MagicMock

import pytest

from gate_dashboard.app.factory import build_service
from gate_dashboard.app.settings import load_settings
from gate_dashboard.core.errors import FetchError, MissingDateRange
from gate_dashboard.core.models import CameraSnapshot, DateRange
from gate_dashboard.services.dashboard_service import DashboardService
from gate_dashboard.services.fetch_coordinator import FetchCoordinator


def _response(body: str) -> MagicMock:
    response = MagicMock()
    response.ok = True
    response.status_code = 200
    response.text = body
    return response


def gate_one_session() -> MagicMock:
    gate_one = [
        {
            "data": [
                {
                    "gate_id": 1,
                    "camera_id": 101,
                    "start": "2025-11-04",
                    "stop": "2025-11-04",
                    "details": [
                        {"vehicle_type_id": 1, "vehicle_type_name": "car", "direction_type_id": 1, "direction_type_name": "in", "count": 5},
                        {"vehicle_type_id": 1, "vehicle_type_name": "car", "direction_type_id": 2, "direction_type_name": "out", "count": 3},
                        {"vehicle_type_id": 3, "vehicle_type_name": "bus", "direction_type_id": 1, "direction_type_name": "in", "count": 1},
                    ],
                }
            ]
        }
    ]

    def fake_get(url, params, timeout):
        if params["id"] == 1:
            return _response(json.dumps(gate_one))
        return _response("")

    session = MagicMock()
    session.get.side_effect = fake_get
    return session


def test_four_gate_end_to_end_scenario() -> None:
    settings = load_settings(gate_ids=[1, 2, 3, 4], initial_query_on_startup=False)
    session = gate_one_session()
    service = build_service(settings, session=session)

    committed = asyncio.run(service.query("2025-11-04", "2025-11-04"))

    assert committed
    assert session.get.call_count == 4
    view = service.view()
    assert view.camera_count == 1
    assert len(service.rows()) == 3
    assert view.totals["car"].total == 8
    assert view.totals["bus"].total == 1
    assert view.chart.categories == ["car", "motorcycle", "bus"]
    assert view.chart.series[0].name == "in"
    assert view.chart.series[0].data == [5, 0, 1]
    assert view.chart.series[1].name == "out"
    assert view.chart.series[1].data == [3, 0, 0]
    assert view.page.total_pages == 1
    assert [group.gate_id for group in view.gates] == [1, 2, 3, 4]
    assert view.gates[0].cameras[0].report_url == "/report?cameraId=101&start=2025-11-04&stop=2025-11-04"
    assert service.camera_count(101, "car", "out") == 3
    assert service.camera_count(999, "car", "out") == 0


def test_missing_date_keeps_previous_snapshot() -> None:
    settings = load_settings(initial_query_on_startup=False)
    session = gate_one_session()
    service = build_service(settings, session=session)
    asyncio.run(service.query("2025-11-04", "2025-11-04"))
    generation = service.snapshot().generation
    session.get.reset_mock()

    with pytest.raises(MissingDateRange):
        asyncio.run(service.query("2025-11-04", None))

    session.get.assert_not_called()
    assert service.snapshot().generation == generation
    assert service.view().camera_count == 1


class GatedClient:
    """Holds the first query open until released so a second query can overtake it."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.calls = 0

    async def fetch_gate_async(self, gate_id: int, date_range: DateRange) -> List[CameraSnapshot]:
        self.calls += 1
        if date_range.start == "2025-01-01":
            await self.release.wait()
        return [
            CameraSnapshot(gate_id=gate_id, camera_id=int(date_range.start[-2:]), start=date_range.start, stop=date_range.stop)
        ]

    def close(self) -> None:
        pass


def test_superseded_query_is_discarded() -> None:
    async def scenario() -> Dict[str, bool]:
        client = GatedClient()
        service = DashboardService(FetchCoordinator(client, [1]))
        slow = asyncio.create_task(service.query("2025-01-01", "2025-01-01"))
        await asyncio.sleep(0)
        fast = await service.query("2025-01-02", "2025-01-02")
        client.release.set()
        stale = await slow
        return {"fast": fast, "stale": stale, "camera": service.snapshot().cameras[0].camera_id}

    outcome = asyncio.run(scenario())

    assert outcome["fast"] is True
    assert outcome["stale"] is False
    assert outcome["camera"] == 2


class FailingGatedClient(GatedClient):
    """Like GatedClient, but the held-open query fails once released."""

    async def fetch_gate_async(self, gate_id: int, date_range: DateRange) -> List[CameraSnapshot]:
        cameras = await super().fetch_gate_async(gate_id, date_range)
        if date_range.start == "2025-01-01":
            raise RuntimeError("gate connection pool crashed")
        return cameras


def test_superseded_query_failure_is_discarded() -> None:
    async def scenario() -> Dict[str, object]:
        client = FailingGatedClient()
        service = DashboardService(FetchCoordinator(client, [1]))
        slow = asyncio.create_task(service.query("2025-01-01", "2025-01-01"))
        await asyncio.sleep(0)
        fast = await service.query("2025-01-02", "2025-01-02")
        client.release.set()
        stale = await slow
        return {"fast": fast, "stale": stale, "camera": service.snapshot().cameras[0].camera_id}

    outcome = asyncio.run(scenario())

    assert outcome["fast"] is True
    assert outcome["stale"] is False
    assert outcome["camera"] == 2


def test_current_query_failure_raises_fetch_error() -> None:
    client = FailingGatedClient()
    client.release.set()
    service = DashboardService(FetchCoordinator(client, [1]))

    with pytest.raises(FetchError):
        asyncio.run(service.query("2025-01-01", "2025-01-01"))

    assert service.snapshot().cameras == ()


def test_empty_snapshot_views() -> None:
    service = DashboardService(FetchCoordinator(GatedClient(), [1, 2]))

    view = service.view(3)

    assert view.generation == 0
    assert view.page.rows == []
    assert view.page.page_number == 1
    assert view.page.total_pages == 0
    assert all(item.total == 0 for item in view.totals.values())
    assert [group.cameras for group in view.gates] == [[], []]
