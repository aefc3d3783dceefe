from typing import Optional

import requests

from gate_dashboard.adapters.gate_client import GateClient
from gate_dashboard.app.settings import DashboardSettings
from gate_dashboard.core.paginator import Paginator
from gate_dashboard.core.snapshot_store import SnapshotStore
from gate_dashboard.services.dashboard_service import DashboardService
from gate_dashboard.services.fetch_coordinator import FetchCoordinator


def build_service(
    settings: DashboardSettings,
    session: Optional[requests.Session] = None,
) -> DashboardService:
    client = GateClient(
        settings.base_url,
        session=session,
        timeout=settings.request_timeout,
        pool_size=len(settings.gate_ids),
    )
    coordinator = FetchCoordinator(client, settings.gate_ids)
    return DashboardService(
        coordinator,
        store=SnapshotStore(),
        paginator=Paginator(settings.page_size),
        vehicle_types=settings.tracked_vehicle_types,
        labels=settings.vehicle_type_labels,
        report_url_template=settings.report_url_template,
    )
