import logging
from typing import Dict, List, Optional, Sequence

from gate_dashboard.core.aggregator import (
    DEFAULT_VEHICLE_TYPES,
    camera_vehicle_count,
    global_totals,
    group_by_gate,
)
from gate_dashboard.core.chart import build_chart_dataset
from gate_dashboard.core.errors import FetchError
from gate_dashboard.core.flattener import flatten_rows
from gate_dashboard.core.models import (
    CameraSnapshot,
    ChartDataset,
    DashboardView,
    DateRange,
    DirectionTotals,
    FlatRow,
    GateGroup,
    LiveSnapshot,
    Page,
)
from gate_dashboard.core.paginator import Paginator
from gate_dashboard.core.snapshot_store import SnapshotStore
from gate_dashboard.services.fetch_coordinator import FetchCoordinator


logger = logging.getLogger(__name__)


class DashboardService:
    """Run gate queries and derive every dashboard view from the live snapshot."""

    def __init__(
        self,
        coordinator: FetchCoordinator,
        store: Optional[SnapshotStore] = None,
        paginator: Optional[Paginator] = None,
        vehicle_types: Sequence[str] = DEFAULT_VEHICLE_TYPES,
        labels: Optional[Dict[str, str]] = None,
        report_url_template: Optional[str] = None,
    ) -> None:
        self.coordinator = coordinator
        self.store = store or SnapshotStore()
        self.paginator = paginator or Paginator()
        self.vehicle_types = list(vehicle_types)
        self.labels = dict(labels or {})
        self.report_url_template = report_url_template

    async def query(self, start: Optional[str], stop: Optional[str]) -> bool:
        """Fetch all gates for the range and commit unless a newer query started meanwhile."""

        date_range = DateRange(start=start, stop=stop)
        self.coordinator.validate(date_range)
        generation = self.store.begin_query()
        try:
            cameras = await self.coordinator.fetch_all(date_range)
        except FetchError:
            if generation != self.store.generation:
                logger.debug("Ignoring failure of superseded query (generation %d)", generation)
                return False
            raise
        committed = self.store.commit(generation, cameras, date_range)
        if committed:
            logger.info(
                "Loaded %d cameras for %s..%s (generation %d)",
                len(cameras),
                date_range.start,
                date_range.stop,
                generation,
            )
        return committed

    def snapshot(self) -> LiveSnapshot:
        return self.store.current()

    def _live(self, live: Optional[LiveSnapshot]) -> LiveSnapshot:
        return live if live is not None else self.store.current()

    def rows(self, live: Optional[LiveSnapshot] = None) -> List[FlatRow]:
        live = self._live(live)
        return flatten_rows(live.cameras)

    def page(self, page: int = 1, live: Optional[LiveSnapshot] = None) -> Page:
        return self.paginator.paginate(self.rows(live), page)

    def totals(self, live: Optional[LiveSnapshot] = None) -> Dict[str, DirectionTotals]:
        live = self._live(live)
        return global_totals(live.cameras, self.vehicle_types)

    def chart(self, live: Optional[LiveSnapshot] = None) -> ChartDataset:
        return build_chart_dataset(self.totals(live), self.vehicle_types, self.labels)

    def gates(self, live: Optional[LiveSnapshot] = None) -> List[GateGroup]:
        live = self._live(live)

        def _report_url(camera: CameraSnapshot) -> Optional[str]:
            if not self.report_url_template:
                return None
            date_range = live.date_range or DateRange()
            return self.report_url_template.format(
                camera_id=camera.camera_id,
                gate_id=camera.gate_id,
                start=date_range.start or camera.start,
                stop=date_range.stop or camera.stop,
            )

        return group_by_gate(
            live.cameras,
            self.coordinator.gate_ids,
            self.vehicle_types,
            report_url_builder=_report_url,
        )

    def camera_count(self, camera_id: int, vehicle_type: str, direction: str) -> int:
        return camera_vehicle_count(self.store.current().cameras, camera_id, vehicle_type, direction)

    def view(self, page: int = 1) -> DashboardView:
        live = self.store.current()
        totals = self.totals(live)
        return DashboardView(
            generation=live.generation,
            date_range=live.date_range,
            camera_count=len(live.cameras),
            page=self.page(page, live),
            totals=totals,
            chart=build_chart_dataset(totals, self.vehicle_types, self.labels),
            gates=self.gates(live),
        )

    def close(self) -> None:
        self.coordinator.client.close()
