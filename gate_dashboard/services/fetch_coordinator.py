import asyncio
import logging
from typing import Iterable, List

from gate_dashboard.adapters.gate_client import GateClient
from gate_dashboard.core.errors import FetchError, MissingDateRange
from gate_dashboard.core.models import CameraSnapshot, DateRange


logger = logging.getLogger(__name__)


class FetchCoordinator:
    """Fan out one fetch per gate and merge the results in gate-id order."""

    def __init__(self, client: GateClient, gate_ids: Iterable[int]) -> None:
        self.client = client
        self.gate_ids: List[int] = sorted(set(gate_ids))

    @staticmethod
    def validate(date_range: DateRange) -> None:
        if not date_range.is_complete():
            raise MissingDateRange()

    async def fetch_all(self, date_range: DateRange) -> List[CameraSnapshot]:
        self.validate(date_range)
        try:
            results = await asyncio.gather(
                *(self.client.fetch_gate_async(gate_id, date_range) for gate_id in self.gate_ids)
            )
        except Exception as exc:
            logger.exception("Fetching gates %s failed", self.gate_ids)
            raise FetchError(cause=exc) from exc

        merged: List[CameraSnapshot] = []
        for gate_id, cameras in zip(self.gate_ids, results):
            logger.debug("Gate %d contributed %d cameras", gate_id, len(cameras))
            merged.extend(cameras)
        return merged
