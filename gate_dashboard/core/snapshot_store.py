import logging
from typing import Iterable, Optional

from gate_dashboard.core.models import CameraSnapshot, DateRange, LiveSnapshot


logger = logging.getLogger(__name__)


class SnapshotStore:
    """Hold the live camera snapshot and discard results from superseded queries."""

    def __init__(self) -> None:
        self._generation = 0
        self._live = LiveSnapshot()

    @property
    def generation(self) -> int:
        return self._generation

    def begin_query(self) -> int:
        self._generation += 1
        return self._generation

    def commit(
        self,
        generation: int,
        cameras: Iterable[CameraSnapshot],
        date_range: Optional[DateRange] = None,
    ) -> bool:
        if generation != self._generation:
            logger.debug(
                "Discarding stale snapshot for generation %d (current %d)",
                generation,
                self._generation,
            )
            return False
        self._live = LiveSnapshot(
            generation=generation,
            date_range=date_range,
            cameras=tuple(cameras),
        )
        return True

    def current(self) -> LiveSnapshot:
        return self._live

    def reset(self) -> None:
        self._generation = 0
        self._live = LiveSnapshot()
