from typing import Mapping, Optional, Sequence

from gate_dashboard.core.aggregator import DEFAULT_VEHICLE_TYPES, DIRECTION_IN, DIRECTION_OUT
from gate_dashboard.core.models import ChartDataset, ChartSeries, DirectionTotals

SERIES_COLORS = {
    DIRECTION_IN: "#3b82f6",
    DIRECTION_OUT: "#ef4444",
}


def build_chart_dataset(
    totals: Mapping[str, DirectionTotals],
    categories: Sequence[str] = DEFAULT_VEHICLE_TYPES,
    labels: Optional[Mapping[str, str]] = None,
) -> ChartDataset:
    """Grouped bar input: one category per vehicle type, one series per direction."""

    labels = labels or {}
    empty = DirectionTotals()
    inbound = [totals.get(category, empty).inbound for category in categories]
    outbound = [totals.get(category, empty).outbound for category in categories]
    return ChartDataset(
        categories=list(categories),
        labels=[labels.get(category, category) for category in categories],
        series=[
            ChartSeries(
                name=DIRECTION_IN,
                label=labels.get(DIRECTION_IN, DIRECTION_IN),
                color=SERIES_COLORS[DIRECTION_IN],
                data=inbound,
            ),
            ChartSeries(
                name=DIRECTION_OUT,
                label=labels.get(DIRECTION_OUT, DIRECTION_OUT),
                color=SERIES_COLORS[DIRECTION_OUT],
                data=outbound,
            ),
        ],
    )
