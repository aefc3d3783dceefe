from typing import Iterable, List

from gate_dashboard.core.models import CameraSnapshot, FlatRow


def flatten_rows(snapshots: Iterable[CameraSnapshot]) -> List[FlatRow]:
    """Expand every camera detail into one table row, preserving input order."""

    rows: List[FlatRow] = []
    for snapshot in snapshots:
        for detail in snapshot.details:
            rows.append(
                FlatRow(
                    camera_id=snapshot.camera_id,
                    gate_id=snapshot.gate_id,
                    vehicle_type_id=detail.vehicle_type_id,
                    vehicle_type_name=detail.vehicle_type_name,
                    direction_type_id=detail.direction_type_id,
                    direction_type_name=detail.direction_type_name,
                    count=detail.count,
                )
            )
    return rows
