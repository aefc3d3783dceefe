from typing import Callable, Dict, Iterable, List, Optional, Sequence

from gate_dashboard.core.models import (
    CameraBreakdown,
    CameraSnapshot,
    DirectionTotals,
    GateGroup,
    Totals,
)

DIRECTION_IN = "in"
DIRECTION_OUT = "out"
DEFAULT_VEHICLE_TYPES = ("car", "motorcycle", "bus")

ReportUrlBuilder = Callable[[CameraSnapshot], Optional[str]]


def first_match_count(snapshot: CameraSnapshot, vehicle_type: str, direction: str) -> int:
    """Count of the first detail matching type and direction; later duplicates are ignored."""

    for detail in snapshot.details:
        if detail.vehicle_type_name == vehicle_type and detail.direction_type_name == direction:
            return detail.count
    return 0


def _direction_totals(snapshot: CameraSnapshot, vehicle_type: str) -> DirectionTotals:
    return DirectionTotals(
        inbound=first_match_count(snapshot, vehicle_type, DIRECTION_IN),
        outbound=first_match_count(snapshot, vehicle_type, DIRECTION_OUT),
    )


def global_totals(
    snapshots: Iterable[CameraSnapshot],
    vehicle_types: Sequence[str] = DEFAULT_VEHICLE_TYPES,
) -> Totals:
    totals: Dict[str, DirectionTotals] = {
        vehicle_type: DirectionTotals() for vehicle_type in vehicle_types
    }
    for snapshot in snapshots:
        for vehicle_type in vehicle_types:
            current = totals[vehicle_type]
            camera = _direction_totals(snapshot, vehicle_type)
            totals[vehicle_type] = DirectionTotals(
                inbound=current.inbound + camera.inbound,
                outbound=current.outbound + camera.outbound,
            )
    return totals


def find_camera(snapshots: Iterable[CameraSnapshot], camera_id: int) -> Optional[CameraSnapshot]:
    for snapshot in snapshots:
        if snapshot.camera_id == camera_id:
            return snapshot
    return None


def camera_vehicle_count(
    snapshots: Iterable[CameraSnapshot],
    camera_id: int,
    vehicle_type: str,
    direction: str,
) -> int:
    camera = find_camera(snapshots, camera_id)
    if camera is None:
        return 0
    return first_match_count(camera, vehicle_type, direction)


def group_by_gate(
    snapshots: Sequence[CameraSnapshot],
    gate_ids: Iterable[int],
    vehicle_types: Sequence[str] = DEFAULT_VEHICLE_TYPES,
    report_url_builder: Optional[ReportUrlBuilder] = None,
) -> List[GateGroup]:
    """Per-gate camera grid; configured gates with no cameras get an empty group."""

    groups: List[GateGroup] = []
    for gate_id in gate_ids:
        cameras: List[CameraBreakdown] = []
        for snapshot in snapshots:
            if snapshot.gate_id != gate_id:
                continue
            cameras.append(
                CameraBreakdown(
                    camera_id=snapshot.camera_id,
                    gate_id=snapshot.gate_id,
                    counts={
                        vehicle_type: _direction_totals(snapshot, vehicle_type)
                        for vehicle_type in vehicle_types
                    },
                    report_url=report_url_builder(snapshot) if report_url_builder else None,
                )
            )
        groups.append(GateGroup(gate_id=gate_id, cameras=cameras))
    return groups
