from gate_dashboard.core.models import CameraSnapshot, DateRange
from gate_dashboard.core.snapshot_store import SnapshotStore


def _camera(camera_id: int) -> CameraSnapshot:
    return CameraSnapshot(gate_id=1, camera_id=camera_id, start="2025-11-04", stop="2025-11-04")


def test_store_starts_empty() -> None:
    store = SnapshotStore()

    live = store.current()

    assert live.generation == 0
    assert live.cameras == ()
    assert live.date_range is None


def test_commit_replaces_snapshot_for_current_generation() -> None:
    store = SnapshotStore()
    generation = store.begin_query()
    cameras = [_camera(1), _camera(2)]

    assert store.commit(generation, cameras, DateRange(start="2025-11-04", stop="2025-11-05"))

    cameras.append(_camera(3))
    live = store.current()
    assert live.generation == generation
    assert [camera.camera_id for camera in live.cameras] == [1, 2]
    assert live.date_range.stop == "2025-11-05"


def test_stale_generation_is_discarded() -> None:
    store = SnapshotStore()
    stale = store.begin_query()
    latest = store.begin_query()

    assert store.commit(latest, [_camera(2)])
    assert not store.commit(stale, [_camera(1)])

    assert [camera.camera_id for camera in store.current().cameras] == [2]


def test_reset_clears_state() -> None:
    store = SnapshotStore()
    store.commit(store.begin_query(), [_camera(1)])

    store.reset()

    assert store.generation == 0
    assert store.current().cameras == ()
