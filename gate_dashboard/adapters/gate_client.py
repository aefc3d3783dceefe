"""HTTP access to the per-gate vehicle count endpoint."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, List, Optional

import requests
from requests.adapters import HTTPAdapter
from pydantic import ValidationError

from gate_dashboard.core.models import CameraSnapshot, DateRange, GateResponse

LOGGER = logging.getLogger(__name__)

VEHICLE_COUNT_PATH = "/vehicle_count/all"
DEFAULT_POOL_SIZE = 10


class GateClient:
    """Fetch one gate's camera snapshots, degrading every failure to an empty list."""

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        pool_size: int = DEFAULT_POOL_SIZE,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or self._build_session(pool_size)

    @staticmethod
    def _build_session(pool_size: int) -> requests.Session:
        # One pooled connection per concurrent gate fetch sharing this session.
        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=max(pool_size, 1), pool_maxsize=max(pool_size, 1))
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{VEHICLE_COUNT_PATH}"

    def fetch_gate(self, gate_id: int, date_range: DateRange) -> List[CameraSnapshot]:
        params = {
            "type": "gate",
            "id": gate_id,
            "start": date_range.start,
            "stop": date_range.stop,
        }
        try:
            response = self._session.get(self.endpoint, params=params, timeout=self.timeout)
            if not response.ok:
                raise requests.HTTPError(f"Received status {response.status_code}")
            text = response.text
        except requests.RequestException as exc:
            LOGGER.warning("Failed to fetch gate %d: %s", gate_id, exc)
            return []

        if not text or not text.strip():
            LOGGER.info("Gate %d returned an empty body", gate_id)
            return []

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Gate %d returned undecodable JSON: %s", gate_id, exc)
            return []

        return self._extract(gate_id, payload)

    async def fetch_gate_async(self, gate_id: int, date_range: DateRange) -> List[CameraSnapshot]:
        return await asyncio.to_thread(self.fetch_gate, gate_id, date_range)

    def close(self) -> None:
        self._session.close()

    @staticmethod
    def _extract(gate_id: int, payload: Any) -> List[CameraSnapshot]:
        if not isinstance(payload, list) or not payload:
            return []
        first = payload[0]
        if not isinstance(first, dict):
            return []
        try:
            envelope = GateResponse.model_validate(first)
        except ValidationError as exc:
            LOGGER.warning("Gate %d returned records that failed validation: %s", gate_id, exc)
            return []
        LOGGER.debug("Gate %d returned %d cameras", gate_id, len(envelope.data))
        return list(envelope.data)
