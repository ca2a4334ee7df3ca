"""Snapshot source reading the latest robot status row over REST.

Query shape (PostgREST)::

    GET /rest/v1/<table>?select=*&user_id=eq.<id>&order=created_at.desc&limit=1

Columns the source understands: ``mapped_area``, ``obstacles``,
``last_updated``, ``robot_x``, ``robot_y`` and, when the backend provides
them as JSON columns, ``zones`` and ``cleaned_areas``. Missing columns
are absent snapshot fields, so the map keeps its previous values.
"""

from __future__ import annotations

import logging
from typing import Any

from pyrobovac._constants import NO_ROWS_CODE
from pyrobovac._transport import Transport
from pyrobovac.config import RobovacConfig
from pyrobovac.exceptions import RobovacApiError, RobovacAuthenticationError, RobovacTransportError
from pyrobovac.models.snapshot import Snapshot

_logger = logging.getLogger(__name__)


class RestSnapshotSource:
    """Fetches the most recent status row of the signed-in user."""

    def __init__(self, config: RobovacConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"/rest/v1/{self._config.status_table}"

    def _params(self, user_id: str) -> dict[str, str]:
        return {
            "select": "*",
            "user_id": f"eq.{user_id}",
            "order": "created_at.desc",
            "limit": "1",
        }

    async def fetch_snapshot(self) -> Snapshot:
        user_id = self._config.user_id
        if not user_id:
            raise RobovacAuthenticationError("No authenticated user", endpoint=self.endpoint)

        try:
            rows: Any = await self._transport.get_json(self.endpoint, self._params(user_id))
        except RobovacApiError as exc:
            if exc.code != NO_ROWS_CODE:
                raise
            rows = []

        if isinstance(rows, dict):
            rows = [rows]
        if rows is None:
            rows = []
        if not isinstance(rows, list):
            raise RobovacTransportError(
                f"Unexpected payload from {self.endpoint}: {type(rows).__name__}",
                endpoint=self.endpoint,
            )
        if not rows:
            _logger.debug("No status rows for user; returning empty snapshot")
            return Snapshot()

        row = rows[0]
        if not isinstance(row, dict):
            raise RobovacTransportError(f"Malformed status row from {self.endpoint}", endpoint=self.endpoint)
        return Snapshot.model_validate(row)
