"""Line delay endpoints.

Endpoints:
  - GET /api/lines
  - GET /api/stats
"""

from __future__ import annotations

from pysubway._api._common import validate_list, validate_model
from pysubway._transport import Transport
from pysubway.models.line import LineStatus
from pysubway.models.stats import Stats


async def fetch_lines(transport: Transport) -> list[LineStatus]:
    """Per-line aggregates in server order (most delayed first)."""
    endpoint = "/api/lines"
    payload = await transport.get_json(endpoint)
    return validate_list(endpoint, LineStatus, payload)


async def fetch_stats(transport: Transport) -> Stats:
    endpoint = "/api/stats"
    payload = await transport.get_json(endpoint)
    return validate_model(endpoint, Stats, payload)
