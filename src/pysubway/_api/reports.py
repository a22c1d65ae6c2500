"""Community report endpoints.

Endpoints:
  - GET  /api/reports/{line}
  - GET  /api/reports/recent?limit=N
  - POST /api/reports
  - POST /api/reports/{id}/upvote
"""

from __future__ import annotations

from typing import Any

from pysubway._api._common import path_segment, validate_list, validate_model
from pysubway._transport import Transport
from pysubway.exceptions import SubwayValidationError
from pysubway.models.report import IssueType, Report, ReportRequest, UpvoteAck


async def fetch_reports_for_line(transport: Transport, line: str) -> list[Report]:
    """Reports for *line* within the server's two-hour window, newest first."""
    endpoint = f"/api/reports/{path_segment(line)}"
    payload = await transport.get_json(endpoint)
    return validate_list(endpoint, Report, payload)


async def fetch_recent_reports(transport: Transport, limit: int) -> list[Report]:
    endpoint = "/api/reports/recent"
    payload = await transport.get_json(endpoint, {"limit": limit})
    return validate_list(endpoint, Report, payload)


async def submit_report(
    transport: Transport,
    line: str,
    issue_type: IssueType | str,
    description: str = "",
) -> Report:
    endpoint = "/api/reports"
    issue = IssueType(issue_type)
    if issue is IssueType.UNKNOWN:
        raise SubwayValidationError(f"unknown issue type {issue_type!r}", field="issue_type")
    request = ReportRequest(line=line, issue_type=issue, description=description)
    payload = await transport.post_json(endpoint, request.model_dump())
    return validate_model(endpoint, Report, payload)


async def upvote_report(transport: Transport, report_id: int) -> UpvoteAck:
    endpoint = f"/api/reports/{path_segment(report_id)}/upvote"
    payload: Any = await transport.post_json(endpoint)
    # An empty 2xx body (e.g. 204) arrives as None and is a bare ack.
    if payload is None:
        payload = {}
    return validate_model(endpoint, UpvoteAck, payload)
