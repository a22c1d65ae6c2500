from __future__ import annotations

import asyncio

import pytest
from conftest import FakeBackend

from pysubway.catalog import LineCatalog
from pysubway.client import SubwayClient
from pysubway.exceptions import SubwayError, SubwayNetworkError, SubwayValidationError
from pysubway.models.report import IssueType
from pysubway.session import InteractionSession, SessionState
from pysubway.subscription import SubscriptionState


@pytest.fixture
def session(client: SubwayClient, catalog: LineCatalog) -> InteractionSession:
    return InteractionSession(client, catalog)


@pytest.mark.asyncio
async def test_open_loads_reports_and_alerts(backend: FakeBackend, session: InteractionSession) -> None:
    backend.add_report("A", "major_delay", "Stuck at 59 St")
    backend.add_report("C", "overcrowding")
    backend.add_alert("A", "Trains are running with delays")

    await session.open("A")

    assert session.is_open
    assert session.line == "A"
    assert session.state is SessionState.IDLE
    assert [report.description for report in session.reports] == ["Stuck at 59 St"]
    assert [alert.header for alert in session.alerts] == ["Trains are running with delays"]
    assert backend.count("GET", "/api/reports/A") == 1
    assert backend.count("GET", "/api/alerts/A") == 1


@pytest.mark.asyncio
async def test_open_unknown_line_raises_without_request(backend: FakeBackend, session: InteractionSession) -> None:
    with pytest.raises(SubwayValidationError):
        await session.open("X")
    assert backend.calls == []
    assert session.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_failed_detail_fetch_leaves_slice_empty(backend: FakeBackend, session: InteractionSession) -> None:
    backend.add_report("A")
    backend.failures["/api/alerts/A"] = SubwayNetworkError("down", endpoint="/api/alerts/A")

    await session.open("A")

    assert len(session.reports) == 1
    assert session.alerts == ()


@pytest.mark.asyncio
async def test_reopening_resets_the_draft(session: InteractionSession) -> None:
    await session.open("A")
    session.update_draft(issue_type=IssueType.MECHANICAL, description="door stuck")

    await session.open("G")

    assert session.line == "G"
    assert session.draft is not None
    assert session.draft.issue_type is IssueType.MINOR_DELAY
    assert session.draft.description == ""


@pytest.mark.asyncio
async def test_update_draft_rejects_unknown_issue_type(session: InteractionSession) -> None:
    await session.open("A")
    with pytest.raises(SubwayValidationError):
        session.update_draft(issue_type="teleporter_outage")
    assert session.draft is not None and session.draft.issue_type is IssueType.MINOR_DELAY


@pytest.mark.asyncio
async def test_close_during_open_discards_late_results(backend: FakeBackend, session: InteractionSession) -> None:
    backend.add_report("A")
    release = asyncio.Event()
    backend.holds["/api/reports/A"] = release

    opening = asyncio.create_task(session.open("A"))
    await asyncio.sleep(0.01)
    session.close()
    release.set()
    await opening

    assert session.state is SessionState.CLOSED
    assert session.reports == ()
    assert session.alerts == ()


@pytest.mark.asyncio
async def test_switching_lines_drops_previous_line_results(backend: FakeBackend, session: InteractionSession) -> None:
    backend.add_report("A", description="from A")
    backend.add_report("C", description="from C")
    release = asyncio.Event()
    backend.holds["/api/reports/A"] = release

    opening_a = asyncio.create_task(session.open("A"))
    await asyncio.sleep(0.01)
    await session.open("C")
    release.set()
    await opening_a

    assert session.line == "C"
    assert [report.description for report in session.reports] == ["from C"]


@pytest.mark.asyncio
async def test_submit_shows_new_report_without_reopening(backend: FakeBackend, session: InteractionSession) -> None:
    await session.open("A")
    session.update_draft(issue_type="major_delay", description="Signal problem at Jay St")

    report = await session.submit_report()

    assert report is not None
    assert report.line == "A"
    assert report.issue_type is IssueType.MAJOR_DELAY
    assert session.state is SessionState.SUBMITTED
    assert [r.id for r in session.reports] == [report.id]
    assert backend.count("POST", "/api/reports") == 1
    assert backend.count("GET", "/api/reports/A") == 2

    session.submit_another()
    assert session.state is SessionState.IDLE


@pytest.mark.asyncio
async def test_submit_refreshes_the_feed(client: SubwayClient, catalog: LineCatalog) -> None:
    refreshed: list[bool] = []

    async def refresh_feed() -> None:
        refreshed.append(True)

    session = InteractionSession(client, catalog, feed_refresher=refresh_feed)
    await session.open("Q")
    await session.submit_report()

    assert refreshed == [True]


@pytest.mark.asyncio
async def test_failed_submit_keeps_the_draft(backend: FakeBackend, session: InteractionSession) -> None:
    await session.open("A")
    session.update_draft(issue_type="overcrowding", description="packed")
    backend.failures["/api/reports"] = SubwayNetworkError("HTTP 500", status_code=500, endpoint="/api/reports")

    assert await session.submit_report() is None

    assert session.state is SessionState.IDLE
    assert session.draft is not None
    assert session.draft.issue_type is IssueType.OVERCROWDING
    assert session.draft.description == "packed"
    assert isinstance(session.last_error, SubwayNetworkError)

    del backend.failures["/api/reports"]
    assert await session.submit_report() is not None
    assert session.last_error is None


@pytest.mark.asyncio
async def test_submit_is_a_no_op_without_open_line(backend: FakeBackend, session: InteractionSession) -> None:
    assert await session.submit_report() is None
    assert backend.calls == []


@pytest.mark.asyncio
async def test_second_submit_while_confirmed_is_ignored(backend: FakeBackend, session: InteractionSession) -> None:
    await session.open("A")
    await session.submit_report()
    assert await session.submit_report() is None
    assert backend.count("POST", "/api/reports") == 1


@pytest.mark.asyncio
async def test_upvote_twice_sends_one_request(backend: FakeBackend, session: InteractionSession) -> None:
    report = backend.add_report("A", upvotes=2)
    await session.open("A")

    assert await session.upvote(report["id"]) is True
    assert await session.upvote(report["id"]) is False

    assert backend.count("POST", f"/api/reports/{report['id']}/upvote") == 1
    assert session.has_upvoted(report["id"])
    assert session.reports[0].upvotes == 3


@pytest.mark.asyncio
async def test_concurrent_upvotes_send_one_request(backend: FakeBackend, session: InteractionSession) -> None:
    report = backend.add_report("A")

    results = await asyncio.gather(session.upvote(report["id"]), session.upvote(report["id"]))

    assert sorted(results) == [False, True]
    assert backend.count("POST", f"/api/reports/{report['id']}/upvote") == 1


@pytest.mark.asyncio
async def test_failed_upvote_can_be_retried(backend: FakeBackend, session: InteractionSession) -> None:
    report = backend.add_report("A")
    endpoint = f"/api/reports/{report['id']}/upvote"
    backend.failures[endpoint] = SubwayNetworkError("HTTP 503", status_code=503, endpoint=endpoint)

    assert await session.upvote(report["id"]) is False
    assert not session.has_upvoted(report["id"])
    assert session.last_error is not None

    del backend.failures[endpoint]
    assert await session.upvote(report["id"]) is True
    assert backend.count("POST", endpoint) == 2


@pytest.mark.asyncio
async def test_upvoted_set_survives_close(backend: FakeBackend, session: InteractionSession) -> None:
    report = backend.add_report("A")
    await session.open("A")
    await session.upvote(report["id"])
    session.close()

    await session.open("A")

    assert session.upvoted_ids == frozenset({report["id"]})
    assert await session.upvote(report["id"]) is False


@pytest.mark.asyncio
async def test_displayed_upvotes_never_decrease(backend: FakeBackend, session: InteractionSession) -> None:
    report = backend.add_report("A", upvotes=4)
    await session.open("A")
    assert session.reports[0].upvotes == 4

    # A lagging replica answers with an older count.
    report["upvotes"] = 2
    await session.refresh_reports()

    assert session.reports[0].upvotes == 4


@pytest.mark.asyncio
async def test_subscription_flow_is_scoped_to_the_open_line(session: InteractionSession) -> None:
    with pytest.raises(SubwayError):
        session.subscription()

    await session.open("L")
    flow = session.subscription()
    assert flow is session.subscription()
    assert flow.line == "L"
    assert await flow.submit("rider@example.com") is SubscriptionState.SUCCESS

    await session.open("L")
    assert session.subscription() is not flow
    assert session.subscription().state is SubscriptionState.IDLE


@pytest.mark.asyncio
async def test_failing_feed_refresh_does_not_fail_submit(client: SubwayClient, catalog: LineCatalog) -> None:
    async def refresh_feed() -> None:
        raise SubwayNetworkError("HTTP 502", status_code=502, endpoint="/api/reports/recent")

    session = InteractionSession(client, catalog, feed_refresher=refresh_feed)
    await session.open("R")

    assert await session.submit_report() is not None
    assert session.state is SessionState.SUBMITTED
    assert session.last_error is None
