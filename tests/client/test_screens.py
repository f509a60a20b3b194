from unittest.mock import MagicMock

import pytest

from sportsmeet.client.alerts import AlertSink
from sportsmeet.client.errors import ApiError
from sportsmeet.client.participant_client import ParticipantClient
from sportsmeet.client.screens import (
    ACCEPTED_TAB, ALL_TAB, DECLINE_MESSAGE, PENDING_TAB, WELCOME_MESSAGE,
    ManageParticipants, PendingRequestsInbox,
)


def request(request_id, post_id=5, name="Alice"):
    return {"id": request_id, "status": "PENDING", "user": {"name": name}, "sports_post": {"id": post_id}}


@pytest.fixture
def api():
    api = MagicMock(spec=ParticipantClient)
    api.get_pending_requests.return_value = {"content": [request(1)]}
    api.get_accepted_participants.return_value = [{"id": 2, "status": "ACCEPTED", "user": {"name": "Bob"}}]
    api.get_participants.return_value = {"data": {"content": [request(1), {"id": 2, "status": "ACCEPTED"}]}}
    return api


class TestManageParticipants:

    def test_load_fills_three_lists(self, api):
        screen = ManageParticipants(5, api)

        assert screen.load() is True

        assert [p["id"] for p in screen.pending_requests] == [1]
        assert [p["id"] for p in screen.accepted_participants] == [2]
        assert [p["id"] for p in screen.all_participants] == [1, 2]
        assert screen.errors == {}
        assert screen.loading is False

    def test_one_failing_list_raises_one_alert(self, api):
        api.get_accepted_participants.side_effect = ApiError("Could not load the accepted participants")
        alerts = AlertSink()
        screen = ManageParticipants(5, api, alerts)

        assert screen.load() is False

        assert screen.accepted_participants == []
        assert [p["id"] for p in screen.pending_requests] == [1]
        assert screen.errors == {ACCEPTED_TAB: "Could not load the accepted participants"}
        assert len(alerts.alerts) == 1

    def test_tab_switch_does_not_refetch_by_default(self, api):
        screen = ManageParticipants(5, api)
        screen.load()
        api.get_participants.return_value = []

        items = screen.select_tab(ALL_TAB)

        assert len(items) == 2
        assert api.get_participants.call_count == 1

    def test_tab_switch_with_refresh(self, api):
        screen = ManageParticipants(5, api)
        screen.load()
        api.get_participants.return_value = []

        assert screen.select_tab(ALL_TAB, refresh=True) == []
        assert screen.active_tab == ALL_TAB

    def test_unknown_tab(self, api):
        with pytest.raises(ValueError):
            ManageParticipants(5, api).select_tab("waitlist")

    def test_respond_reloads_lists(self, api):
        alerts = AlertSink()
        screen = ManageParticipants(5, api, alerts)
        screen.load()
        api.get_pending_requests.return_value = {"content": []}

        assert screen.respond(request(1), True, "Welcome") is True

        api.respond_to_join_request.assert_called_once_with(5, 1, True, "Welcome")
        assert screen.pending_requests == []
        assert alerts.last == ("Success", "Request from Alice accepted")
        assert screen.processing_id is None

    def test_respond_failure(self, api):
        api.respond_to_join_request.side_effect = ApiError("Join request has already been accepted", status_code=409)
        alerts = AlertSink()
        screen = ManageParticipants(5, api, alerts)
        screen.load()

        assert screen.respond(request(1), False) is False

        assert alerts.last == ("Error", "Join request has already been accepted")
        assert api.get_pending_requests.call_count == 1
        assert screen.processing_id is None

    def test_refresh_flag_resets(self, api):
        screen = ManageParticipants(5, api)

        screen.refresh()

        assert screen.refreshing is False
        assert screen.active_tab == PENDING_TAB


class TestPendingRequestsInbox:

    def test_full_page_means_more(self, api):
        api.get_all_pending_requests_for_current_user.return_value = {"content": [request(i) for i in range(3)]}
        inbox = PendingRequestsInbox(api, page_size=3)

        inbox.load()

        assert len(inbox.requests) == 3
        assert inbox.has_more is True
        api.get_all_pending_requests_for_current_user.assert_called_once_with(0, 3)

    def test_load_more_appends(self, api):
        api.get_all_pending_requests_for_current_user.side_effect = [
            {"content": [request(1), request(2)]},
            [request(3)],
        ]
        inbox = PendingRequestsInbox(api, page_size=2)
        inbox.load()

        assert inbox.load_more() is True

        assert [r["id"] for r in inbox.requests] == [1, 2, 3]
        assert inbox.page == 1
        assert inbox.has_more is False
        assert inbox.load_more() is False

    def test_refresh_replaces(self, api):
        api.get_all_pending_requests_for_current_user.side_effect = [
            {"content": [request(1)]},
            {"content": [request(9)]},
        ]
        inbox = PendingRequestsInbox(api)
        inbox.load()

        inbox.refresh()

        assert [r["id"] for r in inbox.requests] == [9]
        assert inbox.refreshing is False

    def test_load_failure_alerts(self, api):
        api.get_all_pending_requests_for_current_user.side_effect = ApiError("Could not load the pending requests")
        alerts = AlertSink()
        inbox = PendingRequestsInbox(api, alerts)

        assert inbox.load() is False

        assert inbox.requests == []
        assert inbox.loading is False
        assert alerts.last.title == "Error"

    def test_approve_removes_request(self, api):
        api.get_all_pending_requests_for_current_user.return_value = {"content": [request(1, post_id=7), request(2)]}
        alerts = AlertSink()
        inbox = PendingRequestsInbox(api, alerts)
        inbox.load()

        assert inbox.respond(inbox.requests[0], True) is True

        api.respond_to_join_request.assert_called_once_with(7, 1, True, WELCOME_MESSAGE)
        assert [r["id"] for r in inbox.requests] == [2]
        assert alerts.last.message == "Request from Alice accepted"

    def test_decline_uses_post_id_fallback(self, api):
        flat = {"id": 4, "post_id": 8, "name": "Carol"}
        api.get_all_pending_requests_for_current_user.return_value = [flat]
        inbox = PendingRequestsInbox(api)
        inbox.load()

        inbox.respond(flat, False)

        api.respond_to_join_request.assert_called_once_with(8, 4, False, DECLINE_MESSAGE)
        assert inbox.requests == []

    def test_failed_response_keeps_request(self, api):
        api.get_all_pending_requests_for_current_user.return_value = {"content": [request(1)]}
        api.respond_to_join_request.side_effect = ApiError("This sports post is already full")
        inbox = PendingRequestsInbox(api)
        inbox.load()

        assert inbox.respond(inbox.requests[0], True) is False

        assert [r["id"] for r in inbox.requests] == [1]
        assert inbox.processing_id is None
