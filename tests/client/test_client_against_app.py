import pytest

from sportsmeet.client.alerts import AlertSink
from sportsmeet.client.auth_client import AuthClient
from sportsmeet.client.errors import ApiError
from sportsmeet.client.participant_client import ParticipantClient
from sportsmeet.client.post_state import ParticipationState, PostParticipation
from sportsmeet.client.screens import ManageParticipants, PendingRequestsInbox
from sportsmeet.client.token_store import TokenStore
from sportsmeet.schemas.sports_post_schemas import SportsPostRead


def post_payload(post):
    return SportsPostRead.model_validate(post).model_dump(mode="json")


class TestWorkflow:

    def test_manual_approval_round_trip(self, make_user, make_post, api_client_for):
        creator = make_user("Creator")
        alice = make_user("Alice")
        post = make_post(creator, auto_approve=False, max_participants=2)
        payload = post_payload(post)

        participation = PostParticipation(payload, api_client_for(alice))
        participation.join("I play every week")
        assert participation.state == ParticipationState.PENDING
        assert participation.participant_count == 0

        inbox = PendingRequestsInbox(api_client_for(creator))
        inbox.load()
        assert [r["user"]["name"] for r in inbox.requests] == ["Alice"]
        assert inbox.requests[0]["join_message"] == "I play every week"

        assert inbox.respond(inbox.requests[0], True) is True
        assert inbox.requests == []

        participation.refresh()
        assert participation.state == ParticipationState.ACCEPTED
        assert participation.participant_count == 1

        manage = ManageParticipants(post.id, api_client_for(creator))
        manage.load()
        assert manage.pending_requests == []
        assert [p["user"]["name"] for p in manage.accepted_participants] == ["Alice"]
        assert len(manage.all_participants) == 1

    def test_auto_approve_join_and_leave(self, make_user, make_post, api_client_for):
        creator = make_user("Creator")
        alice = make_user("Alice")
        post = make_post(creator, auto_approve=True)
        api = api_client_for(alice)

        participation = PostParticipation(post_payload(post), api)
        participation.join()
        assert participation.is_joined
        assert participation.participant_count == 1
        assert api.count_participants(post.id) == 1

        participation.leave()
        assert participation.state == ParticipationState.NONE
        assert participation.participant_count == 0
        assert api.has_user_joined(post.id) is False

    def test_rejected_request(self, make_user, make_post, api_client_for):
        creator = make_user("Creator")
        alice = make_user("Alice")
        post = make_post(creator)
        participation = PostParticipation(post_payload(post), api_client_for(alice))
        participation.join()

        manage = ManageParticipants(post.id, api_client_for(creator))
        manage.load()
        manage.respond(manage.pending_requests[0], False, "Team is set")

        participation.refresh()
        assert participation.state == ParticipationState.REJECTED
        history = api_client_for(alice).get_participation_history("DECLINED")
        assert history["content"][0]["response_message"] == "Team is set"

    def test_server_error_reaches_alert(self, make_user, make_post, api_client_for):
        creator = make_user("Creator")
        alerts = AlertSink()
        post = make_post(creator)

        participation = PostParticipation(post_payload(post), api_client_for(creator), alerts)
        participation.join()

        assert participation.state == ParticipationState.NONE
        assert alerts.last == ("Error", "You cannot join your own sports post")

    def test_expired_credentials_are_cleared(self, client, make_user, make_post, token_store_for):
        creator = make_user("Creator")
        store = token_store_for(creator)
        store.save("garbage-token")
        api = ParticipantClient(base_url="", token_store=store, http_client=client)

        with pytest.raises(ApiError) as exc_info:
            api.get_all_pending_requests_for_current_user()

        assert exc_info.value.status_code == 401
        assert store.get_access_token() is None


class TestReopeningPost:

    def fetch_post(self, client, post_id, headers=None):
        response = client.get(f"/api/sports-posts/{post_id}", headers=headers or {})
        assert response.status_code == 200
        return response.json()

    def test_joined_user_sees_accepted(self, client, auth_headers, make_user, make_post, api_client_for):
        creator = make_user("Creator")
        alice = make_user("Alice")
        post = make_post(creator, auto_approve=True)
        PostParticipation(post_payload(post), api_client_for(alice)).join()

        payload = self.fetch_post(client, post.id, auth_headers(alice))
        participation = PostParticipation(payload, api_client_for(alice))

        assert payload["participation_status"] == "ACCEPTED"
        assert participation.state == ParticipationState.ACCEPTED
        assert participation.participant_count == 1

    def test_pending_user_sees_pending(self, client, auth_headers, make_user, make_post, api_client_for):
        creator = make_user("Creator")
        alice = make_user("Alice")
        post = make_post(creator)
        api_client_for(alice).join_sports_post(post.id)

        participation = PostParticipation(self.fetch_post(client, post.id, auth_headers(alice)), api_client_for(alice))

        assert participation.state == ParticipationState.PENDING
        assert participation.participant_count == 0

    def test_anonymous_and_other_users_see_no_status(self, client, auth_headers, make_user, make_post, api_client_for):
        creator = make_user("Creator")
        alice = make_user("Alice")
        bob = make_user("Bob")
        post = make_post(creator, auto_approve=True)
        api_client_for(alice).join_sports_post(post.id)

        assert self.fetch_post(client, post.id)["participation_status"] is None
        assert self.fetch_post(client, post.id, auth_headers(bob))["participation_status"] is None
        listed = client.get("/api/sports-posts", headers=auth_headers(alice)).json()
        assert [p["participation_status"] for p in listed] == ["ACCEPTED"]

    def test_join_on_stale_view_keeps_server_count(self, client, make_user, make_post, api_client_for):
        creator = make_user("Creator")
        alice = make_user("Alice")
        post = make_post(creator, auto_approve=True)
        api = api_client_for(alice)
        api.join_sports_post(post.id)

        # Post loaded without the caller's status, as an anonymous listing would be
        stale = self.fetch_post(client, post.id)
        participation = PostParticipation(stale, api)
        assert participation.state == ParticipationState.NONE

        participation.join()

        assert participation.state == ParticipationState.ACCEPTED
        assert participation.participant_count == api.count_participants(post.id) == 1


class TestAuthClient:

    def test_register_and_login_store_token(self, client, tmp_path):
        store = TokenStore(str(tmp_path / "credentials.json"))
        auth = AuthClient(base_url="", token_store=store, http_client=client)

        auth.register("Alice", "alice@example.com", "secret123")
        user = auth.login("alice@example.com", "secret123")

        assert user["email"] == "alice@example.com"
        assert store.get_access_token()
        assert store.get_user_data()["name"] == "Alice"

        auth.logout()
        assert store.get_access_token() is None

    def test_wrong_password(self, client, tmp_path):
        store = TokenStore(str(tmp_path / "credentials.json"))
        auth = AuthClient(base_url="", token_store=store, http_client=client)
        auth.register("Alice", "alice@example.com", "secret123")

        with pytest.raises(ApiError) as exc_info:
            auth.login("alice@example.com", "wrong")

        assert exc_info.value.message == "Incorrect email or password"
