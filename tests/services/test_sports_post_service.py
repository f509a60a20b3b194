import pytest
from fastapi import HTTPException

from sportsmeet.models.participant import Participant
from sportsmeet.schemas import sports_post_schemas
from sportsmeet.services import participant_service, sports_post_service


class TestSportsPostService:

    def test_create_sports_post(self, db, make_user, make_post):
        creator = make_user("Creator")

        post = make_post(creator, auto_approve=True, max_participants=6)

        assert post.id is not None
        assert post.creator_id == creator.id
        assert post.sport_type == "FOOTBALL"
        assert post.auto_approve is True
        assert post.current_participants == 0
        assert post.image_urls == []

    def test_update_by_creator(self, db, make_user, make_post):
        creator = make_user("Creator")
        post = make_post(creator)

        updated = sports_post_service.update_sports_post(
            db, post.id, sports_post_schemas.SportsPostUpdate(title="Saturday football", auto_approve=True), creator.id
        )

        assert updated.title == "Saturday football"
        assert updated.auto_approve is True
        assert updated.max_participants == 10

    def test_update_by_someone_else(self, db, make_user, make_post):
        creator = make_user("Creator")
        other = make_user("Other")
        post = make_post(creator)

        with pytest.raises(HTTPException) as exc_info:
            sports_post_service.update_sports_post(
                db, post.id, sports_post_schemas.SportsPostUpdate(title="Hijacked"), other.id
            )
        assert exc_info.value.status_code == 403

    def test_capacity_cannot_drop_below_accepted(self, db, make_user, make_post):
        creator = make_user("Creator")
        post = make_post(creator, auto_approve=True, max_participants=5)
        for name in ("Alice", "Bob"):
            participant_service.join_sports_post(db, post.id, make_user(name))

        with pytest.raises(HTTPException) as exc_info:
            sports_post_service.update_sports_post(
                db, post.id, sports_post_schemas.SportsPostUpdate(max_participants=1), creator.id
            )
        assert exc_info.value.status_code == 400

    def test_delete_removes_participants(self, db, make_user, make_post):
        creator = make_user("Creator")
        post = make_post(creator)
        participant_service.join_sports_post(db, post.id, make_user("Alice"))

        assert sports_post_service.delete_sports_post(db, post.id, creator.id) is True
        assert sports_post_service.get_sports_post(db, post.id) is None
        assert db.query(Participant).count() == 0

    def test_delete_unknown_post(self, db, make_user):
        with pytest.raises(HTTPException) as exc_info:
            sports_post_service.delete_sports_post(db, 12345, make_user("Creator").id)
        assert exc_info.value.status_code == 404

    def test_created_and_joined_posts(self, db, make_user, make_post):
        creator = make_user("Creator")
        alice = make_user("Alice")
        auto = make_post(creator, auto_approve=True, title="Open run")
        manual = make_post(creator, title="Invite-only match")
        participant_service.join_sports_post(db, auto.id, alice)
        participant_service.join_sports_post(db, manual.id, alice)

        created, created_total = sports_post_service.get_user_created_posts(db, creator.id)
        joined, joined_total = sports_post_service.get_user_joined_posts(db, alice.id)

        assert created_total == 2
        assert {p.id for p in created} == {auto.id, manual.id}
        # The pending request on the manual post does not count as joined
        assert joined_total == 1
        assert [p.id for p in joined] == [auto.id]

    def test_read_models_carry_viewer_status(self, db, make_user, make_post):
        creator = make_user("Creator")
        alice = make_user("Alice")
        auto = make_post(creator, auto_approve=True, title="Open run")
        manual = make_post(creator, title="Invite-only match")
        untouched = make_post(creator, title="Evening swim")
        participant_service.join_sports_post(db, auto.id, alice)
        participant_service.join_sports_post(db, manual.id, alice)

        posts = [auto, manual, untouched]
        as_alice = sports_post_service.to_read_models(db, posts, alice.id)
        anonymous = sports_post_service.to_read_models(db, posts)

        assert [p.participation_status for p in as_alice] == ["ACCEPTED", "PENDING", None]
        assert [p.participation_status for p in anonymous] == [None, None, None]
        assert as_alice[0].current_participants == 1
