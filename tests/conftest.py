import os
from datetime import datetime, timedelta

# Settings are read at import time; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from sportsmeet.core.database import Base, engine, SessionLocal
from sportsmeet.main import app
from sportsmeet.schemas import sports_post_schemas, user_schemas
from sportsmeet.services import auth_service, sports_post_service, user_service
from sportsmeet.client.token_store import TokenStore
from sportsmeet.client.participant_client import ParticipantClient


@pytest.fixture(autouse=True)
def clean_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make_user(name: str, email: str = None, password: str = "secret123"):
        email = email or f"{name.lower()}@example.com"
        return user_service.create_user(db, user_schemas.UserCreate(name=name, email=email, password=password))
    return _make_user


@pytest.fixture
def make_post(db):
    def _make_post(creator, auto_approve: bool = False, max_participants: int = 10, title: str = "Sunday football"):
        post_in = sports_post_schemas.SportsPostCreate(
            title=title,
            description="Friendly five-a-side",
            sport_type="FOOTBALL",
            location="City park",
            event_time=datetime.utcnow() + timedelta(days=3),
            max_participants=max_participants,
            auto_approve=auto_approve,
        )
        return sports_post_service.create_sports_post(db, post_in, creator_id=creator.id)
    return _make_post


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {auth_service.issue_access_token(user)}"}
    return _auth_headers


@pytest.fixture
def token_store_for(tmp_path):
    """A TokenStore already holding a valid token for the given user."""
    def _token_store_for(user=None):
        store = TokenStore(str(tmp_path / f"credentials_{user.id if user else 'anon'}.json"))
        if user is not None:
            store.save(auth_service.issue_access_token(user), user_data={"id": user.id, "email": user.email})
        return store
    return _token_store_for


@pytest.fixture
def api_client_for(client, token_store_for):
    """A ParticipantClient talking to the in-process app as the given user."""
    def _api_client_for(user):
        return ParticipantClient(base_url="", token_store=token_store_for(user), http_client=client)
    return _api_client_for
