import os

import pytest
from fastapi.testclient import TestClient

from booker.client import BookerClient
from booker.config import Configuration
from booker.data import BookingDataGenerator
from booker.fake_server import create_app
from booker.models import BookingResponse
from booker.session import AuthSession

# Scenarios run against the in-process stand-in unless BOOKER_LIVE=1,
# in which case they hit the configured base.url.
LIVE = os.environ.get("BOOKER_LIVE") == "1"


@pytest.fixture(scope="session")
def config():
    return Configuration.load()


@pytest.fixture(scope="session")
def client(config):
    if LIVE:
        with BookerClient(config) as c:
            yield c
        return
    with TestClient(create_app(username=config.auth_username, password=config.auth_password)) as http:
        yield BookerClient(config, http=http)


@pytest.fixture(scope="session")
def data(config):
    seed = os.environ.get("BOOKER_SEED")
    return BookingDataGenerator(
        seed=int(seed) if seed else None,
        username=config.auth_username,
        password=config.auth_password,
    )


@pytest.fixture(scope="class")
def auth_session(client, data):
    """Health check plus token bootstrap, once per test class."""
    r = client.health_check()
    assert r.status_code == 201
    assert r.text == "Created"

    session = AuthSession(client, data.valid_auth())
    assert session.token
    return session


@pytest.fixture
def token(auth_session):
    return auth_session.token


@pytest.fixture
def created_booking(client, data, auth_session):
    """A fresh booking owned by the calling test; removed afterwards."""
    booking = data.random_booking()
    r = client.create_booking(booking)
    assert r.status_code == 200
    created = BookingResponse.from_payload(r.json())
    yield created.booking_id, booking
    client.delete_booking(created.booking_id, token=auth_session.token)
