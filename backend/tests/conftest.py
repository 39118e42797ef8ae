import os

# Keep the app's own engine off the filesystem during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from team_scheduler.database import get_session  # noqa: E402
from team_scheduler.main import app  # noqa: E402
from team_scheduler.models import (  # noqa: E402
    GameSeries,
    SeriesTeam,
    Team,
    TeamMember,
)

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share the same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. App dependency overridden to use test_engine (see client_fixture)
# 4. Tables created per test and dropped afterwards
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a fresh schema"""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place for the
    entire duration so the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="roster")
def roster_fixture(session: Session):
    """
    A series with one linked team of six members (users 101-106) and a
    second, unlinked team with three members (users 201-203).
    """
    series = GameSeries(name="Tuesday Pickup", sport_type="Basketball", created_by=1)
    team = Team(name="Hoopers", created_by=1)
    other_team = Team(name="Bench", created_by=1)
    session.add(series)
    session.add(team)
    session.add(other_team)
    session.commit()

    session.add(SeriesTeam(series_id=series.id, team_id=team.id))
    for user_id in range(101, 107):
        session.add(TeamMember(team_id=team.id, user_id=user_id))
    for user_id in range(201, 204):
        session.add(TeamMember(team_id=other_team.id, user_id=user_id))
    session.commit()

    return {
        "series_id": series.id,
        "team_id": team.id,
        "other_team_id": other_team.id,
        "members": list(range(101, 107)),
    }
